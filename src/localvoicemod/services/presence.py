from __future__ import annotations

import logging
from typing import Optional

import discord

from ..moderation.models import VoiceStateChange
from .settings_store import SettingsStore

log = logging.getLogger("localvoicemod.presence")


def voice_state_change(
    member: discord.abc.Snowflake,
    before: discord.VoiceState,
    after: discord.VoiceState,
) -> VoiceStateChange:
    return VoiceStateChange(
        user_id=member.id,
        channel_id=after.channel.id if after.channel else None,
        previous_channel_id=before.channel.id if before.channel else None,
    )


class DiscordPresence:
    """Identity, presence and relationship lookups over the discord.py cache.

    The operator is the configured ``OPERATOR_ID``; friendship is the
    operator-maintained friend list in the settings store.
    """

    def __init__(self, bot: discord.Client, operator_id: int, settings_store: SettingsStore) -> None:
        self._bot = bot
        self._operator_id = operator_id
        self._settings_store = settings_store

    def get_current_user_id(self) -> Optional[int]:
        return self._operator_id or None

    def get_channel_members(self, channel_id: int) -> set[int]:
        channel = self._bot.get_channel(channel_id)
        if not isinstance(channel, (discord.VoiceChannel, discord.StageChannel)):
            return set()
        return set(channel.voice_states.keys())

    def get_current_channel_of(self, user_id: int) -> Optional[int]:
        for guild in self._bot.guilds:
            member = guild.get_member(user_id)
            if member is not None and member.voice is not None and member.voice.channel is not None:
                return member.voice.channel.id
        return None

    def is_friend(self, user_id: int) -> bool:
        return user_id in self._settings_store.friends()
