from __future__ import annotations

import discord
from discord.ext import commands

from ..base_cog import BaseCog
from ..services.presence import voice_state_change


class VoiceModerationCog(BaseCog):
    """Feeds gateway voice-state updates into the membership tracker."""

    def __init__(self, bot: commands.Bot) -> None:
        super().__init__(bot)
        self._started = False

    async def cog_unload(self) -> None:
        released = self.bot.shutdown_moderation()  # type: ignore[attr-defined]
        self._started = False
        self.log.info("Unloaded VoiceModerationCog (released=%d)", released)

    @commands.Cog.listener()
    async def on_ready(self) -> None:
        # on_ready fires again after a full reconnect; only snapshot once.
        if self._started:
            return
        self._started = True
        try:
            count = self.bot.tracker.start()  # type: ignore[attr-defined]
            self.log.info("Tracking %d members of the operator's channel", count)
        except Exception:
            self.log.exception("Failed to start membership tracking")

    @commands.Cog.listener()
    async def on_voice_state_update(
        self,
        member: discord.Member,
        before: discord.VoiceState,
        after: discord.VoiceState,
    ) -> None:
        change = voice_state_change(member, before, after)
        try:
            self.bot.tracker.on_voice_state_updates([change])  # type: ignore[attr-defined]
        except Exception:
            self.log.exception("Voice state update failed for %s", member.id)
