from __future__ import annotations

from typing import Callable, Optional

import discord
from discord import app_commands

from ..base_cog import OperatorCog
from ..interfaces import VolumeControlService
from ..moderation.engine import stop_reason
from ..moderation.models import ModerationSettings
from ..moderation.volume import DEFAULT_DISPLAY_VOLUME, MAX_DISPLAY_VOLUME, VolumeScaler, display_percent, is_default
from ..utils import clip_lines


def format_volume_list(
    custom: dict[int, float],
    scaler: VolumeScaler,
    name_of: Callable[[int], str],
) -> list[str]:
    lines = []
    for user_id in sorted(custom):
        volume = custom[user_id]
        if is_default(scaler, volume):
            continue
        lines.append(f"• **{name_of(user_id)}** ({user_id}): {display_percent(scaler, volume)}%")
    return lines


def reset_all_volumes(volumes: VolumeControlService, scaler: VolumeScaler) -> int:
    """Put every customised user back to 100%; returns how many were changed."""
    default = scaler.to_internal(DEFAULT_DISPLAY_VOLUME)
    count = 0
    for user_id, volume in sorted(volumes.custom_volumes().items()):
        if is_default(scaler, volume):
            continue
        volumes.set_local_volume(user_id, default)
        count += 1
    return count


def format_settings(settings: ModerationSettings) -> str:
    duration = f"{settings.duration}s" if settings.duration > 0 else "until manually restored"
    return "\n".join(
        [
            f"**Enabled:** {settings.plugin_enabled}",
            f"**Messages:** {settings.ephemeral_messages_enabled}",
            f"**Target volume:** {settings.target_volume}%",
            f"**Duration:** {duration}",
            f"**Skip friends:** {settings.skip_friends}",
            f"**Skip custom volume:** {settings.skip_custom_volume}",
            f"**Moderate on join:** {settings.moderate_on_join}",
            f"**Restore on stop:** {settings.restore_on_stop}",
        ]
    )


def _mentions(ids: list[int]) -> str:
    return ", ".join(f"<@{i}>" for i in ids) or "None"


class VolumeCommandsCog(OperatorCog):
    """/vd commands: whitelist, friends, local volumes and settings."""

    vd = app_commands.Group(name="vd", description="Local voice moderation")

    def _name_of(self, user_id: int) -> str:
        user = self.bot.get_user(user_id)
        return user.name if user else str(user_id)

    # ------------------------------------------------------------- whitelist

    @vd.command(name="whitelist-add", description="Add a user to the voice moderation whitelist")
    async def whitelist_add(self, interaction: discord.Interaction, user: discord.User) -> None:
        store = self.bot.settings_store  # type: ignore[attr-defined]
        if not await store.whitelist_add(user.id):
            await interaction.response.send_message("❌ User already whitelisted.", ephemeral=True)
            return
        await interaction.response.send_message(f"✅ Added <@{user.id}> to voice mod whitelist.", ephemeral=True)

    @vd.command(name="whitelist-remove", description="Remove a user from the voice moderation whitelist")
    async def whitelist_remove(self, interaction: discord.Interaction, user: discord.User) -> None:
        await self.bot.settings_store.whitelist_remove(user.id)  # type: ignore[attr-defined]
        await interaction.response.send_message(f"✅ Removed <@{user.id}> from voice mod whitelist.", ephemeral=True)

    @vd.command(name="whitelist-list", description="List the voice moderation whitelist")
    async def whitelist_list(self, interaction: discord.Interaction) -> None:
        ids = self.bot.settings_store.whitelist()  # type: ignore[attr-defined]
        await interaction.response.send_message(
            embed=self.info_embed(f"**Voice Mod Whitelist:**\n{_mentions(ids)}"), ephemeral=True
        )

    # --------------------------------------------------------------- friends

    @vd.command(name="friend-add", description="Treat a user as a friend (skipped when skip-friends is on)")
    async def friend_add(self, interaction: discord.Interaction, user: discord.User) -> None:
        added = await self.bot.settings_store.friend_add(user.id)  # type: ignore[attr-defined]
        msg = f"✅ Added <@{user.id}> to friends." if added else "❌ User is already a friend."
        await interaction.response.send_message(msg, ephemeral=True)

    @vd.command(name="friend-remove", description="Remove a user from friends")
    async def friend_remove(self, interaction: discord.Interaction, user: discord.User) -> None:
        await self.bot.settings_store.friend_remove(user.id)  # type: ignore[attr-defined]
        await interaction.response.send_message(f"✅ Removed <@{user.id}> from friends.", ephemeral=True)

    # --------------------------------------------------------------- volumes

    @vd.command(name="volume-list", description="List all users you have set a custom volume for")
    async def volume_list(self, interaction: discord.Interaction) -> None:
        lines = format_volume_list(
            self.bot.volume_store.custom_volumes(),  # type: ignore[attr-defined]
            self.bot.scaler,  # type: ignore[attr-defined]
            self._name_of,
        )
        if not lines:
            await interaction.response.send_message("You haven't set custom volumes for any users.", ephemeral=True)
            return
        await interaction.response.send_message(
            embed=self.info_embed("**Custom User Volumes:**\n" + clip_lines(lines)), ephemeral=True
        )

    @vd.command(name="volume-reset-all", description="Reset all custom user volumes back to 100%")
    async def volume_reset_all(self, interaction: discord.Interaction) -> None:
        count = reset_all_volumes(self.bot.volume_store, self.bot.scaler)  # type: ignore[attr-defined]
        msg = (
            f"✅ Reset volumes for **{count}** users back to 100%."
            if count > 0
            else "ℹ️ No custom volumes found to reset."
        )
        await interaction.response.send_message(msg, ephemeral=True)

    @vd.command(name="volume-set", description="Set a user's local volume (ends any active moderation)")
    async def volume_set(
        self,
        interaction: discord.Interaction,
        user: discord.User,
        percent: app_commands.Range[int, 0, MAX_DISPLAY_VOLUME],
    ) -> None:
        scaler = self.bot.scaler  # type: ignore[attr-defined]
        self.bot.volume_store.set_local_volume(user.id, scaler.to_internal(percent))  # type: ignore[attr-defined]
        await interaction.response.send_message(f"✅ Set <@{user.id}> to {percent}%.", ephemeral=True)

    # -------------------------------------------------------------- settings

    @vd.command(name="toggle", description="Enable or disable automatic voice moderation")
    async def toggle(self, interaction: discord.Interaction) -> None:
        store = self.bot.settings_store  # type: ignore[attr-defined]
        settings = await store.update(plugin_enabled=not store.current.plugin_enabled)
        released = 0
        if not settings.plugin_enabled:
            released = self.bot.engine.release_all(stop_reason(settings))  # type: ignore[attr-defined]
        state = "enabled" if settings.plugin_enabled else "disabled"
        suffix = f" Released {released} active moderation(s)." if released else ""
        await interaction.response.send_message(f"✅ Voice moderation {state}.{suffix}", ephemeral=True)

    @vd.command(name="messages", description="Enable or disable status messages")
    async def messages(self, interaction: discord.Interaction) -> None:
        store = self.bot.settings_store  # type: ignore[attr-defined]
        settings = await store.update(ephemeral_messages_enabled=not store.current.ephemeral_messages_enabled)
        state = "enabled" if settings.ephemeral_messages_enabled else "disabled"
        await interaction.response.send_message(f"✅ Status messages {state}.", ephemeral=True)

    @vd.command(name="config", description="Show or change moderation settings")
    @app_commands.describe(
        target_volume="Volume to set for new users (0-200%)",
        duration="Seconds to keep the volume changed; 0 keeps it until restored manually",
    )
    async def config(
        self,
        interaction: discord.Interaction,
        target_volume: Optional[app_commands.Range[int, 0, MAX_DISPLAY_VOLUME]] = None,
        duration: Optional[app_commands.Range[int, 0, 86_400]] = None,
        skip_friends: Optional[bool] = None,
        skip_custom_volume: Optional[bool] = None,
        moderate_on_join: Optional[bool] = None,
        restore_on_stop: Optional[bool] = None,
    ) -> None:
        settings = await self.bot.settings_store.update(  # type: ignore[attr-defined]
            target_volume=target_volume,
            duration=duration,
            skip_friends=skip_friends,
            skip_custom_volume=skip_custom_volume,
            moderate_on_join=moderate_on_join,
            restore_on_stop=restore_on_stop,
        )
        await interaction.response.send_message(embed=self.info_embed(format_settings(settings)), ephemeral=True)

    @vd.command(name="status", description="Show active moderations and counters")
    async def status(self, interaction: discord.Interaction) -> None:
        engine = self.bot.engine  # type: ignore[attr-defined]
        stats = self.bot.stats  # type: ignore[attr-defined]
        lines = []
        for user_id in engine.active_user_ids():
            state = engine.get_override(user_id)
            if state is None:
                continue
            timer = "timed" if state.timer is not None else "indefinite"
            lines.append(
                f"• <@{user_id}>: {display_percent(engine.scaler, state.original_volume)}% -> "
                f"{display_percent(engine.scaler, state.target_volume)}% ({timer})"
            )
        body = [
            f"**Active moderations:** {len(lines)}",
            *lines,
            f"**Tracked members:** {len(self.bot.tracker.members)}",  # type: ignore[attr-defined]
            f"**Applied / released / skipped:** {stats.overrides_applied} / {stats.overrides_released} / {stats.skips_reported}",
            f"**Uptime:** {stats.uptime_seconds()}s",
        ]
        await interaction.response.send_message(embed=self.info_embed(clip_lines(body)), ephemeral=True)
