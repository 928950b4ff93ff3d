from __future__ import annotations

import logging

import discord
from discord import app_commands
from discord.ext import commands

from .constants import ERROR_MESSAGES
from .errors import VolumeServiceUnavailable
from .utils import error_embed, safe_response

log = logging.getLogger("localvoicemod.error_handlers")


class ErrorHandler(commands.Cog):
    """Centralized error handling for the bot."""

    def __init__(self, bot: commands.Bot) -> None:
        self.bot = bot
        self._previous_handler = bot.tree.on_error
        bot.tree.on_error = self.on_app_command_error

    async def cog_unload(self) -> None:
        self.bot.tree.on_error = self._previous_handler

    async def on_app_command_error(
        self,
        interaction: discord.Interaction,
        error: app_commands.AppCommandError,
    ) -> None:
        """Handle application command errors."""
        if isinstance(error, app_commands.CheckFailure):
            await safe_response(interaction, embed=error_embed(ERROR_MESSAGES["not_operator"]), ephemeral=True)
            return

        original = getattr(error, "original", error)
        if isinstance(original, VolumeServiceUnavailable):
            await safe_response(interaction, embed=error_embed(ERROR_MESSAGES["volume_unavailable"]), ephemeral=True)
            return

        log.exception("Unexpected error in app command %s", interaction.command, exc_info=original)
        await safe_response(interaction, embed=error_embed(ERROR_MESSAGES["unexpected"]), ephemeral=True)


async def setup_error_handlers(bot: commands.Bot) -> None:
    """Setup error handlers for the bot."""
    await bot.add_cog(ErrorHandler(bot))
