from __future__ import annotations

import logging

import discord
from discord.ext import commands

from .utils import info_embed

log = logging.getLogger("localvoicemod.base_cog")


class BaseCog(commands.Cog):
    """Base class for all cogs with common functionality."""

    def __init__(self, bot: commands.Bot) -> None:
        self.bot = bot
        self.log = logging.getLogger(f"localvoicemod.cog.{self.__class__.__name__.lower()}")

    async def cog_load(self) -> None:
        """Called when the cog is loaded."""
        self.log.info("Loaded %s", self.__class__.__name__)

    async def cog_unload(self) -> None:
        """Called when the cog is unloaded."""
        self.log.info("Unloaded %s", self.__class__.__name__)

    def info_embed(self, message: str) -> discord.Embed:
        return info_embed(message)


class OperatorCog(BaseCog):
    """Base class for cogs whose commands only the operator may run."""

    def operator_id(self) -> int:
        return int(getattr(self.bot, "operator_id", 0) or 0)

    async def interaction_check(self, interaction: discord.Interaction) -> bool:
        """Failing here surfaces as app_commands.CheckFailure in the error handler."""
        return interaction.user.id == self.operator_id()
