from __future__ import annotations

import logging
from typing import Any, Iterable

import discord
from discord.ext import commands

from .constants import COLORS, MAX_EMBED_DESCRIPTION, MAX_EMBED_TITLE

log = logging.getLogger("localvoicemod.utils")


def safe_embed(title: str, description: str, color: int = COLORS["default"]) -> discord.Embed:
    """Create an embed with safe length limits."""
    if len(title) > MAX_EMBED_TITLE:
        title = title[:MAX_EMBED_TITLE - 1] + "…"
    if len(description) > MAX_EMBED_DESCRIPTION:
        description = description[:MAX_EMBED_DESCRIPTION - 1] + "…"

    return discord.Embed(title=title, description=description, color=color)


def clip_lines(lines: Iterable[str], limit: int = MAX_EMBED_DESCRIPTION) -> str:
    """Join lines, dropping the tail (with a count) when over ``limit``."""
    lines = list(lines)
    out: list[str] = []
    used = 0
    for i, line in enumerate(lines):
        more = f"… and {len(lines) - i} more"
        if used + len(line) + 1 > limit - len(more) - 1:
            out.append(more)
            break
        out.append(line)
        used += len(line) + 1
    return "\n".join(out)


async def safe_response(
    target: discord.Interaction | commands.Context,
    content: str | None = None,
    embed: discord.Embed | None = None,
    ephemeral: bool = False,
    **kwargs: Any,
) -> bool:
    """Safely respond to an interaction or context with error handling."""
    try:
        if isinstance(target, discord.Interaction):
            if target.response.is_done():
                await target.followup.send(content=content, embed=embed, ephemeral=ephemeral, **kwargs)
            else:
                await target.response.send_message(
                    content=content, embed=embed, ephemeral=ephemeral, **kwargs
                )
        elif isinstance(target, commands.Context):
            await target.reply(content=content, embed=embed, **kwargs)
        return True
    except discord.HTTPException as e:
        log.error("Failed to send response: %s", e)
        return False


def error_embed(message: str) -> discord.Embed:
    """Create a standardized error embed."""
    return safe_embed("Error", message, COLORS["error"])


def info_embed(message: str) -> discord.Embed:
    """Create a standardized info embed."""
    return safe_embed("Information", message, COLORS["info"])
