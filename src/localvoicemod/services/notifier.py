from __future__ import annotations

import logging
from typing import Callable, Mapping, Optional

import discord

from ..interfaces import SettingsProvider, TemplateValue
from .stats import RuntimeStats
from .task_queue import TaskQueue

log = logging.getLogger("localvoicemod.notifier")

TEMPLATE_KEYS = ("msg_moderate", "msg_moderate_skip", "msg_moderate_end")

ChannelResolver = Callable[[], Optional[discord.abc.Messageable]]


def format_template(template: str, variables: Mapping[str, TemplateValue]) -> str:
    """Replace every ``{name}`` with its value; unknown placeholders stay as-is."""
    out = template
    for key, value in variables.items():
        out = out.replace("{" + key + "}", str(value))
    return out


class ChannelNotifier:
    """Posts status messages to the operator's notification channel.

    Delivery is queued; mentions are rendered but never ping anyone.
    """

    def __init__(
        self,
        *,
        settings: SettingsProvider,
        resolve_channel: ChannelResolver,
        queue: TaskQueue,
        stats: RuntimeStats,
    ) -> None:
        self._settings = settings
        self._resolve_channel = resolve_channel
        self._queue = queue
        self._stats = stats

    def render(self, template_key: str, variables: Mapping[str, TemplateValue]) -> Optional[str]:
        settings = self._settings()
        if not settings.ephemeral_messages_enabled:
            return None
        if template_key not in TEMPLATE_KEYS:
            log.warning("Unknown message template %r", template_key)
            return None
        template = getattr(settings, template_key) or ""
        if not template.strip():
            return None
        return format_template(template, variables)

    def emit(self, template_key: str, variables: Mapping[str, TemplateValue]) -> None:
        content = self.render(template_key, variables)
        if content is None:
            return
        channel = self._resolve_channel()
        if channel is None:
            log.debug("No notification channel available; dropping %s", template_key)
            return

        async def _send() -> None:
            try:
                await channel.send(content, allowed_mentions=discord.AllowedMentions.none())
                self._stats.messages_sent += 1
            except discord.HTTPException:
                log.exception("Failed to send notification")

        try:
            self._queue.submit(_send)
        except RuntimeError:
            log.warning("Task queue full; dropping %s notification", template_key)
