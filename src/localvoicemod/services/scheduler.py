from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Optional

log = logging.getLogger("localvoicemod.scheduler")


class LoopScheduler:
    """One-shot timers on the bot's event loop.

    ``asyncio.TimerHandle.cancel`` is idempotent and safe after the handle has
    fired, which is what override release relies on.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def call_later(self, delay: float, callback: Callable[[], Any]) -> asyncio.TimerHandle:
        def _fire() -> None:
            try:
                callback()
            except Exception:
                log.exception("Scheduled callback failed")

        return self._get_loop().call_later(max(0.0, float(delay)), _fire)
