from __future__ import annotations

import logging
import time

import aiosqlite

from ..errors import VolumeServiceUnavailable
from ..interfaces import VolumeListener
from ..moderation.models import VolumeChange
from .task_queue import TaskQueue

log = logging.getLogger("localvoicemod.volume_store")

# Internal units for 100% on every curve.
DEFAULT_INTERNAL_VOLUME = 100.0


class LocalVolumeStore:
    """The operator's local per-user volume table.

    Reads and writes are served from memory so the moderation core never waits
    on SQLite; persistence is write-behind through the task queue. Every
    ``set_local_volume`` call is echoed to subscribers synchronously, in call
    order, whoever made it.
    """

    def __init__(self, sqlite_path: str, queue: TaskQueue) -> None:
        self._path = sqlite_path
        self._queue = queue
        self._volumes: dict[int, float] = {}
        self._listeners: list[VolumeListener] = []
        self._ready = False

    async def init(self) -> None:
        async with aiosqlite.connect(self._path) as db:
            await db.execute(
                """
                CREATE TABLE IF NOT EXISTS local_volumes (
                  user_id INTEGER PRIMARY KEY,
                  volume REAL NOT NULL,
                  updated_at INTEGER NOT NULL
                )
                """
            )
            await db.commit()
            async with db.execute("SELECT user_id, volume FROM local_volumes") as cur:
                rows = await cur.fetchall()

        self._volumes = {int(r[0]): float(r[1]) for r in rows}
        self._ready = True
        log.info("LocalVolumeStore loaded %d custom volumes from %s", len(self._volumes), self._path)

    def subscribe(self, listener: VolumeListener) -> None:
        self._listeners.append(listener)

    def get_local_volume(self, user_id: int) -> float:
        if not self._ready:
            raise VolumeServiceUnavailable("get_local_volume")
        return self._volumes.get(user_id, DEFAULT_INTERNAL_VOLUME)

    def set_local_volume(self, user_id: int, volume: float) -> None:
        if not self._ready:
            raise VolumeServiceUnavailable("set_local_volume")
        volume = max(0.0, float(volume))
        # Raises when the queue is full; memory is left untouched in that case.
        self._queue.submit(lambda: self._persist(user_id, volume))
        if volume == DEFAULT_INTERNAL_VOLUME:
            self._volumes.pop(user_id, None)
        else:
            self._volumes[user_id] = volume

        change = VolumeChange(user_id=user_id, volume=volume)
        for listener in list(self._listeners):
            try:
                listener(change)
            except Exception:
                log.exception("Volume listener failed for %s", user_id)

    def custom_volumes(self) -> dict[int, float]:
        if not self._ready:
            raise VolumeServiceUnavailable("custom_volumes")
        return dict(self._volumes)

    async def _persist(self, user_id: int, volume: float) -> None:
        async with aiosqlite.connect(self._path) as db:
            if volume == DEFAULT_INTERNAL_VOLUME:
                await db.execute("DELETE FROM local_volumes WHERE user_id = ?", (user_id,))
            else:
                await db.execute(
                    """
                    INSERT INTO local_volumes (user_id, volume, updated_at)
                    VALUES (?, ?, ?)
                    ON CONFLICT(user_id) DO UPDATE SET
                      volume = excluded.volume,
                      updated_at = excluded.updated_at
                    """,
                    (user_id, volume, int(time.time())),
                )
            await db.commit()
