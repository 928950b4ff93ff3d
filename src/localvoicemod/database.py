from __future__ import annotations

import logging
from typing import Awaitable, Protocol, Sequence

import aiosqlite

log = logging.getLogger("localvoicemod.database")


class Store(Protocol):
    def init(self) -> Awaitable[None]:
        ...


async def initialize_database(sqlite_path: str, stores: Sequence[Store]) -> None:
    """Initialize the database with all stores."""
    try:
        async with aiosqlite.connect(sqlite_path) as db:
            await db.execute("PRAGMA journal_mode=WAL")
            await db.execute("PRAGMA synchronous=NORMAL")
            await db.commit()

        log.info("Applied SQLite optimizations")

        for store in stores:
            await store.init()
            log.info("Initialized %s", store.__class__.__name__)

        log.info("Database initialization completed")

    except Exception as e:
        log.error("Failed to initialize database: %s", e)
        raise
