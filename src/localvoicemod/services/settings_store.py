from __future__ import annotations

import json
import logging
from dataclasses import fields, replace
from typing import Any

import aiosqlite

from ..moderation.id_lists import add_id, parse_id_list, remove_id
from ..moderation.models import ModerationSettings
from ..moderation.volume import MAX_DISPLAY_VOLUME

log = logging.getLogger("localvoicemod.settings_store")

_FIELD_NAMES = {f.name for f in fields(ModerationSettings)}


def _coerce(name: str, value: Any, default: Any) -> Any:
    if isinstance(default, bool):
        return bool(value)
    if isinstance(default, int):
        value = int(value)
        if name == "target_volume":
            return min(MAX_DISPLAY_VOLUME, max(0, value))
        return max(0, value)
    return "" if value is None else str(value)


class SettingsStore:
    """SQLite-backed moderation settings with an in-memory snapshot.

    ``current`` is what the moderation core reads at every decision point; it
    always reflects the last successful write.
    """

    def __init__(self, sqlite_path: str, defaults: ModerationSettings | None = None) -> None:
        self._path = sqlite_path
        self._defaults = defaults or ModerationSettings()
        self._current = self._defaults

    @property
    def current(self) -> ModerationSettings:
        return self._current

    def __call__(self) -> ModerationSettings:
        return self._current

    async def init(self) -> None:
        async with aiosqlite.connect(self._path) as db:
            await db.execute(
                """
                CREATE TABLE IF NOT EXISTS moderation_settings (
                  key TEXT PRIMARY KEY,
                  value TEXT NOT NULL
                )
                """
            )
            await db.commit()
            async with db.execute("SELECT key, value FROM moderation_settings") as cur:
                rows = await cur.fetchall()

        loaded: dict[str, Any] = {}
        for key, raw in rows:
            if key not in _FIELD_NAMES:
                log.warning("Ignoring unknown setting %r", key)
                continue
            try:
                loaded[key] = _coerce(key, json.loads(raw), getattr(self._defaults, key))
            except (ValueError, TypeError):
                log.warning("Ignoring unreadable value for setting %r", key)
        self._current = replace(self._defaults, **loaded)
        log.info("SettingsStore initialized at %s (%d stored values)", self._path, len(loaded))

    async def update(self, **changes: Any) -> ModerationSettings:
        unknown = set(changes) - _FIELD_NAMES
        if unknown:
            raise KeyError(f"Unknown setting(s): {', '.join(sorted(unknown))}")
        coerced = {k: _coerce(k, v, getattr(self._defaults, k)) for k, v in changes.items() if v is not None}
        if not coerced:
            return self._current

        async with aiosqlite.connect(self._path) as db:
            await db.executemany(
                """
                INSERT INTO moderation_settings (key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value
                """,
                [(k, json.dumps(v)) for k, v in coerced.items()],
            )
            await db.commit()

        self._current = replace(self._current, **coerced)
        log.info("Settings updated: %s", ", ".join(sorted(coerced)))
        return self._current

    # -------------------------------------------------------------- id lists

    def whitelist(self) -> list[int]:
        return parse_id_list(self._current.whitelist)

    async def whitelist_add(self, user_id: int) -> bool:
        text, added = add_id(self._current.whitelist, user_id)
        if added:
            await self.update(whitelist=text)
        return added

    async def whitelist_remove(self, user_id: int) -> bool:
        text, removed = remove_id(self._current.whitelist, user_id)
        if removed:
            await self.update(whitelist=text)
        return removed

    def friends(self) -> list[int]:
        return parse_id_list(self._current.friends)

    async def friend_add(self, user_id: int) -> bool:
        text, added = add_id(self._current.friends, user_id)
        if added:
            await self.update(friends=text)
        return added

    async def friend_remove(self, user_id: int) -> bool:
        text, removed = remove_id(self._current.friends, user_id)
        if removed:
            await self.update(friends=text)
        return removed
