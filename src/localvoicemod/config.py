from __future__ import annotations

import os
from dataclasses import dataclass


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name, "").strip().lower()
    if not raw:
        return default
    return raw in {"1", "true", "yes", "y", "on"}


def _get_str(name: str, default: str) -> str:
    return os.getenv(name, default).strip() or default


@dataclass(frozen=True)
class Settings:
    token: str
    # The user whose voice channel is watched and whose local volumes are managed.
    operator_id: int
    # Text channel for status messages; 0 disables delivery.
    notify_channel_id: int
    sync_guild_id: int
    sqlite_path: str
    log_level: str
    # "cubic" matches the Discord client's slider; "linear" stores percentages as-is.
    volume_curve: str
    queue_max_batch: int
    queue_every_ms: int
    queue_max_size: int

    # Seed values for the settings table on first run
    default_target_volume: int = 50
    default_duration: int = 30
    default_messages_enabled: bool = False


def load_settings() -> Settings:
    token = os.getenv("DISCORD_TOKEN", "").strip()
    if not token:
        raise RuntimeError("DISCORD_TOKEN is required")
    operator_id = _get_int("OPERATOR_ID", 0)
    if not operator_id:
        raise RuntimeError("OPERATOR_ID is required")
    return Settings(
        token=token,
        operator_id=operator_id,
        notify_channel_id=_get_int("NOTIFY_CHANNEL_ID", 0),
        sync_guild_id=_get_int("SYNC_GUILD_ID", 0),
        sqlite_path=_get_str("SQLITE_PATH", "localvoicemod.sqlite3"),
        log_level=_get_str("LOG_LEVEL", "INFO"),
        volume_curve=_get_str("VOLUME_CURVE", "cubic"),
        queue_max_batch=_get_int("QUEUE_MAX_BATCH", 4),
        queue_every_ms=_get_int("QUEUE_EVERY_MS", 100),
        queue_max_size=_get_int("QUEUE_MAX_SIZE", 10_000),
        default_target_volume=_get_int("DEFAULT_TARGET_VOLUME", 50),
        default_duration=_get_int("DEFAULT_DURATION", 30),
        default_messages_enabled=_get_bool("DEFAULT_MESSAGES_ENABLED", False),
    )
