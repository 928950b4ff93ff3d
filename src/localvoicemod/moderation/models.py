from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class EndReason(str, Enum):
    RESTORE = "restore"
    MANUAL = "manual"
    LEFT = "left"
    STOP = "stop"


DEFAULT_MSG_MODERATE = "🛡️ Moderating <@{user_id}>: {old_volume}% -> {new_volume}% ({duration}s)"
DEFAULT_MSG_MODERATE_SKIP = "🎙️ Skipping <@{user_id}>: {reason}"
DEFAULT_MSG_MODERATE_END = "🔄 Moderation ended for <@{user_id}>: {reason}"


@dataclass(frozen=True)
class ModerationSettings:
    """Snapshot of the operator-editable moderation settings.

    ``target_volume`` is a display percentage. ``duration`` is in seconds and
    ``0`` means the override never expires on its own.
    """

    plugin_enabled: bool = True
    ephemeral_messages_enabled: bool = False
    target_volume: int = 50
    duration: int = 30
    whitelist: str = ""
    friends: str = ""
    skip_friends: bool = True
    skip_custom_volume: bool = True
    moderate_on_join: bool = True
    restore_on_stop: bool = True
    msg_moderate: str = DEFAULT_MSG_MODERATE
    msg_moderate_skip: str = DEFAULT_MSG_MODERATE_SKIP
    msg_moderate_end: str = DEFAULT_MSG_MODERATE_END


@dataclass(frozen=True)
class Override:
    """An active local volume adjustment for one user (internal units)."""

    user_id: int
    original_volume: float
    target_volume: float
    # asyncio.TimerHandle or any object with an idempotent cancel()
    timer: Optional[Any] = None


@dataclass(frozen=True)
class SkipDecision:
    skip: bool
    reason: str = ""
    # False for silent no-ops (disabled, self-target)
    report: bool = True


PROCEED = SkipDecision(skip=False, report=False)


@dataclass(frozen=True)
class VoiceStateChange:
    """One entry of a presence batch."""

    user_id: int
    channel_id: Optional[int]
    previous_channel_id: Optional[int] = None


@dataclass(frozen=True)
class VolumeChange:
    user_id: int
    volume: float
