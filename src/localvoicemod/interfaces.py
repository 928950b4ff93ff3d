"""
Collaborator contracts for the moderation core.

The engine and tracker only ever see these protocols; the Discord-backed
implementations live in ``localvoicemod.services`` and in-memory doubles in
``localvoicemod.testing.fakes``.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping, Optional, Protocol, Union, runtime_checkable

from .moderation.models import ModerationSettings, VolumeChange

VolumeListener = Callable[[VolumeChange], None]
SettingsProvider = Callable[[], ModerationSettings]
TemplateValue = Union[str, int, float]


@runtime_checkable
class IdentityService(Protocol):
    """Who the operator is."""

    def get_current_user_id(self) -> Optional[int]:
        ...


@runtime_checkable
class PresenceService(Protocol):
    """Voice channel membership lookups."""

    def get_channel_members(self, channel_id: int) -> set[int]:
        ...

    def get_current_channel_of(self, user_id: int) -> Optional[int]:
        ...


@runtime_checkable
class RelationshipService(Protocol):
    def is_friend(self, user_id: int) -> bool:
        ...


@runtime_checkable
class VolumeControlService(Protocol):
    """The operator's local per-user volume table (internal units)."""

    def get_local_volume(self, user_id: int) -> float:
        """Current volume; the platform default when never set."""
        ...

    def set_local_volume(self, user_id: int, volume: float) -> None:
        """Set a volume and notify subscribers synchronously."""
        ...

    def subscribe(self, listener: VolumeListener) -> None:
        ...

    def custom_volumes(self) -> dict[int, float]:
        """Every user whose volume differs from the default."""
        ...


@runtime_checkable
class NotificationRelay(Protocol):
    def emit(self, template_key: str, variables: Mapping[str, TemplateValue]) -> None:
        """Format and deliver a status message; no-op when disabled."""
        ...


@runtime_checkable
class TimerHandle(Protocol):
    def cancel(self) -> None:
        ...


@runtime_checkable
class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], Any]) -> TimerHandle:
        """Run ``callback`` once after ``delay`` seconds."""
        ...


def validate_volume_service(service: object) -> VolumeControlService:
    """Validate and return VolumeControlService interface."""
    if not isinstance(service, VolumeControlService):
        raise AttributeError(f"Object {service} does not implement VolumeControlService interface")
    return service
