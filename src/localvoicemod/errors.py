from __future__ import annotations


class LocalVoiceModError(Exception):
    """Base class for errors raised by localvoicemod."""


class VolumeServiceUnavailable(LocalVoiceModError):
    """The local volume table has not been loaded yet."""

    def __init__(self, operation: str) -> None:
        super().__init__(f"Volume control is not ready (during {operation})")
        self.operation = operation
