from __future__ import annotations

import math
from typing import Protocol

DEFAULT_DISPLAY_VOLUME = 100
MAX_DISPLAY_VOLUME = 200


def _clamp_display(display: float) -> float:
    return min(float(MAX_DISPLAY_VOLUME), max(0.0, float(display)))


class VolumeScaler(Protocol):
    name: str

    def to_internal(self, display: float) -> float: ...

    def to_display(self, internal: float) -> float: ...


class LinearScaler:
    """Internal units equal display percent."""

    name = "linear"

    def to_internal(self, display: float) -> float:
        return _clamp_display(display)

    def to_display(self, internal: float) -> float:
        return max(0.0, float(internal))


class CubicScaler:
    """Perceptual curve: internal = (display / 100) ** 3 * 100."""

    name = "cubic"

    def to_internal(self, display: float) -> float:
        return (_clamp_display(display) / 100.0) ** 3 * 100.0

    def to_display(self, internal: float) -> float:
        internal = max(0.0, float(internal))
        return (internal / 100.0) ** (1.0 / 3.0) * 100.0


_SCALERS = {
    "linear": LinearScaler,
    "cubic": CubicScaler,
}


def build_scaler(name: str) -> VolumeScaler:
    key = (name or "").strip().lower()
    try:
        return _SCALERS[key]()
    except KeyError:
        raise ValueError(f"Unknown volume curve {name!r}; expected one of {sorted(_SCALERS)}") from None


def display_percent(scaler: VolumeScaler, internal: float) -> int:
    """Rounded display percentage used in every user-facing message."""
    return int(round(scaler.to_display(internal)))


def is_default(scaler: VolumeScaler, internal: float) -> bool:
    """Exact comparison on the display scale; 99.6% is a custom volume."""
    return math.isclose(scaler.to_display(internal), DEFAULT_DISPLAY_VOLUME, abs_tol=1e-6)
