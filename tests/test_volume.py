"""Tests for the display <-> internal volume curves."""
import pytest

from localvoicemod.moderation.volume import (
    CubicScaler,
    LinearScaler,
    build_scaler,
    display_percent,
    is_default,
)


class TestLinearScaler:

    def test_identity(self):
        s = LinearScaler()
        assert s.to_internal(50) == 50
        assert s.to_display(50) == 50

    def test_clamps_to_ceiling_and_floor(self):
        s = LinearScaler()
        assert s.to_internal(250) == 200
        assert s.to_internal(-5) == 0


class TestCubicScaler:

    def test_half_volume_is_an_eighth_internally(self):
        s = CubicScaler()
        assert s.to_internal(50) == pytest.approx(12.5)
        assert s.to_display(12.5) == pytest.approx(50)

    def test_default_and_boost(self):
        s = CubicScaler()
        assert s.to_internal(100) == pytest.approx(100)
        assert s.to_internal(200) == pytest.approx(800)
        assert s.to_display(800) == pytest.approx(200)

    def test_zero(self):
        s = CubicScaler()
        assert s.to_internal(0) == 0
        assert s.to_display(0) == 0

    def test_round_trip_within_tolerance(self):
        s = CubicScaler()
        for x in range(0, 201, 5):
            assert s.to_display(s.to_internal(x)) == pytest.approx(x, abs=1e-6)


def test_build_scaler_is_case_insensitive():
    assert isinstance(build_scaler("Cubic"), CubicScaler)
    assert isinstance(build_scaler(" linear "), LinearScaler)


def test_build_scaler_rejects_unknown_curve():
    with pytest.raises(ValueError, match="Unknown volume curve"):
        build_scaler("logarithmic")


def test_is_default_uses_display_scale():
    cubic = CubicScaler()
    assert is_default(cubic, 100.0)
    assert not is_default(cubic, 12.5)
    assert is_default(cubic, 100.0000000001)
    # Rounds to 100% for display but is still a custom volume
    assert not is_default(cubic, 99.9)
    assert not is_default(LinearScaler(), 99.6)
    assert not is_default(LinearScaler(), 100.4)
    assert display_percent(cubic, 12.5) == 50
