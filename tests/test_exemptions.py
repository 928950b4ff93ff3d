"""Tests for the exemption policy's ordering and reasons."""
from localvoicemod.moderation.exemptions import ExemptionPolicy
from localvoicemod.moderation.models import ModerationSettings
from localvoicemod.moderation.volume import CubicScaler, LinearScaler
from localvoicemod.testing.fakes import FakeIdentity, FakeRelationships

from conftest import ALICE, BOB, OPERATOR


def _policy(friends=(), scaler=None):
    return ExemptionPolicy(
        identity=FakeIdentity(OPERATOR),
        relationships=FakeRelationships(set(friends)),
        scaler=scaler or CubicScaler(),
    )


class TestExemptionPolicy:

    def test_disabled_is_a_silent_no_op(self):
        d = _policy().should_skip(ALICE, 100.0, ModerationSettings(plugin_enabled=False, whitelist=str(ALICE)))
        assert d.skip
        assert not d.report

    def test_self_is_never_reported(self):
        d = _policy().should_skip(OPERATOR, 100.0, ModerationSettings())
        assert d.skip
        assert not d.report

    def test_whitelist_wins_over_friend(self):
        d = _policy(friends={ALICE}).should_skip(ALICE, 100.0, ModerationSettings(whitelist=f"junk\n{ALICE}"))
        assert d.skip and d.report
        assert d.reason == "User is in the whitelist."

    def test_friend_skipped_only_when_enabled(self):
        policy = _policy(friends={ALICE})
        d = policy.should_skip(ALICE, 100.0, ModerationSettings(skip_friends=True))
        assert d.skip
        assert d.reason == "User is a friend."

        d = policy.should_skip(ALICE, 100.0, ModerationSettings(skip_friends=False))
        assert not d.skip

    def test_custom_volume_reason_reports_display_percent(self):
        # 12.5 internal on the cubic curve is 50% on the slider
        d = _policy().should_skip(BOB, 12.5, ModerationSettings(skip_custom_volume=True))
        assert d.skip
        assert d.reason == "User already has a custom volume (50%)."

    def test_custom_volume_rounds_to_whole_percent(self):
        d = _policy(scaler=LinearScaler()).should_skip(BOB, 73.6, ModerationSettings())
        assert d.reason == "User already has a custom volume (74%)."

    def test_custom_volume_ignored_when_disabled(self):
        d = _policy().should_skip(BOB, 12.5, ModerationSettings(skip_custom_volume=False))
        assert not d.skip

    def test_default_volume_proceeds(self):
        d = _policy().should_skip(BOB, 100.0, ModerationSettings())
        assert not d.skip

    def test_near_default_volume_is_still_custom(self):
        d = _policy(scaler=LinearScaler()).should_skip(BOB, 99.6, ModerationSettings(skip_custom_volume=True))
        assert d.skip
        assert d.reason == "User already has a custom volume (100%)."
