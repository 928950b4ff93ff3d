"""Tests for the pure helpers behind the /vd commands."""
from localvoicemod.cogs.volume_commands import format_settings, format_volume_list, reset_all_volumes
from localvoicemod.moderation.models import ModerationSettings
from localvoicemod.moderation.volume import build_scaler

from conftest import ALICE, BOB, CAROL


def test_volume_list_shows_display_percent_sorted_by_user():
    scaler = build_scaler("cubic")
    custom = {BOB: 337.5, ALICE: 12.5, CAROL: 100.0}
    names = {ALICE: "alice", BOB: "bob"}

    lines = format_volume_list(custom, scaler, lambda uid: names.get(uid, str(uid)))

    assert lines == [
        f"• **alice** ({ALICE}): 50%",
        f"• **bob** ({BOB}): 150%",
    ]


def test_volume_list_empty():
    assert format_volume_list({}, build_scaler("linear"), str) == []


def test_reset_all_ends_active_moderation_as_manual_change(harness):
    harness.engine.apply_if_eligible(ALICE)
    harness.volumes.volumes[BOB] = 40.0

    assert reset_all_volumes(harness.volumes, harness.engine.scaler) == 2

    assert harness.volumes.custom_volumes() == {}
    assert not harness.engine.is_active(ALICE)
    assert harness.emitted("msg_moderate_end") == [{"user_id": ALICE, "reason": "Manual volume change"}]


def test_reset_all_with_nothing_to_do(harness):
    assert reset_all_volumes(harness.volumes, harness.engine.scaler) == 0
    assert harness.volumes.set_calls == []


def test_format_settings_describes_indefinite_duration():
    text = format_settings(ModerationSettings(duration=0, target_volume=35))
    assert "**Target volume:** 35%" in text
    assert "until manually restored" in text


def test_near_default_volumes_are_listed_and_reset(harness):
    scaler = build_scaler("linear")
    custom = {ALICE: 99.6, BOB: 100.0}

    assert format_volume_list(custom, scaler, str) == [f"• **{ALICE}** ({ALICE}): 100%"]

    harness.volumes.volumes.update(custom)
    assert reset_all_volumes(harness.volumes, scaler) == 1
    assert harness.volumes.set_calls == [(ALICE, 100.0)]
