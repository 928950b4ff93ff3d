from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

import pytest

from localvoicemod.moderation.engine import ModerationEngine
from localvoicemod.moderation.exemptions import ExemptionPolicy
from localvoicemod.moderation.models import VoiceStateChange
from localvoicemod.moderation.tracker import MembershipTracker
from localvoicemod.moderation.volume import build_scaler
from localvoicemod.services.stats import RuntimeStats
from localvoicemod.testing.fakes import (
    FakeIdentity,
    FakeNotifier,
    FakePresence,
    FakeRelationships,
    FakeScheduler,
    FakeSettings,
    FakeVolumeControl,
)

OPERATOR = 100000000000000001
ALICE = 200000000000000002
BOB = 300000000000000003
CAROL = 400000000000000004
DAVE = 500000000000000005

HOME = 7001
OTHER = 7002


@dataclass
class Harness:
    settings: FakeSettings
    identity: FakeIdentity
    presence: FakePresence
    relationships: FakeRelationships
    volumes: FakeVolumeControl
    notifier: FakeNotifier
    scheduler: FakeScheduler
    stats: RuntimeStats
    engine: ModerationEngine
    tracker: MembershipTracker

    def voice(self, user_id: int, channel_id: int | None, previous: int | None = None) -> VoiceStateChange:
        """Move a user in the fake presence cache and return the matching update."""
        self.presence.move(user_id, channel_id)
        return VoiceStateChange(user_id=user_id, channel_id=channel_id, previous_channel_id=previous)

    def emitted(self, key: str) -> list[dict[str, Any]]:
        return [v for k, v in self.notifier.emitted if k == key]


@pytest.fixture
def make_harness() -> Callable[..., Harness]:
    def _make(curve: str = "cubic", **settings: Any) -> Harness:
        fake_settings = FakeSettings(**settings)
        identity = FakeIdentity(OPERATOR)
        presence = FakePresence()
        relationships = FakeRelationships()
        volumes = FakeVolumeControl()
        notifier = FakeNotifier()
        scheduler = FakeScheduler()
        stats = RuntimeStats()
        scaler = build_scaler(curve)

        engine = ModerationEngine(
            settings=fake_settings,
            policy=ExemptionPolicy(identity=identity, relationships=relationships, scaler=scaler),
            scaler=scaler,
            volumes=volumes,
            notifier=notifier,
            scheduler=scheduler,
            stats=stats,
        )
        volumes.subscribe(engine.on_volume_changed)
        tracker = MembershipTracker(engine=engine, identity=identity, presence=presence, settings=fake_settings)
        return Harness(
            settings=fake_settings,
            identity=identity,
            presence=presence,
            relationships=relationships,
            volumes=volumes,
            notifier=notifier,
            scheduler=scheduler,
            stats=stats,
            engine=engine,
            tracker=tracker,
        )

    return _make


@pytest.fixture
def harness(make_harness) -> Harness:
    return make_harness()
