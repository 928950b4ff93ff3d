from __future__ import annotations

import logging
from typing import Iterable, Optional

from ..interfaces import IdentityService, PresenceService, SettingsProvider
from .engine import ModerationEngine
from .models import EndReason, VoiceStateChange

log = logging.getLogger("localvoicemod.tracker")


def collapse_batch(batch: Iterable[VoiceStateChange]) -> list[VoiceStateChange]:
    """Keep the last reported state per user, in order of first appearance."""
    latest: dict[int, VoiceStateChange] = {}
    for change in batch:
        latest[change.user_id] = change
    return list(latest.values())


class MembershipTracker:
    """Mirrors who shares the operator's voice channel.

    Joins are forwarded to ``ModerationEngine.apply_if_eligible`` and leaves to
    ``ModerationEngine.release(..., LEFT)``. Membership is tracked whether or
    not the user ended up moderated.
    """

    def __init__(
        self,
        *,
        engine: ModerationEngine,
        identity: IdentityService,
        presence: PresenceService,
        settings: SettingsProvider,
    ) -> None:
        self.engine = engine
        self.identity = identity
        self.presence = presence
        self._settings = settings
        self._members: set[int] = set()

    @property
    def members(self) -> frozenset[int]:
        return frozenset(self._members)

    def start(self) -> int:
        """Pick up whoever is already in the operator's channel."""
        me = self.identity.get_current_user_id()
        if me is None:
            return 0
        channel_id = self.presence.get_current_channel_of(me)
        if channel_id is None:
            return 0
        log.info("Started while in channel %s; tracking existing members", channel_id)
        return self._enter_channel(me, channel_id)

    def stop(self, reason: EndReason = EndReason.STOP) -> int:
        released = self.engine.release_all(reason)
        self._members.clear()
        return released

    def on_voice_state_updates(self, batch: Iterable[VoiceStateChange]) -> None:
        me = self.identity.get_current_user_id()
        if me is None:
            return

        changes = collapse_batch(batch)

        mine = next((c for c in changes if c.user_id == me), None)
        if mine is not None:
            if mine.channel_id is None and self.presence.get_current_channel_of(me) is not None:
                # Late leave from another guild; the operator is already elsewhere.
                log.info("Ignoring stale leave from channel %s", mine.previous_channel_id)
            elif mine.channel_id is None:
                log.info("Operator left voice; releasing everyone")
                self._members.clear()
                self.engine.release_all(EndReason.LEFT)
            elif mine.channel_id != mine.previous_channel_id:
                log.info("Operator moved to channel %s", mine.channel_id)
                self.engine.release_all(EndReason.LEFT)
                self._members.clear()
                self._enter_channel(me, mine.channel_id)

        current: Optional[int] = self.presence.get_current_channel_of(me)
        if current is None:
            return

        for change in changes:
            if change.user_id == me:
                continue
            if change.channel_id == current:
                if change.user_id not in self._members:
                    log.info("User %s joined the operator's channel", change.user_id)
                    self._members.add(change.user_id)
                    self.engine.apply_if_eligible(change.user_id)
            elif change.user_id in self._members:
                log.info("User %s left the operator's channel", change.user_id)
                self._members.discard(change.user_id)
                self.engine.release(change.user_id, EndReason.LEFT)

    def _enter_channel(self, me: int, channel_id: int) -> int:
        moderate = self._settings().moderate_on_join
        count = 0
        for user_id in sorted(self.presence.get_channel_members(channel_id)):
            if user_id == me:
                continue
            self._members.add(user_id)
            count += 1
            if moderate:
                self.engine.apply_if_eligible(user_id)
        return count
