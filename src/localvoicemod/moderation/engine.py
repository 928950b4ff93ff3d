from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional

from ..errors import VolumeServiceUnavailable
from ..interfaces import NotificationRelay, Scheduler, SettingsProvider, VolumeControlService
from ..services.stats import RuntimeStats
from .exemptions import ExemptionPolicy
from .models import EndReason, ModerationSettings, Override, VolumeChange
from .volume import VolumeScaler, display_percent

log = logging.getLogger("localvoicemod.engine")

_END_MESSAGES = {
    EndReason.MANUAL: "Manual volume change",
    EndReason.LEFT: "User left",
}


def stop_reason(settings: ModerationSettings) -> EndReason:
    """How to end every override on disable or shutdown."""
    return EndReason.RESTORE if settings.restore_on_stop else EndReason.STOP


class ModerationEngine:
    """Owns every active override.

    A user is moderated exactly when an ``Override`` exists for them here.
    All methods are synchronous and must be called from the event loop that
    owns the bot; the only asynchronous trigger is the expiry timer, which
    funnels back into ``release``.
    """

    def __init__(
        self,
        *,
        settings: SettingsProvider,
        policy: ExemptionPolicy,
        scaler: VolumeScaler,
        volumes: VolumeControlService,
        notifier: NotificationRelay,
        scheduler: Scheduler,
        stats: Optional[RuntimeStats] = None,
    ) -> None:
        self._settings = settings
        self.policy = policy
        self.scaler = scaler
        self.volumes = volumes
        self.notifier = notifier
        self.scheduler = scheduler
        self.stats = stats or RuntimeStats()
        self._overrides: dict[int, Override] = {}

    # ------------------------------------------------------------------ queries

    def is_active(self, user_id: int) -> bool:
        return user_id in self._overrides

    def get_override(self, user_id: int) -> Optional[Override]:
        return self._overrides.get(user_id)

    def active_user_ids(self) -> list[int]:
        return list(self._overrides)

    # ---------------------------------------------------------------- lifecycle

    def apply_if_eligible(self, user_id: int) -> bool:
        """Start moderating ``user_id`` unless exempt or already moderated."""
        if user_id in self._overrides:
            return False

        settings = self._settings()
        try:
            current = self.volumes.get_local_volume(user_id)
        except VolumeServiceUnavailable as e:
            log.warning("Not moderating %s: %s", user_id, e)
            return False

        decision = self.policy.should_skip(user_id, current, settings)
        if decision.skip:
            if decision.report:
                log.info("Skipping %s: %s", user_id, decision.reason)
                self.stats.skips_reported += 1
                self.notifier.emit("msg_moderate_skip", {"user_id": user_id, "reason": decision.reason})
            return False

        target = self.scaler.to_internal(settings.target_volume)
        duration = max(0, int(settings.duration or 0))

        try:
            self.volumes.set_local_volume(user_id, target)
        except VolumeServiceUnavailable as e:
            log.warning("Not moderating %s: %s", user_id, e)
            return False

        # Must exist before notifying or scheduling, either of which can raise.
        self._overrides[user_id] = Override(user_id=user_id, original_volume=current, target_volume=target)
        self.stats.overrides_applied += 1

        old_pct = display_percent(self.scaler, current)
        new_pct = display_percent(self.scaler, target)
        log.info("Moderating %s: %s%% -> %s%% (%ss)", user_id, old_pct, new_pct, duration)
        self.notifier.emit(
            "msg_moderate",
            {"user_id": user_id, "old_volume": old_pct, "new_volume": new_pct, "duration": duration},
        )

        if duration > 0 and user_id in self._overrides:
            timer = self.scheduler.call_later(duration, lambda: self.release(user_id, EndReason.RESTORE))
            self._overrides[user_id] = replace(self._overrides[user_id], timer=timer)
        return True

    def release(self, user_id: int, reason: EndReason) -> bool:
        """End moderation for ``user_id``; a no-op when none is active."""
        state = self._overrides.get(user_id)
        if state is None:
            return False

        if state.timer is not None:
            state.timer.cancel()
        # Must be gone before any volume call so our own echo is not seen as manual.
        del self._overrides[user_id]
        self.stats.overrides_released += 1

        if reason is EndReason.RESTORE:
            pct = display_percent(self.scaler, state.original_volume)
            log.info("Restoring volume for %s to %s%%", user_id, pct)
            try:
                self.volumes.set_local_volume(user_id, state.original_volume)
            except VolumeServiceUnavailable as e:
                log.warning("Could not restore volume for %s: %s", user_id, e)
                return True
            self.notifier.emit("msg_moderate_end", {"user_id": user_id, "reason": f"Volume restored to {pct}%"})
        elif reason is EndReason.STOP:
            log.info("Ending moderation for %s due to plugin stop", user_id)
        else:
            log.info("Ending moderation for %s: %s", user_id, reason.value)
            self.notifier.emit("msg_moderate_end", {"user_id": user_id, "reason": _END_MESSAGES[reason]})
        return True

    def release_all(self, reason: EndReason) -> int:
        if not self._overrides:
            return 0
        user_ids = list(self._overrides)
        log.info("Releasing %d users for reason: %s", len(user_ids), reason.value)
        released = 0
        for user_id in user_ids:
            if self.release(user_id, reason):
                released += 1
        return released

    # ------------------------------------------------------------------- events

    def on_volume_changed(self, change: VolumeChange) -> None:
        state = self._overrides.get(change.user_id)
        if state is None:
            return
        if change.volume != state.target_volume:
            log.info("Manual volume change detected for %s; cancelling moderation", change.user_id)
            self.stats.manual_changes_detected += 1
            self.release(change.user_id, EndReason.MANUAL)
