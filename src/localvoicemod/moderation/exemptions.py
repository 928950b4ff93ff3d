from __future__ import annotations

from ..interfaces import IdentityService, RelationshipService
from .id_lists import parse_id_list
from .models import PROCEED, ModerationSettings, SkipDecision
from .volume import VolumeScaler, display_percent, is_default


class ExemptionPolicy:
    """Decides whether a user is left alone.

    Checks run in a fixed order and the first match wins, so exactly one
    reason is ever reported for a skip.
    """

    def __init__(
        self,
        *,
        identity: IdentityService,
        relationships: RelationshipService,
        scaler: VolumeScaler,
    ) -> None:
        self.identity = identity
        self.relationships = relationships
        self.scaler = scaler

    def should_skip(self, user_id: int, current_volume: float, settings: ModerationSettings) -> SkipDecision:
        if not settings.plugin_enabled:
            return SkipDecision(skip=True, reason="disabled", report=False)

        if user_id == self.identity.get_current_user_id():
            return SkipDecision(skip=True, reason="self", report=False)

        if user_id in parse_id_list(settings.whitelist):
            return SkipDecision(skip=True, reason="User is in the whitelist.")

        if settings.skip_friends and self.relationships.is_friend(user_id):
            return SkipDecision(skip=True, reason="User is a friend.")

        if settings.skip_custom_volume and not is_default(self.scaler, current_volume):
            pct = display_percent(self.scaler, current_volume)
            return SkipDecision(skip=True, reason=f"User already has a custom volume ({pct}%).")

        return PROCEED
