"""Access-frequency throttle for the sensitive Pay and Transfer feature"""

from typing import Optional

from bankshield.domain.models import AccessDecision, SessionState
from bankshield.domain.rate_limits import RateLimitedAction

GATED_FEATURE = "Pay and Transfer"
NEUTRAL_FEATURE = "Dashboard"
ACCESS_LIMIT = 3


class AccessFrequencyThrottle(RateLimitedAction):
    """
    Forces re-authentication after the gated feature is entered too often.

    Each entry increments first and then compares against the limit. The
    increment that crosses the limit is not stored, so the next attempt
    re-increments from the same value. Entering the neutral feature clears the
    counter; a successful re-authentication sets it to 1.
    """

    name = "feature_access"
    limit = ACCESS_LIMIT

    def __init__(self, gated_feature: str = GATED_FEATURE, neutral_feature: str = NEUTRAL_FEATURE):
        self.gated_feature = gated_feature
        self.neutral_feature = neutral_feature

    def enter_feature(self, session: SessionState, feature: str) -> AccessDecision:
        if feature == self.gated_feature:
            count = session.feature_access_counts.get(feature, 0) + 1
            if self.is_exceeded(count):
                session.pending_feature = feature
                return AccessDecision.REQUIRE_REAUTH
            session.feature_access_counts[feature] = count
        elif feature == self.neutral_feature:
            session.feature_access_counts.pop(self.gated_feature, None)

        session.active_feature = feature
        return AccessDecision.ALLOWED

    def complete_reauth(self, session: SessionState) -> Optional[str]:
        """Reset the counter after a good credential and activate the pending feature"""
        session.feature_access_counts[self.gated_feature] = 1
        feature = session.pending_feature or self.gated_feature
        session.pending_feature = None
        session.active_feature = feature
        return feature

    def access_count(self, session: SessionState) -> int:
        return session.feature_access_counts.get(self.gated_feature, 0)
