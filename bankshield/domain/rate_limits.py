"""Common shape of the counting policies: count -> threshold -> consequence -> reset.

Login lockout, the access-frequency throttle and the click-rate breaker are
kept as separate state machines (their scopes, thresholds and durations
differ); they only share this interface.
"""

from abc import ABC
from datetime import timedelta
from typing import Optional


class RateLimitedAction(ABC):
    """A counted action that trips once its counter passes a limit"""

    name: str = ""
    limit: int = 0
    duration: Optional[timedelta] = None  # how long the consequence lasts, if timed

    def is_exceeded(self, count: int) -> bool:
        """True once count is strictly past the allowed number of actions"""
        return count > self.limit
