"""Click-rate circuit breaker and idle timeout for authenticated sessions"""

from datetime import datetime, timedelta
from typing import Optional

from bankshield.domain.models import SessionState
from bankshield.domain.rate_limits import RateLimitedAction
from bankshield.utils.date_utils import format_countdown

CLICK_LIMIT = 15
FREEZE_DURATION = timedelta(minutes=15)
IDLE_TIMEOUT = timedelta(minutes=5)
ACTIVITY_EVENTS = frozenset({"mousemove", "keydown", "click", "scroll", "touchstart"})


class ClickRateBreaker(RateLimitedAction):
    """
    Freezes a session once more than CLICK_LIMIT interactions are recorded.

    Expiry is a checked timestamp: refresh() thaws the session when the
    freeze has run out, resetting the counter to zero. While frozen, clicks
    are not counted.
    """

    name = "click_rate"
    limit = CLICK_LIMIT
    duration = FREEZE_DURATION

    def refresh(self, session: SessionState, now: datetime) -> bool:
        """Thaw an expired freeze. Returns True if the session thawed on this call."""
        if session.frozen_until is not None and now >= session.frozen_until:
            session.frozen_until = None
            session.click_count = 0
            session.last_activity_at = now
            return True
        return False

    def record_click(self, session: SessionState, now: datetime) -> bool:
        """Count one interaction. Returns True if this click froze the session."""
        self.refresh(session, now)
        if session.is_frozen:
            return False

        session.click_count += 1
        if self.is_exceeded(session.click_count):
            session.frozen_until = now + self.duration
            return True
        return False

    def countdown(self, session: SessionState, now: datetime) -> Optional[str]:
        if session.frozen_until is None:
            return None
        return format_countdown(session.frozen_until - now)


class IdleTimeout:
    """Terminates sessions with no qualifying activity for IDLE_TIMEOUT"""

    def __init__(self, timeout: timedelta = IDLE_TIMEOUT, events: frozenset = ACTIVITY_EVENTS):
        self.timeout = timeout
        self.events = events

    def touch(self, session: SessionState, event_type: str, now: datetime) -> bool:
        """Reset the idle timer for a qualifying event; frozen sessions are not reset"""
        if event_type not in self.events or session.is_frozen:
            return False
        session.last_activity_at = now
        return True

    def is_expired(self, session: SessionState, now: datetime) -> bool:
        if session.is_frozen:
            return False
        return now - session.last_activity_at >= self.timeout
