"""Unit tests for the Pay and Transfer access-frequency throttle"""

import pytest
from datetime import datetime
from bankshield.domain.models import AccessDecision, SessionState
from bankshield.domain.throttle import GATED_FEATURE, NEUTRAL_FEATURE, AccessFrequencyThrottle


@pytest.fixture
def session() -> SessionState:
    now = datetime(2025, 6, 1, 12, 0, 0)
    return SessionState(token="tok", account_email="asha@example.com", started_at=now, last_activity_at=now)


def test_first_three_entries_are_allowed(session):
    throttle = AccessFrequencyThrottle()
    for expected in (1, 2, 3):
        assert throttle.enter_feature(session, GATED_FEATURE) is AccessDecision.ALLOWED
        assert throttle.access_count(session) == expected
    assert session.active_feature == GATED_FEATURE


def test_fourth_entry_requires_reauth_without_storing_the_increment(session):
    throttle = AccessFrequencyThrottle()
    for _ in range(3):
        throttle.enter_feature(session, GATED_FEATURE)
    session.active_feature = "Fixed Deposits"

    assert throttle.enter_feature(session, GATED_FEATURE) is AccessDecision.REQUIRE_REAUTH
    assert throttle.access_count(session) == 3
    assert session.pending_feature == GATED_FEATURE
    assert session.active_feature == "Fixed Deposits"

    # Every further attempt re-increments from the same stored value
    assert throttle.enter_feature(session, GATED_FEATURE) is AccessDecision.REQUIRE_REAUTH
    assert throttle.access_count(session) == 3


def test_dashboard_resets_the_counter(session):
    throttle = AccessFrequencyThrottle()
    throttle.enter_feature(session, GATED_FEATURE)
    throttle.enter_feature(session, GATED_FEATURE)

    assert throttle.enter_feature(session, NEUTRAL_FEATURE) is AccessDecision.ALLOWED
    assert throttle.access_count(session) == 0

    for _ in range(3):
        assert throttle.enter_feature(session, GATED_FEATURE) is AccessDecision.ALLOWED


def test_other_features_leave_the_counter_alone(session):
    throttle = AccessFrequencyThrottle()
    throttle.enter_feature(session, GATED_FEATURE)
    throttle.enter_feature(session, "Fixed Deposits")
    throttle.enter_feature(session, "Profile")
    assert throttle.access_count(session) == 1
    assert session.active_feature == "Profile"


def test_reauth_sets_counter_to_one_and_opens_pending_feature(session):
    throttle = AccessFrequencyThrottle()
    for _ in range(4):
        throttle.enter_feature(session, GATED_FEATURE)

    feature = throttle.complete_reauth(session)

    assert feature == GATED_FEATURE
    assert session.active_feature == GATED_FEATURE
    assert session.pending_feature is None
    assert throttle.access_count(session) == 1

    # Two more entries are allowed before the next prompt
    assert throttle.enter_feature(session, GATED_FEATURE) is AccessDecision.ALLOWED
    assert throttle.enter_feature(session, GATED_FEATURE) is AccessDecision.ALLOWED
    assert throttle.enter_feature(session, GATED_FEATURE) is AccessDecision.REQUIRE_REAUTH
