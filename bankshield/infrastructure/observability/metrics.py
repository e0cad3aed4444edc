"""Prometheus metrics for risk tiers, lockouts, freezes and oracle health"""

from prometheus_client import Counter, Histogram

# Risk gate
risk_tier_counter = Counter(
    "bankshield_risk_tier_total",
    "Transfer risk assessments by tier",
    ["tier"],  # low | medium | high
)

# Authentication
login_outcome_counter = Counter(
    "bankshield_login_total",
    "Login attempts by method and outcome",
    ["method", "outcome"],
)

reauth_required_counter = Counter(
    "bankshield_reauth_required_total",
    "Gated feature entries that required re-authentication",
)

# Session policies
session_freeze_counter = Counter(
    "bankshield_session_freeze_total",
    "Sessions frozen by the click-rate breaker",
)

session_expired_counter = Counter(
    "bankshield_session_expired_total",
    "Sessions terminated for inactivity or unreadable records",
    ["reason"],
)

withdrawal_outcome_counter = Counter(
    "bankshield_withdrawal_outcome_total",
    "Premature withdrawal attempts by outcome",
    ["outcome"],
)

# Oracles
oracle_latency_histogram = Histogram(
    "oracle_latency_seconds",
    "External oracle response time",
    ["oracle"],
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

oracle_failure_counter = Counter(
    "oracle_failures_total",
    "Failed oracle calls",
    ["oracle"],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_risk_tier(tier: str) -> None:
    risk_tier_counter.labels(tier=tier).inc()


def record_login(method: str, outcome: str) -> None:
    login_outcome_counter.labels(method=method, outcome=outcome).inc()
