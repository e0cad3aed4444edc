"""Risk scoring oracle client"""

from bankshield.domain.exceptions import OracleError
from bankshield.domain.models import BehavioralSignals, RiskAssessment
from bankshield.infrastructure.clients.base import OracleClient


def signals_payload(signals: BehavioralSignals) -> dict:
    """Serialize the signal bundle in the oracle's wire shape"""
    payload = {
        "tapPressure": signals.tap_pressure,
        "swipeGestures": [{"angle": g.angle, "speed": g.speed} for g in signals.swipe_gestures],
        "keyHoldTimes": signals.key_hold_times,
        "screenNavigation": signals.screen_navigation,
        "ip": signals.ip,
        "gyroVariance": signals.gyro_variance,
        "sessionDuration": signals.session_duration,
        "pastedCredentials": signals.pasted_credentials,
    }
    if signals.baseline_key_hold_times:
        payload["baselineKeyHoldTimes"] = signals.baseline_key_hold_times
    return payload


class RiskOracleClient(OracleClient):
    """Client for the behavioral risk scoring service"""

    oracle_name = "risk_score"

    async def score(self, signals: BehavioralSignals) -> RiskAssessment:
        """
        Ask the oracle for a risk score.

        Raises:
            OracleError: On transport failure or a response missing riskScore/reasons
        """
        data = await self._post("/risk-score", signals_payload(signals))
        try:
            return RiskAssessment(
                risk_score=data["riskScore"],
                reasons=list(data["reasons"]),
            )
        except (KeyError, TypeError) as e:
            raise OracleError(f"Invalid risk assessment from oracle: {e}") from e
