"""Session risk gate - tiers oracle risk scores into approve / step-up / block"""

import asyncio
import logging
import math
from typing import List, Optional, Protocol

from bankshield.domain.beneficiaries import upi_beneficiary, upsert_beneficiary
from bankshield.domain.exceptions import OracleError
from bankshield.domain.models import Beneficiary, BehavioralSignals, RiskAssessment, RiskTier, TransferDecision

logger = logging.getLogger(__name__)

MEDIUM_RISK_THRESHOLD = 0.4
HIGH_RISK_THRESHOLD = 0.7

FAIL_CLOSED_SCORE = 1.0
FAIL_CLOSED_REASONS = ["internal error", "assuming high risk as a precaution"]


class RiskScoringOracle(Protocol):
    async def score(self, signals: BehavioralSignals) -> RiskAssessment:
        ...


def classify_risk(score: float) -> RiskTier:
    """
    Map a risk score to a tier using half-open intervals.

    - [0.0, 0.4): LOW    - approve
    - [0.4, 0.7): MEDIUM - step-up authentication
    - [0.7, 1.0]: HIGH   - block

    A score sitting exactly on a boundary belongs to the higher tier.
    """
    if score < MEDIUM_RISK_THRESHOLD:
        return RiskTier.LOW
    elif score < HIGH_RISK_THRESHOLD:
        return RiskTier.MEDIUM
    else:
        return RiskTier.HIGH


def fail_closed_assessment() -> RiskAssessment:
    return RiskAssessment(risk_score=FAIL_CLOSED_SCORE, reasons=list(FAIL_CLOSED_REASONS))


def _check_assessment(assessment: RiskAssessment) -> RiskAssessment:
    score = assessment.risk_score
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        raise OracleError(f"Risk score is not a number: {score!r}")
    if math.isnan(score) or not 0.0 <= score <= 1.0:
        raise OracleError(f"Risk score out of range: {score}")
    if not isinstance(assessment.reasons, list):
        raise OracleError("Risk reasons must be a list")
    return RiskAssessment(risk_score=float(score), reasons=[str(r) for r in assessment.reasons])


class SessionRiskGate:
    """
    Forwards behavioral signals to the scoring oracle and tiers the answer.

    The gate performs no scoring itself. Any oracle failure - timeout,
    malformed answer, raised error - fails closed to the maximum score.
    """

    def __init__(self, oracle: RiskScoringOracle, timeout_seconds: Optional[float] = None):
        self.oracle = oracle
        self.timeout_seconds = timeout_seconds

    async def assess_transaction(self, signals: BehavioralSignals) -> RiskAssessment:
        try:
            call = self.oracle.score(signals)
            if self.timeout_seconds is not None:
                assessment = await asyncio.wait_for(call, timeout=self.timeout_seconds)
            else:
                assessment = await call
            return _check_assessment(assessment)
        except Exception as e:
            logger.warning(
                "Risk oracle failed, assuming high risk",
                extra={"step": "risk_assessment", "error": repr(e)},
            )
            return fail_closed_assessment()

    async def evaluate_transfer(
        self,
        signals: BehavioralSignals,
        recipient: Optional[str],
        beneficiaries: List[Beneficiary],
    ) -> TransferDecision:
        """
        Assess a transfer attempt. On LOW or MEDIUM risk, and only then, the
        recipient is upserted into beneficiaries (deduplicated by UPI id).
        """
        assessment = await self.assess_transaction(signals)
        tier = classify_risk(assessment.risk_score)

        saved = False
        if tier is not RiskTier.HIGH and recipient:
            saved = upsert_beneficiary(beneficiaries, upi_beneficiary(recipient))

        return TransferDecision(assessment=assessment, tier=tier, beneficiary_saved=saved)
