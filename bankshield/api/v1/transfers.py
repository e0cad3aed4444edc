"""POST /v1/transfers - behavioral risk gated UPI and bank transfers"""

import time
import logging
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from bankshield.api.v1.schemas import (
    BankTransferRequest,
    BankTransferResponse,
    BehavioralSignalsSchema,
    RiskAssessmentResponse,
    UpiTransferRequest,
)
from bankshield.api.dependencies import SessionContext, get_request_id, get_risk_oracle, require_active_session
from bankshield.config import settings
from bankshield.domain.beneficiaries import bank_beneficiary, upsert_beneficiary
from bankshield.domain.models import Account, BehavioralSignals, RiskTier, SwipeGesture
from bankshield.domain.risk_gate import SessionRiskGate
from bankshield.infrastructure.clients.risk_oracle import RiskOracleClient
from bankshield.infrastructure.database.repositories import BeneficiaryRepository
from bankshield.infrastructure.database.session import get_db
from bankshield.infrastructure.observability.logging import log_risk_decision
from bankshield.infrastructure.observability.metrics import record_risk_tier

router = APIRouter()

TIER_MESSAGES = {
    RiskTier.LOW: "Transaction Approved",
    RiskTier.MEDIUM: "Step-Up Authentication Required",
    RiskTier.HIGH: "Transaction Blocked",
}


def to_signals(schema: BehavioralSignalsSchema, account: Account) -> BehavioralSignals:
    """Build the oracle signal bundle, falling back to the stored typing baseline"""
    baseline = schema.baseline_key_hold_times
    if baseline is None and account.baseline_key_hold_times:
        baseline = list(account.baseline_key_hold_times)
    return BehavioralSignals(
        tap_pressure=list(schema.tap_pressure),
        swipe_gestures=[SwipeGesture(angle=g.angle, speed=g.speed) for g in schema.swipe_gestures],
        key_hold_times=list(schema.key_hold_times),
        screen_navigation=list(schema.screen_navigation),
        ip=schema.ip,
        gyro_variance=schema.gyro_variance,
        session_duration=schema.session_duration,
        pasted_credentials=schema.pasted_credentials,
        baseline_key_hold_times=baseline,
    )


@router.post("/transfers/upi", response_model=RiskAssessmentResponse)
async def create_upi_transfer(
    request_body: UpiTransferRequest,
    request: Request,
    ctx: SessionContext = Depends(require_active_session),
    db: Session = Depends(get_db),
    risk_oracle: RiskOracleClient = Depends(get_risk_oracle),
):
    """
    Risk-assess a UPI transfer attempt.

    Flow:
    1. Send behavioral signals to the risk oracle (fails closed on any error)
    2. Tier the score: approve, step-up authentication, or block
    3. Save the recipient as a beneficiary unless blocked
    4. Return the assessment
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        signals = to_signals(request_body.signals, ctx.account)
        beneficiary_repo = BeneficiaryRepository(db)
        beneficiaries = beneficiary_repo.list_for_account(ctx.account.email)

        gate = SessionRiskGate(risk_oracle, timeout_seconds=settings.http_timeout_seconds)
        decision = await gate.evaluate_transfer(signals, request_body.recipient, beneficiaries)

        if decision.beneficiary_saved:
            beneficiary_repo.sync(ctx.account.email, beneficiaries)
        db.commit()

        duration_ms = (time.time() - start_time) * 1000
        record_risk_tier(decision.tier.value)
        log_risk_decision(
            request_id,
            ctx.account.email,
            decision.assessment.risk_score,
            decision.tier.value,
            decision.beneficiary_saved,
            duration_ms,
        )

        return RiskAssessmentResponse(
            risk_score=decision.assessment.risk_score,
            reasons=decision.assessment.reasons,
            tier=decision.tier.value,
            message=TIER_MESSAGES[decision.tier],
            approved=decision.approved,
            step_up_required=decision.step_up_required,
            blocked=decision.blocked,
            beneficiary_saved=decision.beneficiary_saved,
        )

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/transfers/bank", response_model=BankTransferResponse)
def create_bank_transfer(
    request_body: BankTransferRequest,
    ctx: SessionContext = Depends(require_active_session),
    db: Session = Depends(get_db),
):
    """NEFT/RTGS transfer. Not risk-gated; the payee is saved by account number."""
    beneficiary_repo = BeneficiaryRepository(db)
    beneficiaries = beneficiary_repo.list_for_account(ctx.account.email)
    saved = upsert_beneficiary(
        beneficiaries,
        bank_beneficiary(request_body.beneficiary_name, request_body.account_number, request_body.ifsc_code),
    )
    if saved:
        beneficiary_repo.sync(ctx.account.email, beneficiaries)
    db.commit()

    return BankTransferResponse(
        status="submitted",
        message=f"Transfer of {request_body.amount} to {request_body.beneficiary_name} initiated.",
        beneficiary_saved=saved,
    )
