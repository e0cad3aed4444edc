"""Session endpoints - status, interaction events and feature navigation"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from bankshield.api.v1.schemas import (
    FeatureRequest,
    FeatureResponse,
    InteractionEvent,
    InteractionResponse,
    SessionStatusResponse,
)
from bankshield.api.dependencies import SessionContext, get_request_id, get_session_context, require_active_session
from bankshield.domain.breaker import ClickRateBreaker, IdleTimeout
from bankshield.domain.models import AccessDecision
from bankshield.domain.throttle import AccessFrequencyThrottle
from bankshield.infrastructure.database.repositories import SessionRepository
from bankshield.infrastructure.database.session import get_db
from bankshield.infrastructure.observability.logging import log_security_event
from bankshield.infrastructure.observability.metrics import reauth_required_counter, session_freeze_counter

router = APIRouter()


@router.get("/session", response_model=SessionStatusResponse)
def get_session_status(ctx: SessionContext = Depends(get_session_context), db: Session = Depends(get_db)):
    """
    Current session state, including the freeze countdown.

    The new-device alert is reported once and then cleared.
    """
    session = ctx.session
    alert = session.new_device_login
    if alert:
        session.new_device_login = False
        SessionRepository(db).save(session)
        db.commit()

    return SessionStatusResponse(
        email=ctx.account.email,
        full_name=ctx.account.full_name,
        frozen=session.is_frozen,
        time_remaining=ClickRateBreaker().countdown(session, ctx.now),
        click_count=session.click_count,
        active_feature=session.active_feature,
        pay_and_transfer_access_count=AccessFrequencyThrottle().access_count(session),
        new_device_alert=alert,
        device_id=session.device_id,
        login_ip=session.login_ip,
        login_location=session.login_location,
    )


@router.post("/session/events", response_model=InteractionResponse)
def record_interaction(
    body: InteractionEvent,
    request: Request,
    ctx: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    """
    Report one UI interaction.

    Clicks feed the click-rate breaker; every qualifying event resets the
    idle timer. Events from a frozen session are accepted but ignored.
    """
    session = ctx.session
    breaker = ClickRateBreaker()

    if body.event_type == "click" and breaker.record_click(session, ctx.now):
        session_freeze_counter.inc()
        log_security_event(
            get_request_id(request),
            ctx.account.email,
            "session_frozen",
            click_count=session.click_count,
        )
    IdleTimeout().touch(session, body.event_type, ctx.now)

    SessionRepository(db).save(session)
    db.commit()
    return InteractionResponse(
        click_count=session.click_count,
        frozen=session.is_frozen,
        time_remaining=breaker.countdown(session, ctx.now),
    )


@router.post("/session/features", response_model=FeatureResponse)
def enter_feature(
    body: FeatureRequest,
    request: Request,
    ctx: SessionContext = Depends(require_active_session),
    db: Session = Depends(get_db),
):
    """Navigate to a feature; too many entries into Pay and Transfer demand a password"""
    throttle = AccessFrequencyThrottle()
    decision = throttle.enter_feature(ctx.session, body.feature)
    SessionRepository(db).save(ctx.session)
    db.commit()

    if decision is AccessDecision.REQUIRE_REAUTH:
        reauth_required_counter.inc()
        log_security_event(get_request_id(request), ctx.account.email, "reauth_required", feature=body.feature)
        raise HTTPException(
            status_code=403,
            detail={
                "code": "REAUTH_REQUIRED",
                "message": f"For your security, please re-enter your password to access {body.feature}.",
            },
        )

    logging.debug(f"Feature entered: {body.feature}")
    return FeatureResponse(active_feature=body.feature, access_count=throttle.access_count(ctx.session))
