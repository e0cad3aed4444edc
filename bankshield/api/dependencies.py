"""Dependency injection for FastAPI endpoints"""

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import InvalidOperation
from typing import Callable, Optional
from fastapi import Depends, Header, HTTPException, Request
from sqlalchemy.orm import Session
from bankshield.domain.breaker import ClickRateBreaker, IdleTimeout
from bankshield.domain.exceptions import SessionTerminatedError
from bankshield.domain.models import Account, SessionState
from bankshield.infrastructure.clients.geo import IpLocatorClient
from bankshield.infrastructure.clients.risk_oracle import RiskOracleClient
from bankshield.infrastructure.clients.verification import AssistantClient, SignatureClient, VoiceClient
from bankshield.infrastructure.database.repositories import AccountRepository, SessionRepository
from bankshield.infrastructure.database.session import get_db
from bankshield.infrastructure.observability.metrics import session_expired_counter
from bankshield.utils.date_utils import utc_now

Clock = Callable[[], datetime]


@dataclass
class SessionContext:
    """The authenticated session and its account, loaded for one request"""

    session: SessionState
    account: Account
    now: datetime


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_clock() -> Clock:
    """Provide the wall clock (overridden in tests)"""
    return utc_now


def get_risk_oracle() -> RiskOracleClient:
    """Provide risk scoring oracle client instance"""
    return RiskOracleClient()


def get_signature_client() -> SignatureClient:
    return SignatureClient()


def get_voice_client() -> VoiceClient:
    return VoiceClient()


def get_assistant_client() -> AssistantClient:
    return AssistantClient()


def get_ip_locator() -> IpLocatorClient:
    return IpLocatorClient()


def _terminate(db: Session, token: str, reason: str, detail: str) -> SessionTerminatedError:
    SessionRepository(db).delete(token)
    db.commit()
    session_expired_counter.labels(reason=reason).inc()
    logging.info("Session terminated", extra={"step": "session_terminated", "reason": reason})
    return SessionTerminatedError(detail)


def get_session_context(
    x_session_token: Optional[str] = Header(None),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> SessionContext:
    """
    Load the caller's session.

    Unreadable session/account records, a missing account, or an idle
    timeout terminate the session and answer 401. An expired click-rate
    freeze is thawed here.
    """
    if not x_session_token:
        raise HTTPException(status_code=401, detail={"code": "NOT_AUTHENTICATED", "message": "Please log in."})

    now = clock()
    sessions = SessionRepository(db)
    try:
        state = sessions.get(x_session_token)
        if state is None:
            raise HTTPException(status_code=401, detail={"code": "NOT_AUTHENTICATED", "message": "Please log in."})
        account = AccountRepository(db).get(state.account_email)
    except (ValueError, TypeError, KeyError, InvalidOperation) as e:
        logging.error(f"Unreadable session or account record: {e}")
        raise _terminate(db, x_session_token, "corrupt_record", "Your session could not be restored. Please log in again.")

    if account is None:
        raise _terminate(db, x_session_token, "missing_account", "Your session could not be restored. Please log in again.")

    if ClickRateBreaker().refresh(state, now):
        sessions.save(state)
        db.commit()

    if IdleTimeout().is_expired(state, now):
        raise _terminate(db, x_session_token, "idle", "You have been logged out due to inactivity.")

    return SessionContext(session=state, account=account, now=now)


def require_active_session(ctx: SessionContext = Depends(get_session_context)) -> SessionContext:
    """Reject requests from a session frozen by the click-rate breaker"""
    if ctx.session.is_frozen:
        raise HTTPException(
            status_code=423,
            detail={
                "code": "SESSION_FROZEN",
                "message": "Due to unusual activity, your session is frozen.",
                "time_remaining": ClickRateBreaker().countdown(ctx.session, ctx.now),
            },
        )
    return ctx
