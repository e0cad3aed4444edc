"""Authentication endpoints - registration, the four login methods, re-auth and logout"""

import logging
import secrets
import uuid
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from bankshield.api.v1.schemas import (
    LoginResponse,
    MnemonicLoginRequest,
    PasswordLoginRequest,
    ReauthRequest,
    ReauthResponse,
    RecoveryAnswerRequest,
    RecoveryQuestionRequest,
    RecoveryQuestionResponse,
    RegisterRequest,
    RegisterResponse,
    VoiceEnrollRequest,
    VoiceEnrollResponse,
    VoiceLoginRequest,
)
from bankshield.api.dependencies import (
    Clock,
    SessionContext,
    get_clock,
    get_ip_locator,
    get_request_id,
    get_session_context,
    get_voice_client,
    require_active_session,
)
from bankshield.config import settings
from bankshield.domain.credentials import PlaintextCredentialVerifier
from bankshield.domain.exceptions import AccountExistsError, AccountNotFoundError, InvalidRequestError, OracleError
from bankshield.domain.lockout import AccountLockoutPolicy
from bankshield.domain.models import Account, LoginStatus, SessionState
from bankshield.domain.registration import register_account
from bankshield.domain.throttle import AccessFrequencyThrottle
from bankshield.domain.verification import mnemonic_matches, security_answer_matches, verify_voice
from bankshield.infrastructure.clients.geo import IpLocatorClient
from bankshield.infrastructure.clients.verification import VoiceClient
from bankshield.infrastructure.database.repositories import AccountRepository, DeviceRepository, SessionRepository
from bankshield.infrastructure.database.session import get_db
from bankshield.infrastructure.observability.logging import log_security_event
from bankshield.infrastructure.observability.metrics import record_login

router = APIRouter()

INVALID_LOGIN = "Invalid email or password."


async def open_session(
    db: Session,
    account: Account,
    locator: IpLocatorClient,
    now,
    device_id: Optional[str],
    ip: Optional[str],
) -> LoginResponse:
    """Create a session for a verified account and record the login device"""
    device_id = device_id or f"device_{uuid.uuid4().hex}"
    ip = ip or settings.default_login_ip
    location = await locator.describe(ip)
    new_device = DeviceRepository(db).remember(account.email, device_id)

    state = SessionState(
        token=secrets.token_urlsafe(32),
        account_email=account.email,
        started_at=now,
        last_activity_at=now,
        device_id=device_id,
        login_ip=ip,
        login_location=location,
        new_device_login=new_device,
    )
    SessionRepository(db).create(state)
    db.commit()

    return LoginResponse(
        session_token=state.token,
        email=account.email,
        device_id=device_id,
        new_device=new_device,
        login_ip=ip,
        login_location=location,
    )


@router.post("/auth/register", response_model=RegisterResponse, status_code=201)
def register(body: RegisterRequest, db: Session = Depends(get_db)):
    """
    Create an account and capture the typing baseline.

    Returns the 12-word recovery mnemonic; it is not shown again.
    """
    accounts = AccountRepository(db)
    if accounts.exists(body.email):
        raise AccountExistsError("An account with this email already exists.")

    account = register_account(
        email=body.email,
        full_name=body.full_name,
        mobile=body.mobile,
        birth_date=body.dob,
        gender=body.gender,
        password=body.password,
        security_question=body.security_question,
        security_answer=body.security_answer,
        key_hold_times=body.key_hold_times,
    )
    accounts.create(account)
    db.commit()
    return RegisterResponse(email=account.email, mnemonic=account.mnemonic)


@router.post("/auth/login", response_model=LoginResponse)
async def login_with_password(
    body: PasswordLoginRequest,
    request: Request,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    locator: IpLocatorClient = Depends(get_ip_locator),
):
    """
    Primary credential login, guarded by the account lockout policy.

    - 401 on a wrong password, with the attempts remaining
    - 423 while the account is locked, with the minutes remaining
    """
    request_id = get_request_id(request)
    now = clock()
    accounts = AccountRepository(db)
    account = accounts.get(body.email)
    if account is None:
        record_login("password", "unknown_account")
        raise HTTPException(status_code=401, detail={"code": "INVALID_CREDENTIALS", "message": INVALID_LOGIN})

    result = AccountLockoutPolicy().attempt_login(account, body.password, now)
    accounts.save(account)
    db.commit()
    record_login("password", result.status.value)

    if result.status is LoginStatus.LOCKED:
        log_security_event(
            request_id,
            account.email,
            "account_locked",
            minutes_remaining=result.lockout_minutes_remaining,
        )
        raise HTTPException(
            status_code=423,
            detail={
                "code": "ACCOUNT_LOCKED",
                "message": result.message,
                "minutes_remaining": result.lockout_minutes_remaining,
            },
        )
    if result.status is LoginStatus.INVALID_CREDENTIALS:
        raise HTTPException(
            status_code=401,
            detail={
                "code": "INVALID_CREDENTIALS",
                "message": result.message,
                "remaining_attempts": result.remaining_attempts,
            },
        )

    return await open_session(db, account, locator, now, body.device_id, body.ip)


@router.post("/auth/login/mnemonic", response_model=LoginResponse)
async def login_with_mnemonic(
    body: MnemonicLoginRequest,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    locator: IpLocatorClient = Depends(get_ip_locator),
):
    """Recovery-phrase login. Does not consult or update the lockout state."""
    account = AccountRepository(db).get(body.email)
    if account is None or not mnemonic_matches(account, body.mnemonic):
        record_login("mnemonic", "invalid_credentials")
        raise HTTPException(
            status_code=401,
            detail={"code": "INVALID_CREDENTIALS", "message": "Invalid email or mnemonic phrase."},
        )
    record_login("mnemonic", "success")
    return await open_session(db, account, locator, clock(), body.device_id, body.ip)


@router.post("/auth/recovery/question", response_model=RecoveryQuestionResponse)
def get_security_question(body: RecoveryQuestionRequest, db: Session = Depends(get_db)):
    account = AccountRepository(db).get(body.email)
    if account is None or not account.security_question:
        raise AccountNotFoundError("No account or security question found for this email.")
    return RecoveryQuestionResponse(email=account.email, security_question=account.security_question)


@router.post("/auth/recovery/answer", response_model=LoginResponse)
async def login_with_security_answer(
    body: RecoveryAnswerRequest,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    locator: IpLocatorClient = Depends(get_ip_locator),
):
    """Security-question login. Does not consult or update the lockout state."""
    account = AccountRepository(db).get(body.email)
    if account is None or not security_answer_matches(account, body.answer):
        record_login("security_question", "invalid_credentials")
        raise HTTPException(
            status_code=401,
            detail={"code": "INVALID_CREDENTIALS", "message": "The security answer is not correct. Please try again."},
        )
    record_login("security_question", "success")
    return await open_session(db, account, locator, clock(), body.device_id, body.ip)


@router.post("/auth/voice/enroll", response_model=VoiceEnrollResponse)
async def enroll_voice(
    body: VoiceEnrollRequest,
    db: Session = Depends(get_db),
    voice_client: VoiceClient = Depends(get_voice_client),
):
    """Transcribe a spoken passphrase and store it with the sample as the voiceprint"""
    accounts = AccountRepository(db)
    account = accounts.get(body.email)
    if account is None:
        raise AccountNotFoundError("Please enter the email you registered with.")
    if account.voice_sample and account.voice_passphrase:
        raise HTTPException(
            status_code=409,
            detail={"code": "ALREADY_ENROLLED", "message": "Voice login is already set up for this account."},
        )

    try:
        phrase = await voice_client.transcribe(body.audio_data_uri)
    except OracleError as e:
        logging.warning(f"Transcription failed: {e}")
        phrase = ""
    if not phrase:
        raise InvalidRequestError("Could not understand the audio. Please speak clearly and try again.")

    account.voice_passphrase = phrase
    account.voice_sample = body.audio_data_uri
    accounts.save(account)
    db.commit()
    return VoiceEnrollResponse(email=account.email, passphrase=phrase)


@router.post("/auth/voice/login", response_model=LoginResponse)
async def login_with_voice(
    body: VoiceLoginRequest,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    voice_client: VoiceClient = Depends(get_voice_client),
    locator: IpLocatorClient = Depends(get_ip_locator),
):
    """
    Voice login. Succeeds only when the phrase matches AND the speaker is
    verified; oracle failures count as not verified.
    """
    account = AccountRepository(db).get(body.email)
    if account is None or not account.voice_sample or not account.voice_passphrase:
        raise HTTPException(
            status_code=400,
            detail={"code": "VOICE_NOT_CONFIGURED", "message": "Voice login is not configured for this account."},
        )

    verdict = await verify_voice(voice_client, body.audio_data_uri, account.voice_sample, account.voice_passphrase)
    if not verdict.verified:
        record_login("voice", "invalid_credentials")
        raise HTTPException(
            status_code=401,
            detail={
                "code": "VOICE_NOT_VERIFIED",
                "message": verdict.reason or "Authentication failed. Please try again.",
                "transcribed_text": verdict.transcribed_text,
            },
        )
    record_login("voice", "success")
    return await open_session(db, account, locator, clock(), body.device_id, body.ip)


@router.post("/auth/reauth", response_model=ReauthResponse)
def reauthenticate(
    body: ReauthRequest,
    request: Request,
    ctx: SessionContext = Depends(require_active_session),
    db: Session = Depends(get_db),
):
    """
    Re-enter the password after the access-frequency throttle tripped.

    On success the gated feature's counter is set to 1 and the feature the
    user was trying to open becomes active.
    """
    if not body.password:
        raise InvalidRequestError("Please enter your password.")

    if not PlaintextCredentialVerifier().verify(body.password, ctx.account.password):
        log_security_event(get_request_id(request), ctx.account.email, "reauth_failed")
        raise HTTPException(
            status_code=401,
            detail={"code": "INVALID_CREDENTIALS", "message": "The password you entered is incorrect."},
        )

    throttle = AccessFrequencyThrottle()
    feature = throttle.complete_reauth(ctx.session)
    SessionRepository(db).save(ctx.session)
    db.commit()
    return ReauthResponse(active_feature=feature, access_count=throttle.access_count(ctx.session))


@router.post("/auth/logout", status_code=204)
def logout(ctx: SessionContext = Depends(get_session_context), db: Session = Depends(get_db)):
    """End the session; its counters go with it. Allowed while frozen."""
    SessionRepository(db).delete(ctx.session.token)
    db.commit()
