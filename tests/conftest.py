"""Pytest fixtures for testing"""

import pytest
from datetime import date, datetime, timedelta
from typing import Generator, List, Optional
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from bankshield.api.main import create_app
from bankshield.api.dependencies import (
    get_assistant_client,
    get_clock,
    get_ip_locator,
    get_risk_oracle,
    get_signature_client,
    get_voice_client,
)
from bankshield.domain.exceptions import OracleError
from bankshield.domain.models import (
    BehavioralSignals,
    RiskAssessment,
    SignatureVerification,
    SwipeGesture,
    VoiceVerification,
)
from bankshield.infrastructure.database.models import Base
from bankshield.infrastructure.database.session import get_db


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

KEY_HOLD_SAMPLES = [0.11, 0.12, 0.10, 0.13, 0.12, 0.11, 0.14, 0.12, 0.10, 0.11, 0.12, 0.13]
PASSWORD = "CorrectHorse1"


class FakeClock:
    """Controllable stand-in for the wall clock"""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


class FakeRiskOracle:
    def __init__(self):
        self.assessment: Optional[RiskAssessment] = RiskAssessment(risk_score=0.1, reasons=["normal"])
        self.error: Optional[Exception] = None
        self.calls: List[BehavioralSignals] = []

    async def score(self, signals: BehavioralSignals) -> RiskAssessment:
        self.calls.append(signals)
        if self.error is not None:
            raise self.error
        return self.assessment


class FakeVoiceClient:
    def __init__(self):
        self.transcription = "open sesame"
        self.verdict = VoiceVerification(
            is_speaker_verified=True, is_match=True, transcribed_text="open sesame", reason="Voice verified"
        )
        self.fail = False

    async def transcribe(self, audio_data_uri: str) -> str:
        if self.fail:
            raise OracleError("voice timeout")
        return self.transcription

    async def verify_voice(self, login_audio: str, registration_audio: str, phrase: str) -> VoiceVerification:
        if self.fail:
            raise OracleError("voice timeout")
        return self.verdict

    async def text_to_speech(self, text: str) -> str:
        if self.fail:
            raise OracleError("voice timeout")
        return "data:audio/wav;base64,AAAA"


class FakeSignatureClient:
    def __init__(self):
        self.fail = False

    async def verify_signature(self, signature_data_uri: str) -> SignatureVerification:
        if self.fail:
            raise OracleError("signature error: 500")
        return SignatureVerification(is_valid=True, confidence=0.93, reason="Looks consistent")


class FakeAssistant:
    def __init__(self):
        self.fail = False

    async def ask(self, question: str) -> str:
        if self.fail:
            raise OracleError("chat unreachable")
        return f"Answer to: {question}"


class FakeIpLocator:
    async def describe(self, ip: str) -> str:
        return "Mumbai, Maharashtra, India"


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2025, 6, 1, 12, 0, 0))


@pytest.fixture
def risk_oracle() -> FakeRiskOracle:
    return FakeRiskOracle()


@pytest.fixture
def voice_client() -> FakeVoiceClient:
    return FakeVoiceClient()


@pytest.fixture
def signature_client() -> FakeSignatureClient:
    return FakeSignatureClient()


@pytest.fixture
def assistant() -> FakeAssistant:
    return FakeAssistant()


@pytest.fixture
def client(
    db: Session,
    clock: FakeClock,
    risk_oracle: FakeRiskOracle,
    voice_client: FakeVoiceClient,
    signature_client: FakeSignatureClient,
    assistant: FakeAssistant,
) -> TestClient:
    """Create FastAPI test client with test database and fake oracles"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_risk_oracle] = lambda: risk_oracle
    app.dependency_overrides[get_voice_client] = lambda: voice_client
    app.dependency_overrides[get_signature_client] = lambda: signature_client
    app.dependency_overrides[get_assistant_client] = lambda: assistant
    app.dependency_overrides[get_ip_locator] = lambda: FakeIpLocator()
    return TestClient(app)


def register(client: TestClient, email: str = "asha@example.com", dob: date = date(1990, 5, 17)) -> dict:
    response = client.post(
        "/v1/auth/register",
        json={
            "email": email,
            "full_name": "Asha Verma",
            "mobile": "9876543210",
            "dob": dob.isoformat(),
            "gender": "female",
            "password": PASSWORD,
            "confirm_password": PASSWORD,
            "security_question": "What was the name of your first pet?",
            "security_answer": "Bruno",
            "key_hold_times": KEY_HOLD_SAMPLES,
        },
    )
    assert response.status_code == 201, response.text
    return response.json()


def login(client: TestClient, email: str = "asha@example.com", device_id: str = "device-1") -> dict:
    """Log in with the password and return auth headers"""
    response = client.post(
        "/v1/auth/login",
        json={"email": email, "password": PASSWORD, "device_id": device_id},
    )
    assert response.status_code == 200, response.text
    return {"X-Session-Token": response.json()["session_token"]}


@pytest.fixture
def auth_headers(client: TestClient) -> dict:
    """A registered account (born 1990) with an open session"""
    register(client)
    return login(client)


@pytest.fixture
def sample_signals() -> BehavioralSignals:
    return BehavioralSignals(
        tap_pressure=[0.42, 0.51, 0.47],
        swipe_gestures=[SwipeGesture(angle=12.5, speed=0.8)],
        key_hold_times=[0.11, 0.13, 0.12],
        screen_navigation=["Dashboard", "Pay and Transfer"],
        ip="103.21.58.4",
        gyro_variance=0.12,
        session_duration=84.0,
        pasted_credentials=False,
    )
