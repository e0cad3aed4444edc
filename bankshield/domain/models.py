"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional


class RiskTier(str, Enum):
    """Tier picked from a risk score"""

    LOW = "low"  # approve
    MEDIUM = "medium"  # step-up authentication
    HIGH = "high"  # block


class AccessDecision(str, Enum):
    ALLOWED = "allowed"
    REQUIRE_REAUTH = "require_reauth"


class LoginStatus(str, Enum):
    SUCCESS = "success"
    INVALID_CREDENTIALS = "invalid_credentials"
    LOCKED = "locked"


class WithdrawalOutcome(str, Enum):
    """Disjoint results of a premature withdrawal attempt"""

    BLOCKED = "blocked"
    UNDER_REVIEW = "under_review"
    FREEZE = "freeze"
    PROCEED = "proceed"


class FDStatus(str, Enum):
    ACTIVE = "Active"
    FROZEN = "Frozen"


class BeneficiaryKind(str, Enum):
    UPI = "UPI / Mobile"
    BANK_ACCOUNT = "Bank Account"


class ComplaintStatus(str, Enum):
    SUBMITTED = "Submitted"
    IN_PROGRESS = "In Progress"
    RESOLVED = "Resolved"


@dataclass
class SwipeGesture:
    angle: float
    speed: float


@dataclass
class BehavioralSignals:
    """Signal bundle captured for one transaction attempt"""

    tap_pressure: List[float]
    swipe_gestures: List[SwipeGesture]
    key_hold_times: List[float]
    screen_navigation: List[str]
    ip: str
    gyro_variance: float
    session_duration: float  # seconds
    pasted_credentials: bool
    baseline_key_hold_times: Optional[List[float]] = None


@dataclass
class RiskAssessment:
    """Oracle verdict for a transaction attempt; never persisted"""

    risk_score: float
    reasons: List[str]


@dataclass
class TransferDecision:
    """Outcome of running a transfer attempt through the risk gate"""

    assessment: RiskAssessment
    tier: RiskTier
    beneficiary_saved: bool = False

    @property
    def approved(self) -> bool:
        return self.tier is RiskTier.LOW

    @property
    def step_up_required(self) -> bool:
        return self.tier is RiskTier.MEDIUM

    @property
    def blocked(self) -> bool:
        return self.tier is RiskTier.HIGH


@dataclass
class Account:
    """Registered customer"""

    email: str
    full_name: str
    password: str
    birth_date: Optional[date] = None
    mobile: Optional[str] = None
    gender: Optional[str] = None
    security_question: Optional[str] = None
    security_answer: Optional[str] = None
    mnemonic: Optional[str] = None
    baseline_key_hold_times: List[float] = field(default_factory=list)
    failed_login_attempts: int = 0
    lockout_until: Optional[datetime] = None
    is_frozen: bool = False
    dob_update_count: int = 0
    savings_balance: Decimal = Decimal("0.00")
    voice_passphrase: Optional[str] = None
    voice_sample: Optional[str] = None


@dataclass
class SessionState:
    """Per-login session counters and timers"""

    token: str
    account_email: str
    started_at: datetime
    last_activity_at: datetime
    click_count: int = 0
    frozen_until: Optional[datetime] = None
    feature_access_counts: Dict[str, int] = field(default_factory=dict)
    pending_feature: Optional[str] = None
    active_feature: Optional[str] = None
    device_id: Optional[str] = None
    login_ip: Optional[str] = None
    login_location: Optional[str] = None
    new_device_login: bool = False

    @property
    def is_frozen(self) -> bool:
        return self.frozen_until is not None


@dataclass
class LoginResult:
    status: LoginStatus
    message: str
    remaining_attempts: Optional[int] = None
    lockout_minutes_remaining: Optional[int] = None

    @property
    def succeeded(self) -> bool:
        return self.status is LoginStatus.SUCCESS


@dataclass
class FixedDeposit:
    id: str
    principal: Decimal
    interest_rate: Decimal  # annual, percent
    created_at: datetime
    maturity_date: datetime
    maturity_amount: Decimal
    status: FDStatus = FDStatus.ACTIVE


@dataclass
class Beneficiary:
    id: str
    name: str
    kind: BeneficiaryKind
    details: Optional[str] = None  # UPI id or mobile
    account_number: Optional[str] = None
    ifsc: Optional[str] = None

    @property
    def dedup_key(self) -> str:
        if self.kind is BeneficiaryKind.UPI:
            return f"upi:{self.details}"
        return f"acct:{self.account_number}"


@dataclass
class Complaint:
    id: str
    created_at: datetime
    query: str
    image: Optional[str] = None
    status: ComplaintStatus = ComplaintStatus.SUBMITTED


@dataclass
class SignatureVerification:
    is_valid: bool
    confidence: float
    reason: str


@dataclass
class VoiceVerification:
    is_speaker_verified: bool
    is_match: bool
    transcribed_text: str
    reason: str

    @property
    def verified(self) -> bool:
        return self.is_match and self.is_speaker_verified


@dataclass
class IpLocation:
    city: str
    region_name: str
    country: str

    def describe(self) -> str:
        return f"{self.city}, {self.region_name}, {self.country}"
