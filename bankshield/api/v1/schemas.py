"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, EmailStr, Field, model_validator
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional


# --- Authentication -------------------------------------------------------


class RegisterRequest(BaseModel):
    """Request body for POST /v1/auth/register"""

    email: EmailStr
    full_name: str = Field(..., min_length=2)
    mobile: str = Field(..., pattern=r"^\d{10}$", description="10-digit mobile number")
    dob: date
    gender: str = Field(..., min_length=1)
    password: str = Field(..., min_length=8)
    confirm_password: str
    security_question: str = Field(..., min_length=1)
    security_answer: str = Field(..., min_length=1)
    key_hold_times: List[float] = Field(default_factory=list, description="Key hold samples in seconds")

    @model_validator(mode="after")
    def passwords_match(self):
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match.")
        return self


class RegisterResponse(BaseModel):
    email: str
    mnemonic: str = Field(..., description="Recovery phrase, shown once")


class PasswordLoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)
    device_id: Optional[str] = None
    ip: Optional[str] = None


class MnemonicLoginRequest(BaseModel):
    email: EmailStr
    mnemonic: str = Field(..., min_length=1)
    device_id: Optional[str] = None
    ip: Optional[str] = None


class RecoveryQuestionRequest(BaseModel):
    email: EmailStr


class RecoveryQuestionResponse(BaseModel):
    email: str
    security_question: str


class RecoveryAnswerRequest(BaseModel):
    email: EmailStr
    answer: str = Field(..., min_length=1)
    device_id: Optional[str] = None
    ip: Optional[str] = None


class VoiceEnrollRequest(BaseModel):
    email: EmailStr
    audio_data_uri: str = Field(..., min_length=1)


class VoiceEnrollResponse(BaseModel):
    email: str
    passphrase: str


class VoiceLoginRequest(BaseModel):
    email: EmailStr
    audio_data_uri: str = Field(..., min_length=1)
    device_id: Optional[str] = None
    ip: Optional[str] = None


class LoginResponse(BaseModel):
    session_token: str
    email: str
    device_id: str
    new_device: bool
    login_ip: str
    login_location: str
    message: str = "Welcome back!"


class ReauthRequest(BaseModel):
    password: str = ""


class ReauthResponse(BaseModel):
    active_feature: str
    access_count: int


# --- Session --------------------------------------------------------------


class SessionStatusResponse(BaseModel):
    email: str
    full_name: str
    frozen: bool
    time_remaining: Optional[str] = None
    click_count: int
    active_feature: Optional[str] = None
    pay_and_transfer_access_count: int
    new_device_alert: bool
    device_id: Optional[str] = None
    login_ip: Optional[str] = None
    login_location: Optional[str] = None


class InteractionEvent(BaseModel):
    event_type: str = Field(..., min_length=1, description="click, keydown, mousemove, scroll, touchstart")


class InteractionResponse(BaseModel):
    click_count: int
    frozen: bool
    time_remaining: Optional[str] = None


class FeatureRequest(BaseModel):
    feature: str = Field(..., min_length=1)


class FeatureResponse(BaseModel):
    active_feature: str
    access_count: int


# --- Transfers ------------------------------------------------------------


class SwipeGestureSchema(BaseModel):
    angle: float
    speed: float


class BehavioralSignalsSchema(BaseModel):
    tap_pressure: List[float] = Field(default_factory=list)
    swipe_gestures: List[SwipeGestureSchema] = Field(default_factory=list)
    key_hold_times: List[float] = Field(default_factory=list)
    baseline_key_hold_times: Optional[List[float]] = None
    screen_navigation: List[str] = Field(default_factory=list)
    ip: str = ""
    gyro_variance: float = 0.0
    session_duration: float = Field(0.0, ge=0, description="Seconds")
    pasted_credentials: bool = False


class UpiTransferRequest(BaseModel):
    """Request body for POST /v1/transfers/upi"""

    amount: Decimal = Field(..., ge=1, description="Transfer amount")
    recipient: str = Field(..., min_length=3, description="UPI id, mobile, or scanned QR")
    notes: Optional[str] = None
    signals: BehavioralSignalsSchema


class RiskAssessmentResponse(BaseModel):
    risk_score: float
    reasons: List[str]
    tier: str
    message: str
    approved: bool
    step_up_required: bool
    blocked: bool
    beneficiary_saved: bool


class BankTransferRequest(BaseModel):
    """Request body for POST /v1/transfers/bank (NEFT/RTGS)"""

    beneficiary_name: str = Field(..., min_length=2)
    ifsc_code: str = Field(..., pattern=r"^[A-Z]{4}0[A-Z0-9]{6}$")
    account_number: str = Field(..., pattern=r"^\d{9,18}$")
    confirm_account_number: str
    amount: Decimal = Field(..., gt=0)
    message: Optional[str] = None

    @model_validator(mode="after")
    def account_numbers_match(self):
        if self.account_number != self.confirm_account_number:
            raise ValueError("Account numbers do not match.")
        return self


class BankTransferResponse(BaseModel):
    status: str
    message: str
    beneficiary_saved: bool


# --- Beneficiaries ----------------------------------------------------------


class AddBeneficiaryRequest(BaseModel):
    beneficiary_name: str = Field(..., min_length=2)
    ifsc_code: str = Field(..., pattern=r"^[A-Z]{4}0[A-Z0-9]{6}$")
    account_number: str = Field(..., pattern=r"^\d{9,18}$")
    confirm_account_number: str

    @model_validator(mode="after")
    def account_numbers_match(self):
        if self.account_number != self.confirm_account_number:
            raise ValueError("Account numbers do not match.")
        return self


class BeneficiarySchema(BaseModel):
    id: str
    name: str
    type: str
    details: Optional[str] = None
    account_number: Optional[str] = None
    ifsc: Optional[str] = None


class BeneficiaryListResponse(BaseModel):
    beneficiaries: List[BeneficiarySchema]


# --- Fixed deposits ---------------------------------------------------------


class CreateDepositRequest(BaseModel):
    amount: Decimal
    duration_months: int


class DepositSchema(BaseModel):
    id: str
    principal: Decimal
    interest_rate: Decimal
    created_at: datetime
    maturity_date: datetime
    maturity_amount: Decimal
    status: str


class DepositListResponse(BaseModel):
    savings_balance: Decimal
    account_frozen: bool
    deposits: List[DepositSchema]


class DepositQuoteResponse(BaseModel):
    amount: Decimal
    duration_months: int
    interest_rate: Decimal
    maturity_amount: Decimal


class WithdrawalAttemptResponse(BaseModel):
    outcome: str
    message: str
    fd_id: str
    premature_return: Optional[Decimal] = None


class WithdrawalConfirmResponse(BaseModel):
    fd_id: str
    credited_amount: Decimal
    savings_balance: Decimal


class WithdrawalReviewRequest(BaseModel):
    reason: str = ""
    document_name: Optional[str] = None


class WithdrawalReviewResponse(BaseModel):
    fd_id: str
    status: str
    message: str


# --- Profile ------------------------------------------------------------------


class ProfileResponse(BaseModel):
    email: str
    full_name: str
    mobile: Optional[str] = None
    dob: Optional[date] = None
    gender: Optional[str] = None
    dob_updates_remaining: int
    is_frozen: bool


class ProfileUpdateRequest(BaseModel):
    full_name: Optional[str] = None
    dob: Optional[date] = None
    gender: Optional[str] = None


# --- Complaints ---------------------------------------------------------------


class ComplaintRequest(BaseModel):
    query: str = ""
    image: Optional[str] = Field(None, description="Image as a data URI")


class ComplaintSchema(BaseModel):
    id: str
    date: datetime
    query: str
    image: Optional[str] = None
    status: str


class ComplaintListResponse(BaseModel):
    complaints: List[ComplaintSchema]


# --- Oracle pass-throughs -------------------------------------------------------


class SignatureRequest(BaseModel):
    signature_data_uri: str = Field(..., min_length=1)


class SignatureResponse(BaseModel):
    is_valid: bool
    confidence: float
    reason: str


class TranscribeRequest(BaseModel):
    audio_data_uri: str = Field(..., min_length=1)


class TranscribeResponse(BaseModel):
    text: str


class SpeechRequest(BaseModel):
    text: str = Field(..., min_length=1)


class SpeechResponse(BaseModel):
    audio_data_uri: str


class ChatRequest(BaseModel):
    question: str = Field(..., min_length=1)


class ChatResponse(BaseModel):
    answer: str
