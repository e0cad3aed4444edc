"""SQLAlchemy ORM models matching db/schema.sql"""

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    JSON,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


class AccountRecord(Base):
    """Registered customer with credentials and lockout state"""

    __tablename__ = "account"

    email = Column(String(320), primary_key=True)
    full_name = Column(Text, nullable=False)
    mobile = Column(String(16), nullable=True)
    birth_date = Column(Date, nullable=True)
    gender = Column(String(32), nullable=True)
    password = Column(Text, nullable=False)
    security_question = Column(Text, nullable=True)
    security_answer = Column(Text, nullable=True)
    mnemonic = Column(Text, nullable=True)
    baseline_key_hold_times = Column(JSON, nullable=True)
    failed_login_attempts = Column(Integer, nullable=False, default=0)
    lockout_until = Column(DateTime, nullable=True)
    is_frozen = Column(Boolean, nullable=False, default=False)
    dob_update_count = Column(Integer, nullable=False, default=0)
    savings_balance = Column(Numeric(14, 2), nullable=False, default=0)
    voice_passphrase = Column(Text, nullable=True)
    voice_sample = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())

    deposits = relationship("FixedDepositRecord", back_populates="account", cascade="all, delete-orphan")
    devices = relationship("KnownDeviceRecord", back_populates="account", cascade="all, delete-orphan")


class KnownDeviceRecord(Base):
    """Device ids an account has logged in from"""

    __tablename__ = "known_device"
    __table_args__ = (UniqueConstraint("account_email", "device_id", name="uq_known_device"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    account_email = Column(String(320), ForeignKey("account.email", ondelete="CASCADE"), nullable=False, index=True)
    device_id = Column(Text, nullable=False)
    first_seen_at = Column(DateTime, nullable=False, server_default=func.now())

    account = relationship("AccountRecord", back_populates="devices")


class SessionRecord(Base):
    """Authenticated session with its counters and timers"""

    __tablename__ = "user_session"

    token = Column(String(64), primary_key=True)
    # No foreign key: a session pointing at a missing account is a state the gateway detects and terminates
    account_email = Column(String(320), nullable=False, index=True)
    started_at = Column(DateTime, nullable=False)
    last_activity_at = Column(DateTime, nullable=False)
    click_count = Column(Integer, nullable=False, default=0)
    frozen_until = Column(DateTime, nullable=True)
    feature_access_counts = Column(JSON, nullable=True)
    pending_feature = Column(Text, nullable=True)
    active_feature = Column(Text, nullable=True)
    device_id = Column(Text, nullable=True)
    login_ip = Column(Text, nullable=True)
    login_location = Column(Text, nullable=True)
    new_device_login = Column(Boolean, nullable=False, default=False)


class FixedDepositRecord(Base):
    """Fixed deposit owned by an account"""

    __tablename__ = "fixed_deposit"

    id = Column(String(32), primary_key=True)
    account_email = Column(String(320), ForeignKey("account.email", ondelete="CASCADE"), nullable=False, index=True)
    principal = Column(Numeric(14, 2), nullable=False)
    interest_rate = Column(Numeric(8, 4), nullable=False)
    created_at = Column(DateTime, nullable=False)
    maturity_date = Column(DateTime, nullable=False)
    maturity_amount = Column(Numeric(14, 2), nullable=False)
    status = Column(String(16), nullable=False, default="Active")

    account = relationship("AccountRecord", back_populates="deposits")


class BeneficiaryRecord(Base):
    """Saved transfer recipient"""

    __tablename__ = "beneficiary"

    id = Column(String(48), primary_key=True)
    account_email = Column(String(320), ForeignKey("account.email", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(Text, nullable=False)
    kind = Column(String(32), nullable=False)
    details = Column(Text, nullable=True)
    account_number = Column(String(32), nullable=True)
    ifsc = Column(String(16), nullable=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())


class ComplaintRecord(Base):
    """Customer support complaint"""

    __tablename__ = "complaint"

    id = Column(String(32), primary_key=True)
    account_email = Column(String(320), ForeignKey("account.email", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, nullable=False)
    query_text = Column("query", Text, nullable=False, default="")
    image = Column(Text, nullable=True)
    status = Column(String(16), nullable=False, default="Submitted")
