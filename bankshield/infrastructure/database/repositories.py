"""Data access layer - maps ORM records to domain dataclasses and back"""

from decimal import Decimal
from typing import List, Optional
from sqlalchemy.orm import Session
from bankshield.infrastructure.database.models import (
    AccountRecord,
    BeneficiaryRecord,
    ComplaintRecord,
    FixedDepositRecord,
    KnownDeviceRecord,
    SessionRecord,
)
from bankshield.domain.models import (
    Account,
    Beneficiary,
    BeneficiaryKind,
    Complaint,
    ComplaintStatus,
    FDStatus,
    FixedDeposit,
    SessionState,
)
from bankshield.utils.date_utils import utc_now

_ACCOUNT_FIELDS = (
    "full_name",
    "mobile",
    "birth_date",
    "gender",
    "password",
    "security_question",
    "security_answer",
    "mnemonic",
    "failed_login_attempts",
    "lockout_until",
    "is_frozen",
    "dob_update_count",
    "savings_balance",
    "voice_passphrase",
    "voice_sample",
)

_SESSION_FIELDS = (
    "account_email",
    "started_at",
    "last_activity_at",
    "click_count",
    "frozen_until",
    "pending_feature",
    "active_feature",
    "device_id",
    "login_ip",
    "login_location",
    "new_device_login",
)


class AccountRepository:
    """Repository for customer accounts"""

    def __init__(self, db: Session):
        self.db = db

    def _record(self, email: str) -> Optional[AccountRecord]:
        return self.db.query(AccountRecord).filter(AccountRecord.email == email).first()

    def exists(self, email: str) -> bool:
        return self._record(email) is not None

    def get(self, email: str) -> Optional[Account]:
        """
        Load an account.

        Raises:
            ValueError / TypeError: When the stored record cannot be read back
        """
        record = self._record(email)
        if record is None:
            return None

        baseline = record.baseline_key_hold_times or []
        if not isinstance(baseline, list):
            raise ValueError(f"Corrupt key-hold baseline for {email}")

        return Account(
            email=record.email,
            full_name=record.full_name,
            password=record.password,
            birth_date=record.birth_date,
            mobile=record.mobile,
            gender=record.gender,
            security_question=record.security_question,
            security_answer=record.security_answer,
            mnemonic=record.mnemonic,
            baseline_key_hold_times=[float(x) for x in baseline],
            failed_login_attempts=record.failed_login_attempts or 0,
            lockout_until=record.lockout_until,
            is_frozen=bool(record.is_frozen),
            dob_update_count=record.dob_update_count or 0,
            savings_balance=Decimal(record.savings_balance or 0),
            voice_passphrase=record.voice_passphrase,
            voice_sample=record.voice_sample,
        )

    def create(self, account: Account) -> None:
        record = AccountRecord(email=account.email, baseline_key_hold_times=list(account.baseline_key_hold_times))
        for name in _ACCOUNT_FIELDS:
            setattr(record, name, getattr(account, name))
        self.db.add(record)
        self.db.flush()

    def save(self, account: Account) -> None:
        """Write every mutable field of the account back"""
        record = self._record(account.email)
        if record is None:
            raise ValueError(f"Account {account.email} disappeared during update")
        for name in _ACCOUNT_FIELDS:
            setattr(record, name, getattr(account, name))
        record.baseline_key_hold_times = list(account.baseline_key_hold_times)
        self.db.flush()


class DeviceRepository:
    """Repository for known login devices"""

    def __init__(self, db: Session):
        self.db = db

    def remember(self, account_email: str, device_id: str) -> bool:
        """Register a device. Returns True if it was not known before."""
        known = (
            self.db.query(KnownDeviceRecord)
            .filter(KnownDeviceRecord.account_email == account_email, KnownDeviceRecord.device_id == device_id)
            .first()
        )
        if known is not None:
            return False
        self.db.add(KnownDeviceRecord(account_email=account_email, device_id=device_id))
        self.db.flush()
        return True


class SessionRepository:
    """Repository for authenticated sessions"""

    def __init__(self, db: Session):
        self.db = db

    def _record(self, token: str) -> Optional[SessionRecord]:
        return self.db.query(SessionRecord).filter(SessionRecord.token == token).first()

    def get(self, token: str) -> Optional[SessionState]:
        """
        Raises:
            ValueError / TypeError: When the stored counters cannot be read back
        """
        record = self._record(token)
        if record is None:
            return None

        counts = record.feature_access_counts or {}
        if not isinstance(counts, dict):
            raise ValueError(f"Corrupt feature counters for session {token[:8]}")

        state = SessionState(
            token=record.token,
            feature_access_counts={str(k): int(v) for k, v in counts.items()},
            **{name: getattr(record, name) for name in _SESSION_FIELDS},
        )
        state.click_count = state.click_count or 0
        state.new_device_login = bool(state.new_device_login)
        return state

    def create(self, state: SessionState) -> None:
        record = SessionRecord(token=state.token, feature_access_counts=dict(state.feature_access_counts))
        for name in _SESSION_FIELDS:
            setattr(record, name, getattr(state, name))
        self.db.add(record)
        self.db.flush()

    def save(self, state: SessionState) -> None:
        record = self._record(state.token)
        if record is None:
            return
        for name in _SESSION_FIELDS:
            setattr(record, name, getattr(state, name))
        # Reassign so the JSON column is marked dirty
        record.feature_access_counts = dict(state.feature_access_counts)
        self.db.flush()

    def delete(self, token: str) -> None:
        self.db.query(SessionRecord).filter(SessionRecord.token == token).delete()
        self.db.flush()


class FixedDepositRepository:
    """Repository for fixed deposits"""

    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def _to_domain(record: FixedDepositRecord) -> FixedDeposit:
        return FixedDeposit(
            id=record.id,
            principal=Decimal(record.principal),
            interest_rate=Decimal(record.interest_rate),
            created_at=record.created_at,
            maturity_date=record.maturity_date,
            maturity_amount=Decimal(record.maturity_amount),
            status=FDStatus(record.status),
        )

    def list_for_account(self, account_email: str) -> List[FixedDeposit]:
        records = (
            self.db.query(FixedDepositRecord)
            .filter(FixedDepositRecord.account_email == account_email)
            .order_by(FixedDepositRecord.created_at)
            .all()
        )
        return [self._to_domain(r) for r in records]

    def get(self, account_email: str, fd_id: str) -> Optional[FixedDeposit]:
        record = (
            self.db.query(FixedDepositRecord)
            .filter(FixedDepositRecord.account_email == account_email, FixedDepositRecord.id == fd_id)
            .first()
        )
        return self._to_domain(record) if record else None

    def create(self, account_email: str, fd: FixedDeposit) -> None:
        self.db.add(
            FixedDepositRecord(
                id=fd.id,
                account_email=account_email,
                principal=fd.principal,
                interest_rate=fd.interest_rate,
                created_at=fd.created_at,
                maturity_date=fd.maturity_date,
                maturity_amount=fd.maturity_amount,
                status=fd.status.value,
            )
        )
        self.db.flush()

    def save_statuses(self, account_email: str, deposits: List[FixedDeposit]) -> None:
        by_id = {fd.id: fd for fd in deposits}
        records = self.db.query(FixedDepositRecord).filter(FixedDepositRecord.account_email == account_email).all()
        for record in records:
            if record.id in by_id:
                record.status = by_id[record.id].status.value
        self.db.flush()

    def delete(self, account_email: str, fd_id: str) -> None:
        self.db.query(FixedDepositRecord).filter(
            FixedDepositRecord.account_email == account_email, FixedDepositRecord.id == fd_id
        ).delete()
        self.db.flush()


class BeneficiaryRepository:
    """Repository for saved transfer recipients"""

    def __init__(self, db: Session):
        self.db = db

    def list_for_account(self, account_email: str) -> List[Beneficiary]:
        records = (
            self.db.query(BeneficiaryRecord)
            .filter(BeneficiaryRecord.account_email == account_email)
            .order_by(BeneficiaryRecord.created_at)
            .all()
        )
        return [
            Beneficiary(
                id=r.id,
                name=r.name,
                kind=BeneficiaryKind(r.kind),
                details=r.details,
                account_number=r.account_number,
                ifsc=r.ifsc,
            )
            for r in records
        ]

    def sync(self, account_email: str, beneficiaries: List[Beneficiary]) -> None:
        """Insert any beneficiaries in the list that are not stored yet"""
        stored = {
            r.id
            for r in self.db.query(BeneficiaryRecord.id).filter(BeneficiaryRecord.account_email == account_email).all()
        }
        for b in beneficiaries:
            if b.id in stored:
                continue
            self.db.add(
                BeneficiaryRecord(
                    id=b.id,
                    account_email=account_email,
                    name=b.name,
                    kind=b.kind.value,
                    details=b.details,
                    account_number=b.account_number,
                    ifsc=b.ifsc,
                    created_at=utc_now(),
                )
            )
        self.db.flush()

    def delete(self, account_email: str, beneficiary_id: str) -> bool:
        deleted = (
            self.db.query(BeneficiaryRecord)
            .filter(BeneficiaryRecord.account_email == account_email, BeneficiaryRecord.id == beneficiary_id)
            .delete()
        )
        self.db.flush()
        return deleted > 0


class ComplaintRepository:
    """Repository for support complaints"""

    def __init__(self, db: Session):
        self.db = db

    def list_for_account(self, account_email: str) -> List[Complaint]:
        """Newest first"""
        records = (
            self.db.query(ComplaintRecord)
            .filter(ComplaintRecord.account_email == account_email)
            .order_by(ComplaintRecord.created_at.desc())
            .all()
        )
        return [
            Complaint(
                id=r.id,
                created_at=r.created_at,
                query=r.query_text,
                image=r.image,
                status=ComplaintStatus(r.status),
            )
            for r in records
        ]

    def create(self, account_email: str, complaint: Complaint) -> None:
        self.db.add(
            ComplaintRecord(
                id=complaint.id,
                account_email=account_email,
                created_at=complaint.created_at,
                query_text=complaint.query,
                image=complaint.image,
                status=complaint.status.value,
            )
        )
        self.db.flush()
