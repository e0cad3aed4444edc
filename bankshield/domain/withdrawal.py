"""Age-conditioned premature withdrawal policy"""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from bankshield.domain.exceptions import AccountFrozenError, InvalidRequestError
from bankshield.domain.models import Account, FDStatus, FixedDeposit, WithdrawalOutcome
from bankshield.domain.deposits import quote_premature_withdrawal

SENIOR_CUTOFF = date(1965, 1, 1)
YOUNG_CUTOFF = date(2008, 1, 1)


def attempt_premature_withdrawal(birth_date: Optional[date], account_frozen: bool) -> WithdrawalOutcome:
    """
    Decision table, evaluated in order:
    1. Frozen account          -> BLOCKED
    2. Born before 1965-01-01  -> UNDER_REVIEW (reason + document required)
    3. Born on/after 2008-01-01 -> FREEZE (punitive, withdrawal not completed)
    4. Anyone else             -> PROCEED
    """
    if account_frozen:
        return WithdrawalOutcome.BLOCKED
    if birth_date is not None and birth_date < SENIOR_CUTOFF:
        return WithdrawalOutcome.UNDER_REVIEW
    if birth_date is not None and birth_date >= YOUNG_CUTOFF:
        return WithdrawalOutcome.FREEZE
    return WithdrawalOutcome.PROCEED


def freeze_account(account: Account, deposits: List[FixedDeposit]) -> None:
    """Mark the account frozen and every one of its deposits Frozen"""
    account.is_frozen = True
    for fd in deposits:
        fd.status = FDStatus.FROZEN


def complete_withdrawal(account: Account, fd: FixedDeposit, now: datetime) -> Decimal:
    """Credit the early-withdrawal return to savings. The caller removes the deposit."""
    outcome = attempt_premature_withdrawal(account.birth_date, account.is_frozen)
    if outcome is WithdrawalOutcome.BLOCKED:
        raise AccountFrozenError("Your Fixed Deposit account has been frozen.")
    if outcome is not WithdrawalOutcome.PROCEED:
        raise InvalidRequestError(f"Direct withdrawal is not available for this account ({outcome.value}).")

    amount = quote_premature_withdrawal(fd, now)
    account.savings_balance = account.savings_balance + amount
    return amount


def validate_review_submission(account: Account, reason: str, document_name: Optional[str]) -> None:
    """Only senior customers' withdrawals go to review, with a written reason and a proof document"""
    outcome = attempt_premature_withdrawal(account.birth_date, account.is_frozen)
    if outcome is WithdrawalOutcome.BLOCKED:
        raise AccountFrozenError("Your Fixed Deposit account has been frozen.")
    if outcome is not WithdrawalOutcome.UNDER_REVIEW:
        raise InvalidRequestError(f"Review is not available for this account ({outcome.value}).")
    if not reason or not reason.strip() or not document_name:
        raise InvalidRequestError("Please provide a reason and upload a proof document.")
