"""Fixed deposit pricing and premature-withdrawal returns"""

import uuid
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from bankshield.domain.exceptions import AccountFrozenError, InsufficientFundsError, InvalidRequestError
from bankshield.domain.models import Account, FDStatus, FixedDeposit
from bankshield.utils.date_utils import add_months, days_between

MIN_PRINCIPAL = Decimal("10000")
MIN_DURATION_MONTHS = 3
MAX_DURATION_MONTHS = 120

BASE_RATE = Decimal("4.5")
RATE_STEP_PER_YEAR = Decimal("0.25")
MAX_RATE = Decimal("7.5")
PREMATURE_DAILY_RATE = Decimal("0.0001")  # 0.01% per day

CENTS = Decimal("0.01")


def _money(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def annual_rate(duration_months: int) -> Decimal:
    """
    Annual interest rate in percent for a deposit term.

    4.5% base plus 0.25% per year of term, capped at 7.5%.
    12 months -> 4.75, 120 months -> 7.0
    """
    years = Decimal(duration_months) / Decimal(12)
    return min(BASE_RATE + years * RATE_STEP_PER_YEAR, MAX_RATE)


def maturity_amount(principal: Decimal, rate: Decimal, duration_months: int) -> Decimal:
    """Simple (non-compounded) interest over the term"""
    interest = principal * (rate / Decimal(100)) * (Decimal(duration_months) / Decimal(12))
    return _money(principal + interest)


def premature_return(principal: Decimal, days_elapsed: int) -> Decimal:
    """
    Early-withdrawal payout: a flat 0.01% per elapsed day on the principal,
    regardless of the rate quoted at creation.

    P=10000, d=100 -> 10100.00
    """
    days = max(0, days_elapsed)
    return _money(principal + principal * Decimal(days) * PREMATURE_DAILY_RATE)


def quote_premature_withdrawal(fd: FixedDeposit, now: datetime) -> Decimal:
    return premature_return(fd.principal, days_between(fd.created_at, now))


def validate_deposit_request(principal: Decimal, duration_months: int, savings_balance: Decimal) -> None:
    if principal < MIN_PRINCIPAL:
        raise InvalidRequestError(f"Minimum deposit is {MIN_PRINCIPAL:,}.")
    if not MIN_DURATION_MONTHS <= duration_months <= MAX_DURATION_MONTHS:
        raise InvalidRequestError(
            f"Duration must be between {MIN_DURATION_MONTHS} and {MAX_DURATION_MONTHS} months."
        )
    if principal > savings_balance:
        raise InsufficientFundsError(f"Amount cannot exceed your savings balance of {savings_balance:,}.")


def open_fixed_deposit(account: Account, principal: Decimal, duration_months: int, now: datetime) -> FixedDeposit:
    """Create a deposit and debit the principal from savings"""
    if account.is_frozen:
        raise AccountFrozenError("Your Fixed Deposit account has been frozen.")
    validate_deposit_request(principal, duration_months, account.savings_balance)

    rate = annual_rate(duration_months)
    fd = FixedDeposit(
        id=f"FD-{uuid.uuid4().hex[:12].upper()}",
        principal=_money(principal),
        interest_rate=rate,
        created_at=now,
        maturity_date=add_months(now, duration_months),
        maturity_amount=maturity_amount(principal, rate, duration_months),
        status=FDStatus.ACTIVE,
    )
    account.savings_balance = _money(account.savings_balance - principal)
    return fd
