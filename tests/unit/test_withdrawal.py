"""Unit tests for the age-conditioned premature withdrawal policy"""

import pytest
from datetime import date, datetime, timedelta
from decimal import Decimal
from bankshield.domain.deposits import open_fixed_deposit
from bankshield.domain.exceptions import AccountFrozenError, InvalidRequestError
from bankshield.domain.models import Account, FDStatus, WithdrawalOutcome
from bankshield.domain.withdrawal import (
    attempt_premature_withdrawal,
    complete_withdrawal,
    freeze_account,
    validate_review_submission,
)

NOW = datetime(2025, 6, 1, 12, 0, 0)


def make_account(birth_date, frozen=False) -> Account:
    return Account(
        email="asha@example.com",
        full_name="Asha Verma",
        password="CorrectHorse1",
        birth_date=birth_date,
        is_frozen=frozen,
        savings_balance=Decimal("50000.00"),
    )


@pytest.mark.parametrize(
    "birth_date,outcome",
    [
        (date(1964, 12, 31), WithdrawalOutcome.UNDER_REVIEW),
        (date(1965, 1, 1), WithdrawalOutcome.PROCEED),
        (date(1990, 5, 17), WithdrawalOutcome.PROCEED),
        (date(2007, 12, 31), WithdrawalOutcome.PROCEED),
        (date(2008, 1, 1), WithdrawalOutcome.FREEZE),
        (date(2010, 3, 9), WithdrawalOutcome.FREEZE),
        (None, WithdrawalOutcome.PROCEED),
    ],
)
def test_outcome_by_birth_date(birth_date, outcome):
    assert attempt_premature_withdrawal(birth_date, account_frozen=False) is outcome


@pytest.mark.parametrize("birth_date", [date(1950, 1, 1), date(1990, 1, 1), date(2009, 1, 1)])
def test_frozen_account_is_blocked_regardless_of_age(birth_date):
    assert attempt_premature_withdrawal(birth_date, account_frozen=True) is WithdrawalOutcome.BLOCKED


def test_freeze_account_freezes_every_deposit():
    account = make_account(date(2009, 1, 1))
    deposits = [
        open_fixed_deposit(account, Decimal("10000"), 12, NOW),
        open_fixed_deposit(account, Decimal("15000"), 24, NOW),
    ]

    freeze_account(account, deposits)

    assert account.is_frozen
    assert all(fd.status is FDStatus.FROZEN for fd in deposits)


def test_complete_withdrawal_credits_premature_return():
    account = make_account(date(1990, 5, 17))
    fd = open_fixed_deposit(account, Decimal("10000"), 12, NOW)
    assert account.savings_balance == Decimal("40000.00")

    credited = complete_withdrawal(account, fd, NOW + timedelta(days=100))

    assert credited == Decimal("10100.00")
    assert account.savings_balance == Decimal("50100.00")


def test_complete_withdrawal_rejected_for_frozen_account():
    account = make_account(date(1990, 5, 17))
    fd = open_fixed_deposit(account, Decimal("10000"), 12, NOW)
    account.is_frozen = True

    with pytest.raises(AccountFrozenError):
        complete_withdrawal(account, fd, NOW)
    assert account.savings_balance == Decimal("40000.00")


@pytest.mark.parametrize("birth_date", [date(1960, 1, 1), date(2008, 6, 1)])
def test_complete_withdrawal_rejected_unless_policy_proceeds(birth_date):
    account = make_account(date(1990, 5, 17))
    fd = open_fixed_deposit(account, Decimal("10000"), 12, NOW)
    account.birth_date = birth_date

    with pytest.raises(InvalidRequestError):
        complete_withdrawal(account, fd, NOW)


def test_review_submission_needs_reason_and_document():
    senior = make_account(date(1950, 3, 3))
    validate_review_submission(senior, "Medical emergency", "hospital_bill.pdf")

    with pytest.raises(InvalidRequestError):
        validate_review_submission(senior, "   ", "hospital_bill.pdf")
    with pytest.raises(InvalidRequestError):
        validate_review_submission(senior, "Medical emergency", None)


@pytest.mark.parametrize("birth_date", [date(1990, 5, 5), date(1965, 1, 1), date(2009, 5, 5), None])
def test_review_is_only_for_senior_customers(birth_date):
    with pytest.raises(InvalidRequestError):
        validate_review_submission(make_account(birth_date), "Medical emergency", "hospital_bill.pdf")


def test_review_on_frozen_account_is_blocked():
    with pytest.raises(AccountFrozenError):
        validate_review_submission(make_account(date(1950, 3, 3), frozen=True), "Medical emergency", "bill.pdf")
