"""Account registration and behavioral baseline capture"""

from datetime import date
from decimal import Decimal
from typing import List

from bankshield.domain.credentials import generate_mnemonic, normalize_security_answer
from bankshield.domain.exceptions import InvalidRequestError
from bankshield.domain.models import Account

MIN_KEY_HOLD_SAMPLES = 10
BASELINE_SAMPLE_SIZE = 20
INITIAL_SAVINGS_BALANCE = Decimal("123456.78")


def register_account(
    email: str,
    full_name: str,
    mobile: str,
    birth_date: date,
    gender: str,
    password: str,
    security_question: str,
    security_answer: str,
    key_hold_times: List[float],
) -> Account:
    """
    Build a new account with a fresh recovery mnemonic.

    The baseline keeps the last BASELINE_SAMPLE_SIZE key-hold samples; fewer
    than MIN_KEY_HOLD_SAMPLES means the typing sample was not captured properly.
    """
    if len(key_hold_times) < MIN_KEY_HOLD_SAMPLES:
        raise InvalidRequestError("Not enough behavioral data captured. Please type naturally.")

    return Account(
        email=email,
        full_name=full_name,
        mobile=mobile,
        birth_date=birth_date,
        gender=gender,
        password=password,
        security_question=security_question,
        security_answer=normalize_security_answer(security_answer),
        mnemonic=generate_mnemonic(),
        baseline_key_hold_times=list(key_hold_times[-BASELINE_SAMPLE_SIZE:]),
        failed_login_attempts=0,
        dob_update_count=0,
        savings_balance=INITIAL_SAVINGS_BALANCE,
    )
