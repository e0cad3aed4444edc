"""Profile updates"""

from datetime import date
from typing import Optional

from bankshield.domain.exceptions import InvalidRequestError
from bankshield.domain.models import Account

MAX_DOB_UPDATES = 3


def update_profile(
    account: Account,
    full_name: Optional[str] = None,
    gender: Optional[str] = None,
    birth_date: Optional[date] = None,
) -> None:
    """
    Apply profile changes. The birth date drives the withdrawal policy, so it
    may only be changed MAX_DOB_UPDATES times. Mobile number is immutable.
    """
    dob_changed = birth_date is not None and birth_date != account.birth_date
    if dob_changed and account.dob_update_count >= MAX_DOB_UPDATES:
        raise InvalidRequestError(f"You cannot change your date of birth more than {MAX_DOB_UPDATES} times.")

    if full_name is not None:
        if len(full_name.strip()) < 2:
            raise InvalidRequestError("Full name is required.")
        account.full_name = full_name.strip()
    if gender is not None:
        account.gender = gender
    if dob_changed:
        account.birth_date = birth_date
        account.dob_update_count += 1


def dob_updates_remaining(account: Account) -> int:
    return max(0, MAX_DOB_UPDATES - account.dob_update_count)
