"""Beneficiary list maintenance"""

import uuid
from typing import List

from bankshield.domain.models import Beneficiary, BeneficiaryKind


def new_beneficiary_id() -> str:
    return f"beneficiary-{uuid.uuid4().hex[:12]}"


def upi_beneficiary(recipient: str) -> Beneficiary:
    return Beneficiary(id=new_beneficiary_id(), name=recipient, kind=BeneficiaryKind.UPI, details=recipient)


def bank_beneficiary(name: str, account_number: str, ifsc: str) -> Beneficiary:
    return Beneficiary(
        id=new_beneficiary_id(),
        name=name,
        kind=BeneficiaryKind.BANK_ACCOUNT,
        account_number=account_number,
        ifsc=ifsc,
    )


def upsert_beneficiary(existing: List[Beneficiary], candidate: Beneficiary) -> bool:
    """
    Append candidate unless one with the same UPI id / account number exists.

    Returns True if the list changed.
    """
    if any(b.dedup_key == candidate.dedup_key for b in existing):
        return False
    existing.append(candidate)
    return True
