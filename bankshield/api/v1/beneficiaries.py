"""Saved beneficiaries - list, add and remove"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from bankshield.api.v1.schemas import AddBeneficiaryRequest, BeneficiaryListResponse, BeneficiarySchema
from bankshield.api.dependencies import SessionContext, require_active_session
from bankshield.domain.beneficiaries import bank_beneficiary, upsert_beneficiary
from bankshield.domain.models import Beneficiary
from bankshield.infrastructure.database.repositories import BeneficiaryRepository
from bankshield.infrastructure.database.session import get_db

router = APIRouter()


def _to_schema(b: Beneficiary) -> BeneficiarySchema:
    return BeneficiarySchema(
        id=b.id,
        name=b.name,
        type=b.kind.value,
        details=b.details,
        account_number=b.account_number,
        ifsc=b.ifsc,
    )


@router.get("/beneficiaries", response_model=BeneficiaryListResponse)
def list_beneficiaries(ctx: SessionContext = Depends(require_active_session), db: Session = Depends(get_db)):
    beneficiaries = BeneficiaryRepository(db).list_for_account(ctx.account.email)
    return BeneficiaryListResponse(beneficiaries=[_to_schema(b) for b in beneficiaries])


@router.post("/beneficiaries", response_model=BeneficiarySchema, status_code=201)
def add_beneficiary(
    request_body: AddBeneficiaryRequest,
    ctx: SessionContext = Depends(require_active_session),
    db: Session = Depends(get_db),
):
    """Add a bank-account beneficiary. An account number already saved is rejected with 409."""
    repo = BeneficiaryRepository(db)
    beneficiaries = repo.list_for_account(ctx.account.email)
    candidate = bank_beneficiary(request_body.beneficiary_name, request_body.account_number, request_body.ifsc_code)
    if not upsert_beneficiary(beneficiaries, candidate):
        raise HTTPException(
            status_code=409,
            detail={"code": "DUPLICATE_BENEFICIARY", "message": "This account is already a saved beneficiary."},
        )
    repo.sync(ctx.account.email, beneficiaries)
    db.commit()
    return _to_schema(candidate)


@router.delete("/beneficiaries/{beneficiary_id}", status_code=204)
def remove_beneficiary(
    beneficiary_id: str,
    ctx: SessionContext = Depends(require_active_session),
    db: Session = Depends(get_db),
):
    if not BeneficiaryRepository(db).delete(ctx.account.email, beneficiary_id):
        raise HTTPException(status_code=404, detail={"code": "NOT_FOUND", "message": "Beneficiary not found."})
    db.commit()
