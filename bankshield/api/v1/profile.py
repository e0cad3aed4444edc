"""GET/PATCH /v1/profile"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from bankshield.api.v1.schemas import ProfileResponse, ProfileUpdateRequest
from bankshield.api.dependencies import SessionContext, require_active_session
from bankshield.domain.models import Account
from bankshield.domain.profile import dob_updates_remaining, update_profile
from bankshield.infrastructure.database.repositories import AccountRepository
from bankshield.infrastructure.database.session import get_db

router = APIRouter()


def _to_response(account: Account) -> ProfileResponse:
    return ProfileResponse(
        email=account.email,
        full_name=account.full_name,
        mobile=account.mobile,
        dob=account.birth_date,
        gender=account.gender,
        dob_updates_remaining=dob_updates_remaining(account),
        is_frozen=account.is_frozen,
    )


@router.get("/profile", response_model=ProfileResponse)
def get_profile(ctx: SessionContext = Depends(require_active_session)):
    return _to_response(ctx.account)


@router.patch("/profile", response_model=ProfileResponse)
def patch_profile(
    request_body: ProfileUpdateRequest,
    ctx: SessionContext = Depends(require_active_session),
    db: Session = Depends(get_db),
):
    update_profile(
        ctx.account,
        full_name=request_body.full_name,
        gender=request_body.gender,
        birth_date=request_body.dob,
    )
    AccountRepository(db).save(ctx.account)
    db.commit()
    return _to_response(ctx.account)
