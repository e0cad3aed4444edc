"""Support complaints - raise, list and track"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from bankshield.api.v1.schemas import ComplaintListResponse, ComplaintRequest, ComplaintSchema
from bankshield.api.dependencies import SessionContext, require_active_session
from bankshield.domain.complaints import find_complaint, raise_complaint
from bankshield.domain.models import Complaint
from bankshield.infrastructure.database.repositories import ComplaintRepository
from bankshield.infrastructure.database.session import get_db

router = APIRouter()


def _to_schema(c: Complaint) -> ComplaintSchema:
    return ComplaintSchema(id=c.id, date=c.created_at, query=c.query, image=c.image, status=c.status.value)


@router.post("/complaints", response_model=ComplaintSchema, status_code=201)
def create_complaint(
    request_body: ComplaintRequest,
    ctx: SessionContext = Depends(require_active_session),
    db: Session = Depends(get_db),
):
    complaint = raise_complaint(request_body.query, request_body.image, ctx.now)
    ComplaintRepository(db).create(ctx.account.email, complaint)
    db.commit()
    return _to_schema(complaint)


@router.get("/complaints", response_model=ComplaintListResponse)
def list_complaints(ctx: SessionContext = Depends(require_active_session), db: Session = Depends(get_db)):
    """Newest first"""
    complaints = ComplaintRepository(db).list_for_account(ctx.account.email)
    return ComplaintListResponse(complaints=[_to_schema(c) for c in complaints])


@router.get("/complaints/{tracking_id}", response_model=ComplaintSchema)
def track_complaint(
    tracking_id: str,
    ctx: SessionContext = Depends(require_active_session),
    db: Session = Depends(get_db),
):
    complaint = find_complaint(ComplaintRepository(db).list_for_account(ctx.account.email), tracking_id)
    if complaint is None:
        raise HTTPException(
            status_code=404,
            detail={"code": "NOT_FOUND", "message": f"No complaint found with ID: {tracking_id}"},
        )
    return _to_schema(complaint)
