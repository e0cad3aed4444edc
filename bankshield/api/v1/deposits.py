"""Fixed deposit endpoints and the age-conditioned premature withdrawal flow"""

from decimal import Decimal
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from bankshield.api.v1.schemas import (
    CreateDepositRequest,
    DepositListResponse,
    DepositQuoteResponse,
    DepositSchema,
    WithdrawalAttemptResponse,
    WithdrawalConfirmResponse,
    WithdrawalReviewRequest,
    WithdrawalReviewResponse,
)
from bankshield.api.dependencies import SessionContext, get_request_id, require_active_session
from bankshield.domain.deposits import (
    annual_rate,
    maturity_amount,
    open_fixed_deposit,
    quote_premature_withdrawal,
    validate_deposit_request,
)
from bankshield.domain.exceptions import FixedDepositNotFoundError
from bankshield.domain.models import FixedDeposit, WithdrawalOutcome
from bankshield.domain.withdrawal import (
    attempt_premature_withdrawal,
    complete_withdrawal,
    freeze_account,
    validate_review_submission,
)
from bankshield.infrastructure.database.repositories import AccountRepository, FixedDepositRepository
from bankshield.infrastructure.database.session import get_db
from bankshield.infrastructure.observability.logging import log_security_event
from bankshield.infrastructure.observability.metrics import withdrawal_outcome_counter

router = APIRouter()

WITHDRAWAL_MESSAGES = {
    WithdrawalOutcome.BLOCKED: "Your Fixed Deposit account has been frozen. Withdrawals are not allowed.",
    WithdrawalOutcome.UNDER_REVIEW: "Please provide a reason and a proof document for review.",
    WithdrawalOutcome.FREEZE: "Withdrawal not allowed. Your Fixed Deposit account has been frozen.",
    WithdrawalOutcome.PROCEED: "Please confirm the premature withdrawal amount.",
}


def _to_schema(fd: FixedDeposit) -> DepositSchema:
    return DepositSchema(
        id=fd.id,
        principal=fd.principal,
        interest_rate=fd.interest_rate,
        created_at=fd.created_at,
        maturity_date=fd.maturity_date,
        maturity_amount=fd.maturity_amount,
        status=fd.status.value,
    )


def _load_deposit(repo: FixedDepositRepository, account_email: str, fd_id: str) -> FixedDeposit:
    fd = repo.get(account_email, fd_id)
    if fd is None:
        raise FixedDepositNotFoundError(f"Fixed deposit {fd_id} not found")
    return fd


@router.get("/deposits", response_model=DepositListResponse)
def list_deposits(ctx: SessionContext = Depends(require_active_session), db: Session = Depends(get_db)):
    deposits = FixedDepositRepository(db).list_for_account(ctx.account.email)
    return DepositListResponse(
        savings_balance=ctx.account.savings_balance,
        account_frozen=ctx.account.is_frozen,
        deposits=[_to_schema(fd) for fd in deposits],
    )


@router.get("/deposits/quote", response_model=DepositQuoteResponse)
def quote_deposit(
    amount: Decimal = Query(...),
    duration_months: int = Query(...),
    ctx: SessionContext = Depends(require_active_session),
):
    """Rate and maturity amount for a prospective deposit"""
    validate_deposit_request(amount, duration_months, ctx.account.savings_balance)
    rate = annual_rate(duration_months)
    return DepositQuoteResponse(
        amount=amount,
        duration_months=duration_months,
        interest_rate=rate,
        maturity_amount=maturity_amount(amount, rate, duration_months),
    )


@router.post("/deposits", response_model=DepositSchema, status_code=201)
def create_deposit(
    request_body: CreateDepositRequest,
    ctx: SessionContext = Depends(require_active_session),
    db: Session = Depends(get_db),
):
    fd = open_fixed_deposit(ctx.account, request_body.amount, request_body.duration_months, ctx.now)
    FixedDepositRepository(db).create(ctx.account.email, fd)
    AccountRepository(db).save(ctx.account)
    db.commit()
    return _to_schema(fd)


@router.post("/deposits/{fd_id}/withdrawal", response_model=WithdrawalAttemptResponse)
def attempt_withdrawal(
    fd_id: str,
    request: Request,
    ctx: SessionContext = Depends(require_active_session),
    db: Session = Depends(get_db),
):
    """
    Start a premature withdrawal.

    The outcome depends on the account holder's birth date. Customers born on
    or after 2008-01-01 trigger a freeze of the account and all its deposits.
    """
    account = ctx.account
    deposit_repo = FixedDepositRepository(db)
    fd = _load_deposit(deposit_repo, account.email, fd_id)

    outcome = attempt_premature_withdrawal(account.birth_date, account.is_frozen)
    withdrawal_outcome_counter.labels(outcome=outcome.value).inc()

    quote = None
    if outcome is WithdrawalOutcome.FREEZE:
        deposits = deposit_repo.list_for_account(account.email)
        freeze_account(account, deposits)
        deposit_repo.save_statuses(account.email, deposits)
        AccountRepository(db).save(account)
        db.commit()
        log_security_event(get_request_id(request), account.email, "account_frozen", fd_id=fd_id)
    elif outcome is WithdrawalOutcome.PROCEED:
        quote = quote_premature_withdrawal(fd, ctx.now)
    elif outcome is WithdrawalOutcome.BLOCKED:
        log_security_event(get_request_id(request), account.email, "withdrawal_blocked", fd_id=fd_id)

    return WithdrawalAttemptResponse(
        outcome=outcome.value,
        message=WITHDRAWAL_MESSAGES[outcome],
        fd_id=fd_id,
        premature_return=quote,
    )


@router.post("/deposits/{fd_id}/withdrawal/confirm", response_model=WithdrawalConfirmResponse)
def confirm_withdrawal(
    fd_id: str,
    ctx: SessionContext = Depends(require_active_session),
    db: Session = Depends(get_db),
):
    """Close the deposit and credit the premature return to savings"""
    deposit_repo = FixedDepositRepository(db)
    fd = _load_deposit(deposit_repo, ctx.account.email, fd_id)

    credited = complete_withdrawal(ctx.account, fd, ctx.now)
    deposit_repo.delete(ctx.account.email, fd_id)
    AccountRepository(db).save(ctx.account)
    db.commit()
    return WithdrawalConfirmResponse(fd_id=fd_id, credited_amount=credited, savings_balance=ctx.account.savings_balance)


@router.post("/deposits/{fd_id}/withdrawal/review", response_model=WithdrawalReviewResponse, status_code=202)
def submit_for_review(
    fd_id: str,
    request_body: WithdrawalReviewRequest,
    ctx: SessionContext = Depends(require_active_session),
    db: Session = Depends(get_db),
):
    """Senior customers' withdrawals go to manual review. Nothing is persisted.

    The age policy is re-checked: frozen accounts get 403, everyone else
    but senior customers gets 422.
    """
    _load_deposit(FixedDepositRepository(db), ctx.account.email, fd_id)
    validate_review_submission(ctx.account, request_body.reason, request_body.document_name)
    return WithdrawalReviewResponse(
        fd_id=fd_id,
        status="submitted_for_review",
        message="Your withdrawal request has been submitted for review.",
    )
