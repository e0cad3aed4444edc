"""FastAPI application factory"""

import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from bankshield.api.middleware import RequestIDMiddleware, MetricsMiddleware
from bankshield.api.v1 import assist, auth, beneficiaries, complaints, deposits, profile, session, transfers
from bankshield.domain.exceptions import (
    AccountExistsError,
    AccountFrozenError,
    AccountNotFoundError,
    DomainException,
    FixedDepositNotFoundError,
    InsufficientFundsError,
    InvalidRequestError,
    OracleError,
    SessionTerminatedError,
)
from bankshield.infrastructure.observability.logging import setup_logging
from bankshield.config import settings

# Setup structured logging
setup_logging(settings.log_level)

# Most specific first; the first isinstance match wins
EXCEPTION_STATUS = [
    (InvalidRequestError, 422, "INVALID_REQUEST"),
    (InsufficientFundsError, 422, "INSUFFICIENT_FUNDS"),
    (AccountExistsError, 409, "ACCOUNT_EXISTS"),
    (AccountNotFoundError, 404, "NOT_FOUND"),
    (FixedDepositNotFoundError, 404, "NOT_FOUND"),
    (AccountFrozenError, 403, "ACCOUNT_FROZEN"),
    (SessionTerminatedError, 401, "SESSION_TERMINATED"),
    (OracleError, 503, "ORACLE_UNAVAILABLE"),
]


async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
    """Translate domain errors raised by endpoints into JSON error responses"""
    for exc_type, status_code, code in EXCEPTION_STATUS:
        if isinstance(exc, exc_type):
            return JSONResponse(status_code=status_code, content={"detail": {"code": code, "message": str(exc)}})

    logging.error(
        f"Unhandled domain error: {exc}",
        extra={"request_id": getattr(request.state, "request_id", "unknown")},
    )
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="BankShield Gateway",
        description="Behavioral security policies for a demo banking app",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    app.add_exception_handler(DomainException, domain_exception_handler)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(auth.router, prefix="/v1", tags=["auth"])
    app.include_router(session.router, prefix="/v1", tags=["session"])
    app.include_router(transfers.router, prefix="/v1", tags=["transfers"])
    app.include_router(beneficiaries.router, prefix="/v1", tags=["beneficiaries"])
    app.include_router(deposits.router, prefix="/v1", tags=["deposits"])
    app.include_router(profile.router, prefix="/v1", tags=["profile"])
    app.include_router(complaints.router, prefix="/v1", tags=["complaints"])
    app.include_router(assist.router, prefix="/v1", tags=["assist"])

    return app


app = create_app()
