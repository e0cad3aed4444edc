"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from pythonjsonlogger import jsonlogger


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = "bankshield-gateway"


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_risk_decision(
    request_id: str,
    account_email: Optional[str],
    risk_score: float,
    tier: str,
    beneficiary_saved: bool,
    duration_ms: float,
) -> None:
    """Log the outcome of a transfer risk assessment"""
    logging.info(
        "Risk assessment completed",
        extra={
            "request_id": request_id,
            "account": account_email,
            "step": "risk_decision",
            "risk_score": risk_score,
            "risk_tier": tier,
            "beneficiary_saved": beneficiary_saved,
            "duration_ms": duration_ms,
        },
    )


def log_security_event(request_id: str, account_email: Optional[str], event: str, **fields: Any) -> None:
    """Log a policy consequence (lockout, freeze, re-auth prompt, withdrawal outcome)"""
    logging.warning(
        f"Security event: {event}",
        extra={"request_id": request_id, "account": account_email, "step": event, **fields},
    )
