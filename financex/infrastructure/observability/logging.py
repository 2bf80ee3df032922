"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from pythonjsonlogger import jsonlogger

from financex.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_projection(
    request_id: str,
    user_id: str,
    is_positive: bool,
    days_until_negative: Optional[int],
    transaction_count: int,
    duration_ms: float,
) -> None:
    """Log structured projection outcome"""
    logging.info(
        "Projection computed",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": "projection_complete",
            "projection_outcome": "positive" if is_positive else "negative",
            "days_until_negative": days_until_negative,
            "transaction_count": transaction_count,
            "duration_ms": duration_ms,
        },
    )


def log_ledger_change(
    request_id: str,
    user_id: str,
    action: str,
    outcome: str,
    debt_id: Optional[str],
    payment_id: str,
) -> None:
    """Log a debt payment being applied or retracted"""
    logging.info(
        "Debt ledger updated",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": f"payment_{action}",
            "ledger_outcome": outcome,
            "debt_id": debt_id,
            "payment_id": payment_id,
        },
    )
