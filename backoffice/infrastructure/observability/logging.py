"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pythonjsonlogger import jsonlogger

from backoffice.config import settings


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

    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_fee_quote(
    request_id: str,
    corridor: str,
    currency: str,
    fee: str,
    clamped_to: Optional[str],
    duration_ms: float,
) -> None:
    """Log one fee quote; amounts are logged as strings to keep full precision"""
    logging.info(
        "Fee quote computed",
        extra={
            "request_id": request_id,
            "step": "fee_quote",
            "corridor": corridor,
            "currency": currency,
            "fee": fee,
            "clamped_to": clamped_to,
            "duration_ms": duration_ms,
        },
    )


def log_risk_assessment(
    request_id: str,
    merchant_id: str,
    total_score: int,
    level: str,
    factors: List[str],
    duration_ms: float,
) -> None:
    """Log a merchant risk assessment for review audit trails"""
    logging.info(
        "Risk assessment completed",
        extra={
            "request_id": request_id,
            "merchant_id": merchant_id,
            "step": "risk_assessment",
            "total_score": total_score,
            "risk_level": level,
            "factor_count": len(factors),
            "duration_ms": duration_ms,
        },
    )


def log_risk_batch(
    request_id: str,
    merchant_count: int,
    high_risk: int,
    duration_ms: float,
) -> None:
    """Log a batch assessment once, with the time spent on the whole batch"""
    logging.info(
        "Risk batch completed",
        extra={
            "request_id": request_id,
            "step": "risk_batch",
            "merchant_count": merchant_count,
            "high_risk": high_risk,
            "duration_ms": duration_ms,
        },
    )
