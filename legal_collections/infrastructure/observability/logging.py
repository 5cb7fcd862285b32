"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from pythonjsonlogger import jsonlogger

from legal_collections.config import settings


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


def log_record_change(
    request_id: str,
    entity: str,
    action: str,
    record_id: Optional[int],
    changed: int = 1,
) -> None:
    """Log a create/update/delete against the store"""
    logging.info(
        f"{entity} {action}",
        extra={
            "request_id": request_id,
            "entity": entity,
            "action": action,
            "record_id": record_id,
            "changed": changed,
        },
    )


def log_interest_accrual(
    request_id: str,
    instrument_id: int,
    accrued_interest: float,
    changed: int,
) -> None:
    """Log the outcome of an interest recalculation"""
    logging.info(
        "Interest recalculated" if changed else "Interest unchanged, instrument not yet due",
        extra={
            "request_id": request_id,
            "instrument_id": instrument_id,
            "step": "interest_accrual",
            "accrued_interest": accrued_interest,
            "changed": changed,
        },
    )
