"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from pension_gateway.config import settings


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


def log_quote(
    request_id: str,
    wallet_address: str | None,
    required_deposit_minor: int,
    violated_rule: str | None,
    duration_ms: float,
) -> None:
    """Log structured quote outcome for analysis"""
    logging.info(
        "Quote computed",
        extra={
            "request_id": request_id,
            "wallet_address": wallet_address,
            "step": "quote_complete",
            "required_deposit_minor": required_deposit_minor,
            "violated_rule": violated_rule,
            "duration_ms": duration_ms,
        },
    )


def log_flow_transition(
    request_id: str,
    flow_id: str,
    from_step: str,
    to_step: str,
    event: str,
) -> None:
    """Log a transaction flow state change"""
    logging.info(
        "Flow transition",
        extra={
            "request_id": request_id,
            "flow_id": flow_id,
            "step": "flow_transition",
            "from_step": from_step,
            "to_step": to_step,
            "event": event,
        },
    )
