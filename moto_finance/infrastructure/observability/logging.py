"""JSON logs for the financing service"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from pythonjsonlogger import jsonlogger

from moto_finance.config import settings

# Libraries that log every statement or request at INFO
NOISY_LOGGERS = ("sqlalchemy.engine", "httpx", "httpcore")


class ServiceJsonFormatter(jsonlogger.JsonFormatter):
    """Adds UTC timestamp, level and service name to every record"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Route all logging to stdout as one JSON object per line"""
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(ServiceJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s"))
    root.addHandler(stdout_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(logging.WARNING, root.level))


def log_schedule_computed(
    request_id: str,
    installments: int,
    frequency: str,
    calculation_mode: str,
    warning: Optional[str],
    duration_ms: float,
) -> None:
    """Degraded calculations (simple split fallback) log at WARNING"""
    logging.log(
        logging.WARNING if warning else logging.INFO,
        "Schedule computed",
        extra={
            "request_id": request_id,
            "step": "schedule_complete",
            "installments": installments,
            "frequency": frequency,
            "calculation_mode": calculation_mode,
            "calculation_warning": warning,
            "duration_ms": round(duration_ms, 3),
        },
    )


def log_quote_created(request_id: str, quote_id: str, motorcycle_id: str, promotion_count: int) -> None:
    logging.info(
        "Quote persisted",
        extra={
            "request_id": request_id,
            "step": "quote_persisted",
            "quote_id": quote_id,
            "motorcycle_id": motorcycle_id,
            "promotion_count": promotion_count,
        },
    )
