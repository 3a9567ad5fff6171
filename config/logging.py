"""Structured JSON logging for FoodBank Pulse."""

from __future__ import annotations

import logging
import sys
from datetime import datetime, timezone
from typing import Any

from pythonjsonlogger.json import JsonFormatter

from .settings import get_settings

__all__ = ["ServiceJsonFormatter", "setup_logging"]


class ServiceJsonFormatter(JsonFormatter):
    """JSON formatter that stamps every record with time, level and service."""

    def __init__(self, *args: Any, service_name: str = "foodbank-pulse", **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.service_name = service_name

    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = self.service_name


def setup_logging(level: str | None = None) -> None:
    """Configure root logging to emit JSON lines on stdout."""

    settings = get_settings()
    root = logging.getLogger()
    root.setLevel((level or settings.log_level).upper())
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        ServiceJsonFormatter(
            "%(timestamp)s %(level)s %(name)s %(message)s",
            service_name=settings.service_name,
        )
    )
    root.addHandler(handler)
