"""Structured JSON logging with correlation ID support."""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any

from .correlation import get_correlation_id
from .redaction import redact_fields


class JsonFormatter(logging.Formatter):
    """JSON formatter that includes correlation ID and redacted extra fields."""

    def format(self, record: logging.LogRecord) -> str:
        log_obj: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        correlation_id = get_correlation_id()
        if correlation_id:
            log_obj["correlationId"] = correlation_id

        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)

        # Fields passed as extra={"extra_fields": {...}}
        extra_fields = getattr(record, "extra_fields", None)
        if isinstance(extra_fields, dict):
            log_obj.update(redact_fields(extra_fields))

        return json.dumps(log_obj, default=str)


def configure_logging(level: str | None = None) -> None:
    """Route all `horizontas.*` loggers to stdout as JSON.

    Idempotent: a second call only updates the level.
    """
    logger = logging.getLogger("horizontas")
    logger.setLevel((level or os.environ.get("LOG_LEVEL", "INFO")).upper())

    if not any(isinstance(h.formatter, JsonFormatter) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JsonFormatter())
        logger.addHandler(handler)
    logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Get a logger configured for JSON output."""
    configure_logging()
    return logging.getLogger(name)
