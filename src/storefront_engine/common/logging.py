"""Structured JSON logging for Storefront-Engine.

Request-scoped fields passed through ``extra=`` (tenant, user, guard) are
lifted into the JSON line so denials and store failures can be filtered
per tenant.
"""

import logging
import json
import sys
from datetime import datetime, timezone

CONTEXT_FIELDS = ("tenant_id", "user_id", "guard")


class JSONFormatter(logging.Formatter):
    """Format log records as JSON lines."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in CONTEXT_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                log_entry[key] = value
        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, default=str)


def setup_logging(level: str = "INFO") -> None:
    """Attach one JSON stdout handler to the ``storefront_engine`` logger."""
    root = logging.getLogger("storefront_engine")
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    # create_app may run more than once per process (tests, reloads).
    if not any(isinstance(h.formatter, JSONFormatter) for h in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JSONFormatter())
        root.addHandler(handler)
    root.propagate = False


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(f"storefront_engine.{name}")
