"""Structured Logging: JSON formatter and setup for the grid service.

Invariants:
    - Every line carries timestamp, level, logger name, and message
    - Grid context (grid_date, seed, attempt, template_id) surfaced when passed via extra=
    - JSON in production, human-readable text in development

Design Decisions:
    - Own JSONFormatter on stdlib logging: no extra dependency for one formatter
    - setup_logging called once from the lifespan hook
"""

import json
import logging
from datetime import datetime, timezone

CONTEXT_KEYS = (
    "grid_date", "seed", "attempt", "template_id",
    "error_code", "elapsed_ms", "source", "path",
)


class JSONFormatter(logging.Formatter):
    """One JSON object per log record."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in CONTEXT_KEYS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json"):
    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
        ))
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
