"""Structured Logging — JSON formatter, setup, and the domain event seam.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Extra fields (event, user_id, file_id, error_code, ...) surfaced when present
    - JSON format in production, human-readable in development
    - Domain decision points (access denied, lifecycle transition, capacity
      rejection, user sync) go through emit_event — nowhere else logs them

Design Decisions:
    - JSONFormatter over third-party libs: zero dependencies, full control
    - setup_logging called once on startup via lifespan
    - emit_event is a thin wrapper over a dedicated logger so tests can capture
      events with caplog and operators can route them separately
"""

import logging
import json
from datetime import datetime, timezone
from uuid import UUID

EVENT_LOGGER_NAME = "canvasdesk.events"

_EXTRA_KEYS = (
    "event", "user_id", "file_id", "asset_id", "element_id", "action",
    "reason", "source_state", "target_state", "count", "limit",
    "error_code", "path",
)

_event_logger = logging.getLogger(EVENT_LOGGER_NAME)


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging in production."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _EXTRA_KEYS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = str(val) if isinstance(val, UUID) else val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json"):
    """Configure logging for the application."""
    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s — %(message)s",
        ))
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))


def emit_event(event: str, level: int = logging.INFO, **fields) -> None:
    """Emit one structured domain event. Unknown fields are dropped, never raised."""
    unknown = sorted(set(fields) - set(_EXTRA_KEYS))
    if unknown:
        _event_logger.warning(
            f"Dropping unknown field(s) on event {event}: {unknown}",
            extra={"event": "event_fields_dropped"},
        )
        fields = {k: v for k, v in fields.items() if k in _EXTRA_KEYS}
    _event_logger.log(level, event, extra={"event": event, **fields})
