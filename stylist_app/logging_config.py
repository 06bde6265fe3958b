"""Structured logging helpers for the wardrobe stylist app."""

from __future__ import annotations

import contextlib
import contextvars
import json
import logging
import os
import re
import time
import uuid
from typing import Any, Dict, Iterator

CORRELATION_ID = contextvars.ContextVar("correlation_id", default=None)
_RESERVED_RECORD_KEYS = set(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__
) | {"message", "asctime", "taskName"}
_REDACT_KEYS = {
    "email",
    "password",
    "password_hash",
    "calendar_token",
    "image",
    "analysis_photo",
    "notes",
    "location",
    "description",
}
_EMAIL_PATTERN = re.compile(r"[\w.\-+]+@[\w.\-]+")
_MAX_STRING = 200


class JsonFormatter(logging.Formatter):
    """Emit one JSON object per log line with correlation metadata."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        record_message = super().format(record)
        payload: Dict[str, Any] = {
            "timestamp": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S%z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record_message,
            "event": getattr(record, "event", record_message),
            "correlation_id": getattr(record, "correlation_id", None) or CORRELATION_ID.get(),
        }
        for key, value in record.__dict__.items():
            if key in _RESERVED_RECORD_KEYS or key in payload:
                continue
            payload[key] = redact_for_log(value)
        return json.dumps(payload, default=str)


def configure_logging(level: int | str | None = None) -> None:
    """Configure root logging with JSON output."""

    desired_level = level or os.getenv("LOG_LEVEL", "INFO")
    logging.root.handlers.clear()
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    logging.basicConfig(level=desired_level, handlers=[handler])


def _redact_string(value: str) -> str:
    if value.startswith("data:image"):
        return "[image]"
    if _EMAIL_PATTERN.search(value):
        value = _EMAIL_PATTERN.sub("[redacted-email]", value)
    if len(value) > _MAX_STRING:
        return value[:_MAX_STRING] + "...[truncated]"
    return value


def redact_for_log(payload: Any) -> Any:
    """Recursively scrub account details and image payloads before logging."""

    if payload is None or isinstance(payload, (bool, int, float)):
        return payload
    if isinstance(payload, str):
        return _redact_string(payload)
    if isinstance(payload, (list, tuple)):
        return [redact_for_log(item) for item in payload]
    if isinstance(payload, dict):
        return {
            key: "[redacted]" if key in _REDACT_KEYS else redact_for_log(value)
            for key, value in payload.items()
        }
    return _redact_string(str(payload))


def get_logger(name: str) -> logging.Logger:
    """Return a module logger, configuring the root logger on first use."""

    if not logging.getLogger().handlers:
        configure_logging()
    return logging.getLogger(name)


def ensure_correlation_id(correlation_id: str | None = None) -> str:
    """Return the active correlation id, assigning one when missing."""

    if correlation_id:
        CORRELATION_ID.set(correlation_id)
        return correlation_id
    current = CORRELATION_ID.get()
    if current:
        return current
    new_id = uuid.uuid4().hex
    CORRELATION_ID.set(new_id)
    return new_id


def log_event(logger: logging.Logger, level: int, event: str, **fields: Any) -> None:
    """Emit a structured log entry with correlation metadata."""

    correlation_id = ensure_correlation_id(fields.pop("correlation_id", None))
    exc_info = fields.pop("exc_info", None)
    logger.log(
        level,
        event,
        exc_info=exc_info,
        extra={"event": event, "correlation_id": correlation_id, **redact_for_log(fields)},
    )


@contextlib.contextmanager
def operation_context(name: str, logger: logging.Logger | None = None, **attributes: Any) -> Iterator[str]:
    """Scope a correlation id to one operation and log how long it took."""

    token = CORRELATION_ID.set(attributes.pop("correlation_id", None) or uuid.uuid4().hex)
    start = time.perf_counter()
    try:
        yield CORRELATION_ID.get()
    finally:
        if logger is not None:
            log_event(
                logger,
                logging.DEBUG,
                "operation_finished",
                operation=name,
                duration_ms=round((time.perf_counter() - start) * 1000, 2),
                **attributes,
            )
        CORRELATION_ID.reset(token)


__all__ = [
    "configure_logging",
    "ensure_correlation_id",
    "get_logger",
    "log_event",
    "operation_context",
    "redact_for_log",
]
