"""Structured JSON logging with redaction of signature material."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from contextvars import ContextVar, Token
from datetime import UTC, datetime
from typing import Any

REQUEST_ID: ContextVar[str | None] = ContextVar("request_id", default=None)

REDACTED = "[redacted]"
SENSITIVE_KEYS = frozenset({"secret", "signature", "digest", "authorization"})


def set_request_id(request_id: str) -> Token[str | None]:
    """Set request id in context for current execution flow."""
    return REQUEST_ID.set(request_id)


def clear_request_id(token: Token[str | None]) -> None:
    """Reset request id context to previous value."""
    REQUEST_ID.reset(token)


def redact(context: Any, sensitive: Iterable[str] = SENSITIVE_KEYS) -> Any:
    """Mask values whose key names a secret, signature or digest."""
    if not isinstance(context, Mapping):
        return context
    keys = frozenset(sensitive)
    return {
        key: REDACTED if str(key).lower() in keys else redact(value, keys)
        for key, value in context.items()
    }


class JsonFormatter(logging.Formatter):
    """Format log records as one JSON object per line."""

    def __init__(self, sensitive: Iterable[str] = SENSITIVE_KEYS) -> None:
        super().__init__()
        self.sensitive = frozenset(key.lower() for key in sensitive)

    def format(self, record: logging.LogRecord) -> str:
        """Serialize one log record as JSON, masking sensitive context keys."""
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": REQUEST_ID.get(),
        }
        if hasattr(record, "event"):
            payload["event"] = record.event
        if hasattr(record, "context"):
            payload["context"] = redact(record.context, self.sensitive)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def configure_logging(level: str = "INFO") -> None:
    """Install the JSON formatter on the root logger."""
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level.upper())
