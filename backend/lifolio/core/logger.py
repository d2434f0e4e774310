"""JSON logging for token events, correlated by request id."""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from flask import Flask, g, has_request_context, request

REQUEST_ID_HEADER = "X-Request-ID"

# ``extra`` fields emitted by the token service and the API layer
EXTRA_KEYS = ("endpoint", "elapsed_ms", "user_id", "reason", "detail", "ttl_seconds")


class JSONFormatter(logging.Formatter):
    """Render a record as one JSON object; unset auth extras are omitted."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "time": datetime.fromtimestamp(record.created, UTC).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", None),
        }
        payload.update(
            (key, value)
            for key in EXTRA_KEYS
            if (value := getattr(record, key, None)) is not None
        )
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class RequestIdFilter(logging.Filter):
    """Stamp records logged inside a request with its id."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = ensure_request_id() if has_request_context() else None
        return True


def ensure_request_id() -> str:
    """Return the id of the current request, adopting the client's header if sent."""
    if not has_request_context():
        return str(uuid4())
    if "request_id" not in g:
        g.request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())
    return g.request_id


def configure_logging(level: str | int = "INFO") -> None:
    """Send every record to stdout as JSON at ``level``."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())
    handler.addFilter(RequestIdFilter())
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level.upper() if isinstance(level, str) else level)


def init_app(app: Flask) -> None:
    """Echo the request id back on every response."""

    @app.after_request
    def _inject_request_id(response):
        response.headers.setdefault(REQUEST_ID_HEADER, ensure_request_id())
        return response


__all__ = ["configure_logging", "init_app", "ensure_request_id", "JSONFormatter"]
