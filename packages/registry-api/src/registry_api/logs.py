# SPDX-License-Identifier: MIT
"""Structured JSON logging.

Example log output:
    {
        "timestamp": "2026-10-18T10:30:00.000Z",
        "severity": "ERROR",
        "service": "provider-registry",
        "logger": "registry_api.middleware.errors",
        "message": "Request failed with BACKEND_ERROR",
        "context": {"method": "PUT", "path": "/v1/hashicorp/aws/versions", "status": 500}
    }
"""

import json
import logging
import sys
import traceback
from datetime import UTC, datetime
from typing import Any

_RESERVED_FIELDS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys() | {"message", "context"}
)


class JSONFormatter(logging.Formatter):
    """Formats log records as one JSON object per line.

    Extra fields passed via ``extra={"context": {...}}`` are emitted under
    ``context``; any other extra attributes are collected there as well.
    """

    def __init__(self, service_name: str, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": self._format_timestamp(record.created),
            "severity": record.levelname,
            "service": self.service_name,
            "logger": record.name,
            "message": record.getMessage(),
        }

        context = self._extract_context(record)
        if context:
            log_entry["context"] = context

        if record.exc_info:
            log_entry["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": "".join(traceback.format_exception(*record.exc_info)),
            }

        return json.dumps(log_entry, default=str)

    def _format_timestamp(self, created: float) -> str:
        dt = datetime.fromtimestamp(created, tz=UTC)
        return dt.strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"

    def _extract_context(self, record: logging.LogRecord) -> dict[str, Any] | None:
        context = getattr(record, "context", None)
        if isinstance(context, dict):
            return dict(context)

        extra = {k: v for k, v in record.__dict__.items() if k not in _RESERVED_FIELDS}
        return extra or None


def configure_logging(service_name: str, log_level: str = "INFO") -> logging.Logger:
    """Install a single JSON stdout handler on the root logger.

    Call once at process start.

    Raises:
        ValueError: If log_level is not a known level name.
    """
    numeric_level = getattr(logging, log_level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {log_level}")

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(numeric_level)
    handler.setFormatter(JSONFormatter(service_name=service_name))
    root_logger.addHandler(handler)

    # Route uvicorn's own loggers through the root handler
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers.clear()
        uvicorn_logger.propagate = True

    return root_logger
