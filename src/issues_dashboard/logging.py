"""JSON logging for the dashboard server and CLI.

Every record becomes one JSON line. Values passed through ``extra=`` (org,
repo, user_id, counts) are nested under ``"extra"`` so log queries can filter
on them; anything not JSON-native is rendered with ``str``.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import IO, Any

# Attributes every LogRecord carries; anything else came from ``extra=``.
_STANDARD_ATTRS = frozenset(logging.LogRecord("", 0, "", 0, "", (), None).__dict__) | {
    "asctime",
    "message",
}

# PyGithub and its HTTP transport log every request at DEBUG.
_NOISY_LOGGERS = ("github", "urllib3")


def _extra_fields(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _STANDARD_ATTRS and not key.startswith("_")
    }


class JsonFormatter(logging.Formatter):
    """Render a record as a single JSON object.

    Warnings and errors also carry ``"location"`` (``module:line``), which is
    what an operator needs when a lookup degrades to ``unknown``.
    """

    def format(self, record: logging.LogRecord) -> str:  # noqa: A003 (record)
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.levelno >= logging.WARNING:
            payload["location"] = f"{record.module}:{record.lineno}"

        extra = _extra_fields(record)
        if extra:
            payload["extra"] = extra

        if record.exc_info:
            exc_type = record.exc_info[0]
            if exc_type is not None:
                payload["exception_type"] = exc_type.__name__
            payload["exception"] = self.formatException(record.exc_info)
        if record.stack_info:
            payload["stack"] = self.formatStack(record.stack_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


def configure_logging(level: str, *, stream: IO[str] | None = None) -> None:
    """Install a single JSON handler on the root logger.

    Calling this again replaces the handler rather than adding a second one.
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(stream=stream or sys.stdout)
    handler.setFormatter(JsonFormatter())
    root.addHandler(handler)
    root.setLevel(level.upper())

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(root.level, logging.INFO))
