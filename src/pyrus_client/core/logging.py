"""JSON log output for the client, the webhook server and the CLI.

Library modules only call ``logging.getLogger(__name__)`` and pass structured
context through ``extra``; applications opt in to JSON lines on stdout with
:func:`configure_logging`.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

# Attributes every LogRecord carries; anything else came from ``extra``.
_STANDARD_RECORD_ATTRS: frozenset[str] = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__
) | {"message", "asctime", "taskName"}

_NOISY_LOGGERS = ("urllib3",)


def _record_context(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _STANDARD_RECORD_ATTRS and not key.startswith("_")
    }


class JsonFormatter(logging.Formatter):
    """Render a record as a single JSON line.

    Keys: ``timestamp`` (UTC, ISO 8601), ``level``, ``logger``, ``message``,
    plus ``extra`` for the call's context and ``exception`` for tracebacks.
    Context values that are not JSON types are rendered with ``str()``.
    """

    def format(self, record: logging.LogRecord) -> str:  # noqa: A003 (record)
        line: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        context = _record_context(record)
        if context:
            line["extra"] = context

        if record.exc_info:
            line["exception"] = self.formatException(record.exc_info)

        return json.dumps(line, ensure_ascii=False, default=str)


def configure_logging(level: str) -> None:
    """Send all records at ``level`` and above to stdout as JSON lines.

    Safe to call more than once: earlier root handlers are dropped.
    """

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)

    stdout = logging.StreamHandler(stream=sys.stdout)
    stdout.setFormatter(JsonFormatter())
    root.addHandler(stdout)
    root.setLevel(level.upper())

    # Connection pool chatter stays at WARNING unless the root is stricter.
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(root.level, logging.WARNING))
