"""Logging setup for pathfx.

Engine modules only create loggers with `logging.getLogger(__name__)` and
log at debug level; they never install handlers. The CLI, or an application
embedding the engine, calls `configure_logging` once.

JSON output is one object per line with a category taken from the module
that logged it (geometry, effects, clock, io, cli, system), so flattening
noise can be told apart from effect or CLI messages. A `trace_id` passed
through `extra=` is lifted to the top level.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from pathfx.config import settings

if TYPE_CHECKING:
    from typing import TextIO

# pathfx module -> category
CATEGORIES = {
    "interpolation": "geometry",
    "measure": "geometry",
    "builder": "geometry",
    "effects": "effects",
    "clock": "clock",
    "canvas": "io",
    "rendering": "io",
    "cli": "cli",
}

# Attributes every record carries; anything else arrived through `extra=`
_RECORD_ATTRIBUTES = frozenset(
    logging.LogRecord("", logging.NOTSET, "", 0, "", None, None).__dict__
) | {"message", "asctime", "trace_id"}

PLAIN_FORMAT = "%(asctime)s %(levelname)5s [%(name)s] %(message)s"

# Third-party loggers kept at warning even when pathfx runs at debug
QUIET_LOGGERS = ("PIL", "svgpathtools")


def log_category(logger_name: str) -> str:
    package, _, module = logger_name.partition(".")
    if package != "pathfx":
        return "system"
    return CATEGORIES.get(module.split(".")[0], "system")


class StructuredFormatter(logging.Formatter):
    """JSON lines formatter."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "category": log_category(record.name),
            "logger": record.name,
            "message": record.getMessage(),
        }

        trace_id = getattr(record, "trace_id", None)
        if trace_id:
            payload["trace_id"] = trace_id

        extra = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRIBUTES and not key.startswith("_")
        }
        if extra:
            payload["extra"] = extra

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        # Values json can't encode (paths, effects) fall back to str()
        return json.dumps(payload, default=str)


def configure_logging(
    *,
    json_format: bool | None = None,
    log_level: int | str | None = None,
    stream: TextIO | None = None,
) -> logging.Handler:
    """Send all logging to a single stream handler on the root logger.

    Args:
        json_format: JSON lines instead of plain text (None: PATHFX_LOG_JSON)
        log_level: Minimum level (None: PATHFX_LOG_LEVEL)
        stream: Stream to write to (default: sys.stderr)

    Returns:
        The installed handler. Handlers from earlier calls are replaced.
    """
    use_json = settings.log_json if json_format is None else json_format
    level = settings.log_level.upper() if log_level is None else log_level

    handler = logging.StreamHandler(stream or sys.stderr)
    if use_json:
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(logging.Formatter(PLAIN_FORMAT, datefmt="%H:%M:%S"))

    root_logger = logging.getLogger()
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return handler
