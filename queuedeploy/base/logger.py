"""
Structured logging for queuedeploy.

Every record is a single JSON line.  A reconciliation run binds its
context once (component key and a request id) and every step it logs
carries that context, so one deploy or remove can be followed through a
log aggregator by ``request_id``.
"""

from __future__ import annotations

import json
import logging
import uuid
from typing import Any

LOGGER_NAME = "queuedeploy"

_CONTEXT_FIELDS = ("request_id", "provider", "component", "operation", "resource")


def new_request_id() -> str:
    return uuid.uuid4().hex[:12]


class StructuredFormatter(logging.Formatter):
    """Render a record and its run context as one JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(
            (field, getattr(record, field))
            for field in _CONTEXT_FIELDS
            if getattr(record, field, None) is not None
        )
        if record.exc_info and record.exc_info[1]:
            exc = record.exc_info[1]
            entry["exception"] = f"{type(exc).__name__}: {exc}"
        return json.dumps(entry)


class DeployLogger:
    """Wrapper around :mod:`logging` that attaches run context to records.

    Context given to :meth:`bind` is merged under the keyword arguments of
    each call; ``None`` values are dropped from the output.
    """

    def __init__(self, name: str = LOGGER_NAME, **context: str | None) -> None:
        self.logger = logging.getLogger(name)
        self.context = context
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(StructuredFormatter())
            self.logger.addHandler(handler)
            self.logger.setLevel(logging.INFO)

    def bind(self, **context: str | None) -> "DeployLogger":
        """Return a logger sharing this one's handlers with extra context."""
        return DeployLogger(self.logger.name, **{**self.context, **context})

    def set_level(self, level: int | str) -> None:
        self.logger.setLevel(level)

    def log_operation(
        self,
        level: int,
        message: str,
        *,
        exc_info: bool = False,
        **fields: str | None,
    ) -> None:
        """Emit *message* with the bound context plus *fields*.

        Recognised fields are ``provider``, ``component``, ``operation``,
        ``resource`` and ``request_id``.
        """
        extra = {field: None for field in _CONTEXT_FIELDS}
        extra.update(self.context)
        extra.update(fields)
        self.logger.log(level, message, extra=extra, exc_info=exc_info)

    def info(self, message: str, **kwargs: Any) -> None:
        self.log_operation(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self.log_operation(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self.log_operation(logging.ERROR, message, **kwargs)

    def debug(self, message: str, **kwargs: Any) -> None:
        self.log_operation(logging.DEBUG, message, **kwargs)


qd_logger = DeployLogger()
