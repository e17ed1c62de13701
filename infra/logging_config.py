"""Centralized logging configuration.

Supports human-friendly text logs and structured JSON logs. ``setup_logging``
only installs a handler when the root logger has none, unless an override is
requested, so embedding applications keep their own logging setup.
"""

from __future__ import annotations

import json
import logging
import sys
import time
from collections.abc import Mapping
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import Any

from infra.config import get_settings

# Fields merged into every JSON log line emitted in the current context.
log_ctx: ContextVar[dict[str, Any] | None] = ContextVar("log_ctx", default=None)

_STANDARD_RECORD_KEYS = frozenset(
    {
        "name", "msg", "args", "levelname", "levelno", "pathname", "filename", "module",
        "exc_info", "exc_text", "stack_info", "lineno", "funcName", "created", "msecs",
        "relativeCreated", "thread", "threadName", "processName", "process", "taskName",
    }
)


def set_log_context(**kwargs: Any) -> None:
    """Add values that will be included in all subsequent JSON log entries."""
    current = dict(log_ctx.get() or {})
    current.update(kwargs)
    log_ctx.set(current)


def clear_log_context() -> None:
    log_ctx.set({})


def get_log_context() -> dict[str, Any]:
    """Return a copy of the current log context."""
    ctx = log_ctx.get()
    return dict(ctx) if ctx else {}


def _utc_iso8601() -> str:
    # Example: 2026-01-24T18:03:12.123Z
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class JsonFormatter(logging.Formatter):
    """
    JSON formatter:
      - one valid JSON object per record
      - `extra={...}` keys and the log context are merged in
      - core fields are never overwritten
    """

    def __init__(self, *, extra_fields: Mapping[str, Any] | None = None) -> None:
        super().__init__()
        self._extra_fields = dict(extra_fields or {})

    def format(self, record: logging.LogRecord) -> str:
        base: dict[str, Any] = {
            "timestamp": _utc_iso8601(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "func": record.funcName,
            "line": record.lineno,
        }

        for k, v in record.__dict__.items():
            if k not in _STANDARD_RECORD_KEYS and k not in base:
                base[k] = v

        for k, v in self._extra_fields.items():
            base.setdefault(k, v)

        for k, v in get_log_context().items():
            base.setdefault(k, v)

        if record.exc_info:
            base["exception"] = self.formatException(record.exc_info)

        return json.dumps(base, ensure_ascii=False, default=str)


class TextFormatter(logging.Formatter):
    """Human-friendly logs with UTC timestamps."""

    converter = time.gmtime

    def __init__(self) -> None:
        super().__init__("%(asctime)sZ | %(levelname)s | %(name)s | %(message)s")


class StructuredLogger:
    """
    Event-style logger: the message is an event name and keyword arguments are
    passed as structured fields.

    Usage:
        logger = StructuredLogger(__name__)
        logger.info("zone_lookup_completed", region="us-east-1", zone_count=6)
    """

    def __init__(self, name: str) -> None:
        self._logger = logging.getLogger(name)

    def _log(self, level: int, event: str, *, exc_info: bool = False, **kwargs: Any) -> None:
        self._logger.log(level, event, extra={"event": event, **kwargs}, exc_info=exc_info)

    def debug(self, event: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, event, **kwargs)

    def info(self, event: str, **kwargs: Any) -> None:
        self._log(logging.INFO, event, **kwargs)

    def warning(self, event: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, event, **kwargs)

    def error(self, event: str, **kwargs: Any) -> None:
        self._log(logging.ERROR, event, **kwargs)

    def exception(self, event: str, **kwargs: Any) -> None:
        """Log at ERROR with the active exception attached."""
        self._log(logging.ERROR, event, exc_info=True, **kwargs)


def setup_logging(
    *,
    level: str | None = None,
    json_logs: bool | None = None,
    override_root_handlers: bool | None = None,
    extra_fields: Mapping[str, Any] | None = None,
) -> None:
    """
    Configure the root logger.

    Env vars (see infra.config):
      - ELBM_LOG_LEVEL: DEBUG|INFO|WARNING|ERROR (default INFO)
      - ELBM_LOG_JSON:  1/0 (default 0)
      - ELBM_LOG_OVERRIDE: 1/0 (default 0)
         If 1, replaces any pre-configured root handlers.
         If 0, only configures logging if root has no handlers.
    """
    config = get_settings(reload=True).logging

    resolved_level = (level or config.level).upper()
    use_json = json_logs if json_logs is not None else bool(config.json_logs)
    override = (
        override_root_handlers if override_root_handlers is not None else bool(config.override_root_handlers)
    )

    root = logging.getLogger()
    root.setLevel(getattr(logging, resolved_level, logging.INFO))

    handler = logging.StreamHandler(sys.stderr)
    if use_json:
        handler.setFormatter(JsonFormatter(extra_fields=extra_fields))
    else:
        handler.setFormatter(TextFormatter())

    if override:
        for h in list(root.handlers):
            root.removeHandler(h)
        root.addHandler(handler)
    elif not root.handlers:
        root.addHandler(handler)

    logging.getLogger("boto3").setLevel(logging.WARNING)
    logging.getLogger("botocore").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
