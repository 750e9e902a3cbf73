"""Structured logging setup: JSON-lines or text output with correlation fields.

Engine code logs through ``structlog.get_logger(__name__)``. ``setup_logging``
routes those events into the stdlib ``swimlane_layout`` logger so that both
styles share the same sinks and formatter. Nothing here runs at import time.
"""

from __future__ import annotations

import contextvars
import json
import logging
import math
import sys
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from datetime import UTC, datetime
from pathlib import Path
from typing import IO, Final

import structlog

from swimlane_layout.domain.models import JSONValue

_DEFAULT_LOGGER_NAME: Final[str] = "swimlane_layout"
_TEXT_FORMAT: Final[str] = "%(asctime)s %(levelname)s %(name)s %(message)s"
_HANDLER_MARKER: Final[str] = "_swimlane_handler"

_STANDARD_LOG_RECORD_FIELDS: Final[frozenset[str]] = frozenset(
    {
        "args",
        "asctime",
        "created",
        "exc_info",
        "exc_text",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "message",
        "module",
        "msecs",
        "msg",
        "name",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "thread",
        "threadName",
        "taskName",
    }
)

_CorrelationState = tuple[tuple[str, str], ...]
_CORRELATION_CONTEXT: contextvars.ContextVar[_CorrelationState] = contextvars.ContextVar(
    "swimlane_layout_correlation", default=()
)


class _JsonLineFormatter(logging.Formatter):
    """One canonical JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        event: dict[str, JSONValue] = {
            "timestamp": _iso8601z_from_epoch(record.created),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in sorted(get_correlation_context().items()):
            event[key] = value

        extras = _extract_extra_fields(record)
        if extras:
            event["fields"] = extras
        if record.exc_info is not None:
            event["exception"] = self.formatException(record.exc_info)

        return json.dumps(event, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


class _TextFormatter(logging.Formatter):
    def __init__(self) -> None:
        super().__init__(_TEXT_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = {**get_correlation_context(), **_extract_extra_fields(record)}
        if not fields:
            return line
        rendered = " ".join(
            f"{key}={json.dumps(value, ensure_ascii=False)}"
            for key, value in sorted(fields.items())
        )
        return f"{line} {rendered}"


def setup_logging(
    observability_config: Mapping[str, object] | None = None,
    *,
    stream: IO[str] | None = None,
    logger_name: str = _DEFAULT_LOGGER_NAME,
) -> logging.Logger:
    """Configure the package logger from an ``[observability]`` mapping.

    Parameters
    ----------
    observability_config:
        ``log_level``, ``log_format`` (``json`` or ``text``) and ``log_path``
        (empty string disables the file sink).
    stream:
        Console sink; defaults to ``sys.stderr`` so stdout stays reserved for
        command output.
    logger_name:
        Logger to configure.
    """

    cfg = dict(observability_config or {})
    level = _parse_log_level(cfg.get("log_level", "INFO"))
    log_format = str(cfg.get("log_format", "json")).strip().lower()
    formatter: logging.Formatter = (
        _TextFormatter() if log_format == "text" else _JsonLineFormatter()
    )

    logger = logging.getLogger(logger_name)
    logger.setLevel(level)
    logger.propagate = False
    for existing in list(logger.handlers):
        if getattr(existing, _HANDLER_MARKER, False):
            logger.removeHandler(existing)
            existing.close()

    console = logging.StreamHandler(stream if stream is not None else sys.stderr)
    console.setLevel(level)
    console.setFormatter(formatter)
    setattr(console, _HANDLER_MARKER, True)
    logger.addHandler(console)

    raw_path = cfg.get("log_path", "")
    if isinstance(raw_path, (str, Path)) and str(raw_path).strip():
        log_path = Path(raw_path)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        setattr(file_handler, _HANDLER_MARKER, True)
        logger.addHandler(file_handler)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.render_to_log_kwargs,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )
    return logger


def get_correlation_context() -> dict[str, str]:
    return dict(_CORRELATION_CONTEXT.get())


def set_correlation_fields(**fields: str | None) -> contextvars.Token[_CorrelationState]:
    """Set correlation fields for the active context and return a reset token."""

    state = get_correlation_context()
    for key, value in fields.items():
        key_name = key.strip()
        if not key_name:
            raise ValueError("correlation key must not be empty")
        if value is None:
            state.pop(key_name, None)
            continue
        normalized = str(value).strip()
        if not normalized:
            raise ValueError(f"correlation value for {key_name!r} must not be empty")
        state[key_name] = normalized
    return _CORRELATION_CONTEXT.set(tuple(state.items()))


def reset_correlation_fields(token: contextvars.Token[_CorrelationState]) -> None:
    _CORRELATION_CONTEXT.reset(token)


@contextmanager
def correlation_scope(**fields: str | None) -> Iterator[None]:
    """Temporarily bind correlation fields for log records in scope."""

    token = set_correlation_fields(**fields)
    try:
        yield
    finally:
        reset_correlation_fields(token)


def _parse_log_level(value: object) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if not isinstance(value, str):
        raise ValueError(f"level must be int or str, got {type(value).__name__}")
    parsed = logging.getLevelName(value.strip().upper())
    if isinstance(parsed, int):
        return parsed
    raise ValueError(f"unsupported logging level {value!r}")


def _iso8601z_from_epoch(epoch_seconds: float) -> str:
    timestamp = datetime.fromtimestamp(epoch_seconds, tz=UTC)
    return timestamp.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _extract_extra_fields(record: logging.LogRecord) -> dict[str, JSONValue]:
    fields: dict[str, JSONValue] = {}
    for key, value in record.__dict__.items():
        if key in _STANDARD_LOG_RECORD_FIELDS or key.startswith("_"):
            continue
        fields[key] = _normalize_json_value(value)
    return fields


def _normalize_json_value(value: object) -> JSONValue:
    if value is None or isinstance(value, (bool, int, str)):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else str(value)
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, Mapping):
        return {str(key): _normalize_json_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_normalize_json_value(item) for item in value]
    if isinstance(value, (set, frozenset)):
        return sorted((_normalize_json_value(item) for item in value), key=repr)
    return repr(value)


__all__ = [
    "correlation_scope",
    "get_correlation_context",
    "reset_correlation_fields",
    "set_correlation_fields",
    "setup_logging",
]
