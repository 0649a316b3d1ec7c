"""Logging setup with JSON-lines or plain text output on a single stream handler."""

from __future__ import annotations

import json
import logging
import math
import sys
from collections.abc import Mapping
from datetime import UTC, datetime
from pathlib import Path
from typing import Final, TextIO

JSONScalar = str | int | float | bool | None
JSONValue = JSONScalar | list["JSONValue"] | dict[str, "JSONValue"]

DEFAULT_LOGGER_NAME: Final[str] = "canvas_compiler"
LOG_FORMATS: Final[tuple[str, ...]] = ("json", "text")
_TEXT_FORMAT: Final[str] = "%(levelname)s %(name)s: %(message)s"
_HANDLER_MARKER: Final[str] = "_canvas_compiler_handler"

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


class _JsonLineFormatter(logging.Formatter):
    """Formatter that emits canonical JSON objects per log line."""

    def format(self, record: logging.LogRecord) -> str:
        event: dict[str, JSONValue] = {
            "timestamp": _iso8601z_from_epoch(record.created),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        extras = _extract_extra_fields(record)
        if extras:
            event["fields"] = extras

        if record.exc_info is not None:
            event["exception"] = self.formatException(record.exc_info)
        if record.stack_info:
            event["stack"] = str(record.stack_info)

        return json.dumps(event, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


class _TextFormatter(logging.Formatter):
    """Plain ``LEVEL logger: message`` lines with extras appended as ``key=value``."""

    def __init__(self) -> None:
        super().__init__(_TEXT_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extras = _extract_extra_fields(record)
        if not extras:
            return line
        rendered = " ".join(
            f"{key}={json.dumps(value, sort_keys=True, ensure_ascii=False)}"
            for key, value in sorted(extras.items())
        )
        return f"{line} [{rendered}]"


def setup_logging(
    level: int | str = "WARNING",
    log_format: str = "text",
    stream: TextIO | None = None,
    *,
    logger_name: str = DEFAULT_LOGGER_NAME,
) -> logging.Logger:
    """Install one stream handler on the package logger and return the logger.

    Calling again replaces the handler installed by the previous call; handlers
    added by other code are left alone. ``stream`` defaults to ``sys.stderr``.
    """

    parsed_level = _parse_log_level(level)
    formatter = _formatter_for(log_format)

    logger = logging.getLogger(logger_name)
    _remove_owned_handlers(logger)

    handler = logging.StreamHandler(sys.stderr if stream is None else stream)
    handler.setLevel(parsed_level)
    handler.setFormatter(formatter)
    setattr(handler, _HANDLER_MARKER, True)

    logger.addHandler(handler)
    logger.setLevel(parsed_level)
    logger.propagate = False
    return logger


def shutdown_logging(logger_name: str = DEFAULT_LOGGER_NAME) -> None:
    """Remove the handler installed by ``setup_logging``; its stream is left open."""

    logger = logging.getLogger(logger_name)
    _remove_owned_handlers(logger)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


def _remove_owned_handlers(logger: logging.Logger) -> None:
    for existing in list(logger.handlers):
        if getattr(existing, _HANDLER_MARKER, False):
            logger.removeHandler(existing)
            existing.close()


def _formatter_for(log_format: str) -> logging.Formatter:
    normalized = log_format.strip().lower() if isinstance(log_format, str) else ""
    if normalized == "json":
        return _JsonLineFormatter()
    if normalized == "text":
        return _TextFormatter()
    raise ValueError(f"unsupported log format {log_format!r}; expected one of: json, text")


def _parse_log_level(value: int | str) -> int:
    if isinstance(value, int):
        return value

    if not isinstance(value, str):
        raise ValueError(f"level must be int or str, got {type(value).__name__}")

    normalized = value.strip().upper()
    parsed = logging.getLevelName(normalized)
    if isinstance(parsed, int):
        return parsed

    raise ValueError(f"unsupported logging level {value!r}")


def _iso8601z_from_epoch(epoch_seconds: float) -> str:
    timestamp = datetime.fromtimestamp(epoch_seconds, tz=UTC)
    return timestamp.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _extract_extra_fields(record: logging.LogRecord) -> dict[str, JSONValue]:
    fields: dict[str, JSONValue] = {}
    for key, value in record.__dict__.items():
        if key in _STANDARD_LOG_RECORD_FIELDS:
            continue
        if key.startswith("_"):
            continue
        fields[key] = _normalize_json_value(value)
    return fields


def _normalize_json_value(value: object) -> JSONValue:
    if value is None or isinstance(value, (bool, int, str)):
        return value
    if isinstance(value, float):
        if math.isfinite(value):
            return value
        return repr(value)
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    if isinstance(value, Mapping):
        return {str(key): _normalize_json_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_normalize_json_value(item) for item in value]
    if isinstance(value, (set, frozenset)):
        normalized_items = [_normalize_json_value(item) for item in value]
        return sorted(
            normalized_items,
            key=lambda item: json.dumps(
                item, sort_keys=True, separators=(",", ":"), ensure_ascii=False
            ),
        )
    return repr(value)


__all__ = [
    "DEFAULT_LOGGER_NAME",
    "LOG_FORMATS",
    "JSONScalar",
    "JSONValue",
    "setup_logging",
    "shutdown_logging",
]
