"""
Structured logging for strbuf.

Records follow the OpenTelemetry Logging Data Model when rendered as JSON,
and a compact one-line layout when rendered for a terminal. strbuf is quiet
by default: only warnings (truncation, refused allocations, ignored
configuration) are emitted unless the level is lowered.

Usage::

    from ._logging import scoped_logger

    log = scoped_logger("capacity")
    log.debug("Resized storage", extra={"old_capacity": 16, "new_capacity": 32})

Environment::

    STRBUF_LOG_LEVEL=trace|debug|info|warn|error|fatal|off (default: warn)
    STRBUF_LOG_FORMAT=json|human (default: human if tty, json if piped)
"""

from __future__ import annotations

import json
import logging
import os
import sys
from collections.abc import MutableMapping
from datetime import datetime, timezone
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as get_version
from typing import Any

__all__ = ["logger", "setup_logging", "scoped_logger"]

SERVICE_NAME = "strbuf"

_LEVEL_ENV = "STRBUF_LOG_LEVEL"
_FORMAT_ENV = "STRBUF_LOG_FORMAT"

# OpenTelemetry severity text per Python level
_SEVERITY = {
    logging.DEBUG: "DEBUG",
    logging.INFO: "INFO",
    logging.WARNING: "WARN",
    logging.ERROR: "ERROR",
    logging.CRITICAL: "FATAL",
}

_OFF = logging.CRITICAL + 10

_LEVEL_NAMES = {
    "trace": logging.DEBUG,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "fatal": logging.CRITICAL,
    "critical": logging.CRITICAL,
    "off": _OFF,
    "none": _OFF,
}

# Levels whose records carry code.filepath / code.lineno
_LOCATED_LEVELS = frozenset({logging.DEBUG, logging.ERROR, logging.CRITICAL})

# Attributes every LogRecord has; anything else came in through ``extra``
_RECORD_FIELDS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__
) | {"message", "asctime", "scope", "taskName"}


def _package_version() -> str:
    try:
        return get_version(SERVICE_NAME)
    except PackageNotFoundError:
        return "0.0.0"


def _parse_level(name: str) -> int:
    return _LEVEL_NAMES.get(name.strip().lower(), logging.WARNING)


def _scope_of(record: logging.LogRecord) -> str:
    scope = getattr(record, "scope", None)
    if scope:
        return scope
    # strbuf.<module> loggers configured by applications
    return record.name.rpartition(".")[2] or SERVICE_NAME


def _short_path(pathname: str) -> str:
    marker = f"{SERVICE_NAME}/"
    index = pathname.rfind(marker)
    return pathname[index:] if index >= 0 else pathname


def _extras(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _RECORD_FIELDS and not key.startswith("_")
    }


# =============================================================================
# Formatters
# =============================================================================


class JsonFormatter(logging.Formatter):
    """One JSON object per record, shaped after the OpenTelemetry log data model."""

    def __init__(self) -> None:
        super().__init__()
        self._resource = {
            "service.name": SERVICE_NAME,
            "service.version": _package_version(),
        }

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        # RFC3339 with nanosecond digits; the clock only resolves microseconds
        timestamp = f"{created:%Y-%m-%dT%H:%M:%S}.{created.microsecond * 1000:09d}Z"

        attributes: dict[str, Any] = {"scope": _scope_of(record)}
        attributes.update(_extras(record))
        if record.levelno in _LOCATED_LEVELS:
            attributes["code.filepath"] = _short_path(record.pathname)
            attributes["code.lineno"] = record.lineno

        return json.dumps(
            {
                "timestamp": timestamp,
                "severityText": _SEVERITY.get(record.levelno, "INFO"),
                "body": record.getMessage(),
                "attributes": attributes,
                "resource": self._resource,
            },
            separators=(",", ":"),
            default=repr,
        )


class HumanFormatter(logging.Formatter):
    """
    Single-line terminal layout::

        12:00:01 WARN  [capacity] Capacity below length, content truncated (8 -> 4)

    A resize carrying ``old_capacity`` and ``new_capacity`` is shown as
    ``(old -> new)``; a record carrying only ``new_capacity`` as ``(new)``.
    """

    _RESET = "\x1b[0m"
    _SCOPE_COLOR = "\x1b[36m"
    _LOCATION_COLOR = "\x1b[2m"
    _LEVEL_COLORS = {
        logging.DEBUG: "\x1b[2m",
        logging.WARNING: "\x1b[33m",
        logging.ERROR: "\x1b[31m",
        logging.CRITICAL: "\x1b[31m",
    }

    def __init__(self, use_colors: bool = True) -> None:
        super().__init__()
        self._use_colors = use_colors

    def _paint(self, text: str, color: str | None) -> str:
        if not (self._use_colors and color):
            return text
        return f"{color}{text}{self._RESET}"

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        severity = _SEVERITY.get(record.levelno, "INFO")

        line = (
            f"{created:%H:%M:%S} "
            + self._paint(f"{severity:<5} ", self._LEVEL_COLORS.get(record.levelno))
            + self._paint(f"[{_scope_of(record)}] ", self._SCOPE_COLOR)
            + record.getMessage()
        )

        old_capacity = getattr(record, "old_capacity", None)
        new_capacity = getattr(record, "new_capacity", None)
        if old_capacity is not None and new_capacity is not None:
            line += f" ({old_capacity} -> {new_capacity})"
        elif new_capacity is not None:
            line += f" ({new_capacity})"

        if record.levelno in _LOCATED_LEVELS:
            location = f" [{_short_path(record.pathname)}:{record.lineno}]"
            line += self._paint(location, self._LOCATION_COLOR)
        return line


# =============================================================================
# Logger Setup
# =============================================================================


def _get_log_level() -> int:
    """Level from STRBUF_LOG_LEVEL, WARNING when unset or unknown."""
    return _parse_level(os.environ.get(_LEVEL_ENV, "warn"))


def _get_log_format() -> str:
    """Format from STRBUF_LOG_FORMAT, else human on a tty and json otherwise."""
    fmt = os.environ.get(_FORMAT_ENV)
    if fmt:
        return fmt.strip().lower()
    return "human" if sys.stderr.isatty() else "json"


def _create_handler(fmt: str | None = None) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    if (fmt or _get_log_format()).lower() == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(HumanFormatter(use_colors=sys.stderr.isatty()))
    return handler


logger = logging.getLogger(SERVICE_NAME)


def _setup_default_handler() -> None:
    # Leave alone a logger the application configured before import
    if logger.handlers:
        return
    logger.addHandler(_create_handler())
    logger.setLevel(_get_log_level())


def setup_logging(level: str | int = "WARN", format: str | None = None) -> None:
    """
    Configure strbuf logging, replacing any handlers already attached.

    Parameters
    ----------
    level : str or int, default "WARN"
        A name understood by STRBUF_LOG_LEVEL ("debug", "warn", "off", ...)
        or a ``logging`` constant. Unknown names fall back to WARN.

    format : str, optional
        "json" or "human". Defaults to STRBUF_LOG_FORMAT, then to tty
        detection.

    Examples
    --------
    Trace every reallocation as JSON::

        >>> import strbuf
        >>> strbuf.setup_logging("DEBUG", format="json")
    """
    if isinstance(level, str):
        level = _parse_level(level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    logger.addHandler(_create_handler(format))
    logger.setLevel(level)


class _ScopedLoggerAdapter(logging.LoggerAdapter):
    """Adapter whose fixed ``scope`` is merged under per-call ``extra``."""

    def process(
        self, msg: str, kwargs: MutableMapping[str, Any]
    ) -> tuple[str, MutableMapping[str, Any]]:
        kwargs["extra"] = {**(self.extra or {}), **kwargs.get("extra", {})}
        return msg, kwargs


def scoped_logger(scope: str) -> logging.LoggerAdapter:
    """
    Return an adapter on the strbuf logger that tags records with ``scope``.

    Scopes in use: "buffer", "capacity", "allocator", "config". A call may
    override the scope through ``extra={"scope": ...}``, as split does.
    """
    return _ScopedLoggerAdapter(logger, {"scope": scope})


_setup_default_handler()
