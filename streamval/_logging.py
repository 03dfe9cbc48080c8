"""
Structured logging (OpenTelemetry-compliant).

streamval logs from two places: the schema reader (``schema`` scope) reports
compile-time problems as warnings and reference resolution at debug level,
and the validator (``validate`` scope) reports verdicts at debug level.
Both use the single ``streamval`` logger through :func:`scoped_logger`.

Usage::

    from ._logging import scoped_logger

    log = scoped_logger("schema")
    log.warning(problem.text, extra={"pointer": "/minLength", "code": problem.message})

Environment::

    STREAMVAL_LOG_LEVEL=trace|debug|info|warn|error|fatal|off (default: warn)
    STREAMVAL_LOG_FORMAT=json|human (default: human if tty, json if piped)
"""

from __future__ import annotations

import json
import logging
import os
import sys
from collections.abc import MutableMapping
from datetime import datetime, timezone
from importlib.metadata import PackageNotFoundError, version
from typing import Any

__all__ = ["logger", "setup_logging", "scoped_logger"]

# =============================================================================
# Levels
# =============================================================================

# OpenTelemetry severity text per Python level
_SEVERITY = {
    logging.DEBUG: "DEBUG",
    logging.INFO: "INFO",
    logging.WARNING: "WARN",
    logging.ERROR: "ERROR",
    logging.CRITICAL: "FATAL",
}

_OFF = logging.CRITICAL + 10

_LEVELS = {
    "trace": logging.DEBUG,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "fatal": logging.CRITICAL,
    "critical": logging.CRITICAL,
    "off": _OFF,
}

# Levels that carry the emitting source line
_LOCATED_LEVELS = frozenset({logging.DEBUG, logging.ERROR, logging.CRITICAL})

# Attributes every LogRecord has; anything else on a record came from ``extra``
_RECORD_FIELDS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "scope", "taskName"}

_PACKAGE_MARKER = f"{os.sep}streamval{os.sep}"


def _severity(record: logging.LogRecord) -> str:
    return _SEVERITY.get(record.levelno, "INFO")


def _scope(record: logging.LogRecord) -> str:
    return getattr(record, "scope", None) or "streamval"


def _source_path(record: logging.LogRecord) -> str:
    """Path of the emitting module relative to the package, e.g. ``schema/reader.py``."""
    _, marker, tail = record.pathname.rpartition(_PACKAGE_MARKER)
    return tail if marker else os.path.basename(record.pathname)


def _extras(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: value
        for key, value in vars(record).items()
        if key not in _RECORD_FIELDS and not key.startswith("_")
    }


# =============================================================================
# Formatters
# =============================================================================


class JsonFormatter(logging.Formatter):
    """One OpenTelemetry log record per line."""

    def __init__(self) -> None:
        super().__init__()
        try:
            self._version = version("streamval")
        except PackageNotFoundError:
            self._version = "0.0.0"

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        attributes = {"scope": _scope(record), **_extras(record)}
        if record.levelno in _LOCATED_LEVELS:
            attributes["code.filepath"] = _source_path(record)
            attributes["code.lineno"] = record.lineno

        entry = {
            # RFC3339, nanosecond field padded from microseconds
            "timestamp": f"{created:%Y-%m-%dT%H:%M:%S}.{created.microsecond:06d}000Z",
            "severityText": _severity(record),
            "body": record.getMessage(),
            "attributes": attributes,
            "resource": {"service.name": "streamval", "service.version": self._version},
        }
        # Decimal limits and Location values are written as strings
        return json.dumps(entry, separators=(",", ":"), default=str)


class HumanFormatter(logging.Formatter):
    """
    Single-line terminal output::

        12:04:31 WARN  [schema] The value of keyword "minLength" is malformed (/minLength)
    """

    _RESET = "\x1b[0m"
    _DIM = "\x1b[2m"
    _CYAN = "\x1b[36m"
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
        line = (
            f"{created:%H:%M:%S} "
            + self._paint(f"{_severity(record):<5}", self._LEVEL_COLORS.get(record.levelno))
            + " "
            + self._paint(f"[{_scope(record)}]", self._CYAN)
            + " "
            + record.getMessage()
        )
        # Schema problems carry a schema pointer, validator records an instance location
        where = getattr(record, "pointer", None) or getattr(record, "location", None)
        if where:
            line += f" ({where})"
        if record.levelno in _LOCATED_LEVELS:
            line += " " + self._paint(f"[{_source_path(record)}:{record.lineno}]", self._DIM)
        return line


# =============================================================================
# Logger Setup
# =============================================================================


def _get_log_level() -> int:
    """Level named by STREAMVAL_LOG_LEVEL, WARNING when unset or unknown."""
    name = os.environ.get("STREAMVAL_LOG_LEVEL", "warn")
    return _LEVELS.get(name.lower(), logging.WARNING)


def _get_log_format() -> str:
    fmt = os.environ.get("STREAMVAL_LOG_FORMAT")
    if fmt:
        return fmt.lower()
    return "human" if sys.stderr.isatty() else "json"


def _create_handler(fmt: str | None = None) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    if (fmt or _get_log_format()).lower() == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(HumanFormatter(use_colors=sys.stderr.isatty()))
    return handler


# Single logger for all of streamval
logger = logging.getLogger("streamval")


def setup_logging(
    level: str | int = "INFO",
    format: str | None = None,
) -> None:
    """
    Configure streamval logging.

    Replaces any handlers on the ``streamval`` logger.

    Parameters
    ----------
    level : str or int, default "INFO"
        Level name ("debug", "info", "warn", "error", "fatal", "off", any
        case) or a logging constant like ``logging.DEBUG``.
    format : str, optional
        "json" or "human". Defaults to STREAMVAL_LOG_FORMAT, or to "human"
        on a terminal and "json" otherwise.

    Examples
    --------
    Schema problems as JSON lines::

        >>> import streamval
        >>> streamval.setup_logging("WARN", format="json")
    """
    if isinstance(level, str):
        level = _LEVELS.get(level.lower(), logging.INFO)

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    logger.addHandler(_create_handler(format))
    logger.setLevel(level)


class _ScopedLoggerAdapter(logging.LoggerAdapter):
    """Adds the adapter's scope to the ``extra`` of every call."""

    def process(
        self, msg: str, kwargs: MutableMapping[str, Any]
    ) -> tuple[str, MutableMapping[str, Any]]:
        kwargs["extra"] = {**(self.extra or {}), **kwargs.get("extra", {})}
        return msg, kwargs


def scoped_logger(scope: str) -> logging.LoggerAdapter:
    """
    Logger adapter tagging records with ``scope``.

    Parameters
    ----------
    scope : str
        "schema" for the reader, "validate" for the validator.
    """
    return _ScopedLoggerAdapter(logger, {"scope": scope})


# Default handler from the environment, unless the application set one up
if not logger.handlers:
    logger.addHandler(_create_handler())
    logger.setLevel(_get_log_level())
