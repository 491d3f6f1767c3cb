"""Logging configuration with automatic request-id injection.

Everything pester-shim logs goes to stderr so the runner's own output on
stdout stays untouched for the editor.

Usage:
    from pester_shim.core.logging_config import configure_logging

    configure_logging(level="INFO", format="human")
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional, TextIO, Union

__all__ = [
    "ContextFilter",
    "HumanReadableFormatter",
    "StructuredFormatter",
    "configure_logging",
    "set_request_id_provider",
]

ROOT_LOGGER = "pester_shim"

# Returns the current request id; installed by the CLI layer
_request_id_provider: Optional[Callable[[], str]] = None


def set_request_id_provider(provider: Optional[Callable[[], str]]) -> None:
    """Install the callable used by ContextFilter to look up the request id."""
    global _request_id_provider
    _request_id_provider = provider


class ContextFilter(logging.Filter):
    """Logging filter that adds ``request_id`` to every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        request_id = _request_id_provider() if _request_id_provider else ""
        record.request_id = request_id or "-"
        return True


class StructuredFormatter(logging.Formatter):
    """JSON-structured log formatter for machine-readable output.

    Example output:
        {"timestamp":"2024-01-15T10:30:45.123+00:00","level":"WARNING",
         "logger":"pester_shim.core.dispatcher","message":"Failed to load Pester...",
         "request_id":"cli_a1b2c3d4e5f6"}
    """

    def __init__(self, *, include_extra: bool = True, include_exception: bool = True):
        super().__init__()
        self.include_extra = include_extra
        self.include_exception = include_exception

        # Standard attributes to exclude from "extra"
        self._standard_attrs = set(
            logging.LogRecord("", 0, "", 0, "", (), None).__dict__
        ) | {"message", "request_id", "taskName"}

    def format(self, record: logging.LogRecord) -> str:
        log_entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", "-"),
        }

        if self.include_exception and record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        if self.include_extra:
            extra = {}
            for key, value in record.__dict__.items():
                if key not in self._standard_attrs:
                    try:
                        json.dumps(value)
                        extra[key] = value
                    except (TypeError, ValueError):
                        extra[key] = str(value)
            if extra:
                log_entry["extra"] = extra

        return json.dumps(log_entry, default=str)


class HumanReadableFormatter(logging.Formatter):
    """Human-readable formatter.

    Produces logs in format:
        [LEVEL] logger: message

    Example:
        [WARNING] core.dispatcher: Failed to load Pester. ...
    """

    def __init__(self, *, include_request_id: bool = False):
        super().__init__()
        self.include_request_id = include_request_id

    def format(self, record: logging.LogRecord) -> str:
        parts = [f"[{record.levelname}]"]

        request_id = getattr(record, "request_id", "-")
        if self.include_request_id and request_id != "-":
            parts.append(f"[{request_id}]")

        logger_name = record.name
        if logger_name.startswith(ROOT_LOGGER + "."):
            logger_name = logger_name[len(ROOT_LOGGER) + 1:]
        parts.append(f"{logger_name}:")
        parts.append(record.getMessage())

        result = " ".join(parts)
        if record.exc_info:
            result += "\n" + self.formatException(record.exc_info)
        return result


def configure_logging(
    *,
    level: Union[int, str] = logging.WARNING,
    format: str = "human",  # "structured" or "human"
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """Configure the root pester_shim logger.

    Args:
        level: Log level (default: WARNING)
        format: Output format ("structured" for JSON, "human" for readable)
        stream: Output stream (default: stderr)

    Returns:
        Configured root logger for pester_shim
    """
    if isinstance(level, str):
        level = level.upper()

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    logger.handlers.clear()

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(level)

    if format == "structured":
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(
            HumanReadableFormatter(include_request_id=level == "DEBUG" or level == logging.DEBUG)
        )
    handler.addFilter(ContextFilter())

    logger.addHandler(handler)
    return logger
