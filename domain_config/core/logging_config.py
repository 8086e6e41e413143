"""
Logging setup

- JSON lines to a rotating LOG_FILE, plus a separate *.error.log for errors
- Console output (text in development, JSON elsewhere), silent under NODE_ENV=test
- Every record carries the service name and the current request id
"""

from __future__ import annotations

import json
import logging
import os
import traceback
from contextvars import ContextVar
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from typing import Any, Dict

from domain_config.config import Settings
from domain_config.utils.sanitize import sanitize_dict

SERVICE_NAME = "domain-config-service"

# Set per request by RequestContextMiddleware; "-" outside of a request.
request_id_var: ContextVar[str] = ContextVar("request_id", default="-")

LOG_LEVELS = {
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "http": logging.INFO,
    "verbose": logging.DEBUG,
    "debug": logging.DEBUG,
    "silly": logging.DEBUG,
}

MAX_LOG_BYTES = 10 * 1024 * 1024  # 10MB
LOG_BACKUP_COUNT = 5

# LogRecord attributes that are not user-supplied context
_RESERVED_ATTRS = set(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {
    "message", "asctime", "request_id", "service",
}

_HANDLER_MARKER = "_domain_config_handler"


def is_valid_log_level(level: str) -> bool:
    return level.lower() in LOG_LEVELS


def resolve_log_level(level: str) -> int:
    """Map a LOG_LEVEL name onto a stdlib level (INFO when unknown)"""
    return LOG_LEVELS.get(level.lower(), logging.INFO)


class RequestIDFilter(logging.Filter):
    """Injects request_id and service onto every record"""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = request_id_var.get()
        record.service = SERVICE_NAME
        return True


def _extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _RESERVED_ATTRS and not key.startswith("_")
    }


class JsonFormatter(logging.Formatter):
    """One JSON object per line: timestamp, level, message and context"""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc)
            .isoformat(timespec="milliseconds"),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
            "service": getattr(record, "service", SERVICE_NAME),
            "requestId": getattr(record, "request_id", "-"),
        }
        payload.update(sanitize_dict(_extra_fields(record)))
        if record.exc_info:
            payload["stack"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str, ensure_ascii=False)


class ConsoleFormatter(logging.Formatter):
    """Readable single-line output for development"""

    def __init__(self):
        super().__init__("%(asctime)s [%(levelname)s] %(name)s (%(request_id)s): %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extra = _extra_fields(record)
        if extra:
            line += f" {json.dumps(extra, default=str, ensure_ascii=False)}"
        return line


def error_log_path(log_file: str) -> str:
    """logs/app.log -> logs/app.error.log"""
    root, ext = os.path.splitext(log_file)
    if ext == ".log":
        return f"{root}.error.log"
    return f"{log_file}.error.log"


def setup_logging(settings: Settings) -> logging.Logger:
    """
    Configure the root logger from settings

    Safe to call more than once: handlers installed by a previous call are
    replaced, handlers installed by others (e.g. pytest) are left alone.

    Args:
        settings: Application settings

    Returns:
        logging.Logger: The configured root logger
    """
    root = logging.getLogger()
    level = resolve_log_level(settings.LOG_LEVEL)
    root.setLevel(level)

    for handler in list(root.handlers):
        if getattr(handler, _HANDLER_MARKER, False):
            root.removeHandler(handler)
            handler.close()

    log_dir = os.path.dirname(settings.LOG_FILE)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    request_filter = RequestIDFilter()
    handlers = []

    file_handler = RotatingFileHandler(
        settings.LOG_FILE,
        maxBytes=MAX_LOG_BYTES,
        backupCount=LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(JsonFormatter())
    handlers.append(file_handler)

    error_handler = RotatingFileHandler(
        error_log_path(settings.LOG_FILE),
        maxBytes=MAX_LOG_BYTES,
        backupCount=LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    error_handler.setLevel(logging.ERROR)
    error_handler.setFormatter(JsonFormatter())
    handlers.append(error_handler)

    if not settings.is_test:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(
            ConsoleFormatter() if settings.is_development else JsonFormatter()
        )
        handlers.append(console_handler)

    for handler in handlers:
        handler.addFilter(request_filter)
        setattr(handler, _HANDLER_MARKER, True)
        root.addHandler(handler)

    return root


def log_error(error: BaseException, **context: Any) -> None:
    """
    Log an exception with its name, message, stack and any context

    Args:
        error: The exception
        **context: Extra fields (request_id, method, url, ...)
    """
    logger = logging.getLogger("domain_config.errors")
    fields: Dict[str, Any] = {
        "error_name": type(error).__name__,
        "error_message": str(error),
        "stack": "".join(
            traceback.format_exception(type(error), error, error.__traceback__)
        ),
    }
    fields.update(context)
    logger.error(str(error) or type(error).__name__, extra=fields)
