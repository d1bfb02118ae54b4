"""Logging utility for the tuiman application"""

import json
import logging
import re
from datetime import datetime, timezone
from functools import wraps
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional

from rich.logging import RichHandler

ROOT_LOGGER_NAME = "tuiman"


## Custom JSON Formatter


class JSONFormatter(logging.Formatter):
    """Custom JSON formatter for log records."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "function": record.funcName,
            "line": record.lineno,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        if hasattr(record, "context"):
            log_entry["context"] = record.context

        return json.dumps(log_entry, default=str)


## Log Masking


class SensitiveDataMasker:
    """Masks credentials that end up in log messages."""

    PATTERNS = {
        "bearer": re.compile(r"(bearer\s+)([A-Za-z0-9\-._~+/]+=*)", re.IGNORECASE),
        "password": re.compile(
            r'(password["\']?\s*[:=]\s*["\']?)([^"\'}\s&]+)', re.IGNORECASE
        ),
        "token": re.compile(
            r'(token["\']?\s*[:=]\s*["\']?)([^"\'}\s&]+)', re.IGNORECASE
        ),
        "api_key": re.compile(
            r'(api[_-]?key["\']?\s*[:=]\s*["\']?)([^"\'}\s&]+)', re.IGNORECASE
        ),
        "secret": re.compile(
            r'(secret["\']?\s*[:=]\s*["\']?)([^"\'}\s&]+)', re.IGNORECASE
        ),
        "authorization": re.compile(
            r'(authorization["\']?\s*[:=]\s*["\']?)(?!bearer\s)([^"\'}\s]+)',
            re.IGNORECASE,
        ),
    }

    SENSITIVE_FIELDS = {
        "password",
        "secret",
        "token",
        "api_key",
        "authorization",
        "secret_value",
    }

    REDACTED = "[REDACTED]"

    def mask_string(self, text: str) -> str:
        """Mask sensitive data in a string message."""

        if not text:
            return text

        masked = text
        for pattern in self.PATTERNS.values():
            masked = pattern.sub(lambda m: m.group(1) + self.REDACTED, masked)

        return masked

    def mask_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Mask sensitive data in a dictionary."""

        masked = {}
        for key, value in data.items():
            if str(key).lower() in self.SENSITIVE_FIELDS:
                masked[key] = self.REDACTED
            elif isinstance(value, dict):
                masked[key] = self.mask_dict(value)
            elif isinstance(value, str):
                masked[key] = self.mask_string(value)
            else:
                masked[key] = value

        return masked


class SensitiveDataFilter(logging.Filter):
    """Logging filter to mask sensitive data in log records."""

    def __init__(self):
        super().__init__()
        self.masker = SensitiveDataMasker()

    def filter(self, record: logging.LogRecord) -> bool:
        if record.args:
            record.msg = record.getMessage()
            record.args = None

        if isinstance(record.msg, str):
            record.msg = self.masker.mask_string(record.msg)

        context = getattr(record, "context", None)
        if isinstance(context, dict):
            record.context = self.masker.mask_dict(context)

        return True


## Main Log Manager


class LogManager:
    """Manages logging configuration and provides logger instances."""

    def __init__(
        self,
        log_dir: Path,
        log_level: str = "INFO",
        max_bytes: int = 5_242_880,
        backup_count: int = 3,
    ):
        self.log_dir = log_dir
        self.log_level = self._parse_level(log_level)
        self.max_bytes = max_bytes
        self.backup_count = backup_count
        self.root_logger = logging.getLogger(ROOT_LOGGER_NAME)
        self.root_logger.setLevel(logging.DEBUG)
        self.root_logger.propagate = False
        self.console_handler: Optional[RichHandler] = None
        self.file_handler: Optional[RotatingFileHandler] = None
        self._setup_handlers()

    @staticmethod
    def _parse_level(level: str) -> int:
        value = logging.getLevelName(level.upper())
        if not isinstance(value, int):
            raise ValueError(f"Invalid logging level: {level}")
        return value

    def _setup_handlers(self) -> None:
        """Setup console and file handlers with sensitive data filtering."""

        from .errors import FileSystemError

        sensitive_filter = SensitiveDataFilter()

        for handler in list(self.root_logger.handlers):
            self.root_logger.removeHandler(handler)
            handler.close()

        console_handler = RichHandler(
            show_time=True,
            show_path=False,
            markup=False,
            rich_tracebacks=True,
        )
        console_handler.setLevel(logging.WARNING)
        console_handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
        console_handler.addFilter(sensitive_filter)

        try:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(
                self.log_dir / "tuiman.log",
                maxBytes=self.max_bytes,
                backupCount=self.backup_count,
                encoding="utf-8",
            )
        except OSError as e:
            raise FileSystemError(f"Failed to create log file handler: {e}") from e

        file_handler.setLevel(self.log_level)
        file_handler.setFormatter(JSONFormatter())
        file_handler.addFilter(sensitive_filter)

        self.root_logger.addHandler(console_handler)
        self.root_logger.addHandler(file_handler)
        self.console_handler = console_handler
        self.file_handler = file_handler

    def set_console_enabled(self, enabled: bool) -> None:
        """Detach the console handler while a full-screen UI owns the terminal."""

        if self.console_handler is None:
            return
        if enabled and self.console_handler not in self.root_logger.handlers:
            self.root_logger.addHandler(self.console_handler)
        elif not enabled:
            self.root_logger.removeHandler(self.console_handler)

    def shutdown(self) -> None:
        for handler in list(self.root_logger.handlers):
            self.root_logger.removeHandler(handler)
            handler.close()


## Decorators for Logging


def log_call(func):
    """Decorator to log function calls and their duration."""

    @wraps(func)
    def wrapper(*args, **kwargs):
        logger = logging.getLogger(ROOT_LOGGER_NAME)
        func_name = f"{func.__module__}.{func.__qualname__}"
        logger.debug(f"-> Entering {func_name}")
        start_time = datetime.now()

        try:
            result = func(*args, **kwargs)
            duration = (datetime.now() - start_time).total_seconds()
            logger.debug(f"<- Exiting {func_name} (Duration: {duration:.3f}s)")
            return result

        except Exception as e:
            duration = (datetime.now() - start_time).total_seconds()
            logger.debug(f"<- Error in {func_name} after {duration:.3f}s: {e}")
            raise

    return wrapper


## Module-level LogManager Instance and Helper Functions

_log_manager: Optional[LogManager] = None


def _named_logger(name: Optional[str] = None) -> logging.Logger:
    if name and name != ROOT_LOGGER_NAME and not name.startswith(f"{ROOT_LOGGER_NAME}."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name or ROOT_LOGGER_NAME)


def init_logging(
    log_dir: Path,
    log_level: str = "INFO",
    max_bytes: int = 5_242_880,
    backup_count: int = 3,
) -> LogManager:
    """Initialize logging system and return the LogManager instance."""

    global _log_manager

    if _log_manager is not None:
        _log_manager.shutdown()

    _log_manager = LogManager(log_dir, log_level, max_bytes, backup_count)
    return _log_manager


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger under the ``tuiman`` namespace.

    Loggers are plain children of the ``tuiman`` logger, so modules can grab
    one at import time before ``init_logging`` has attached any handlers.
    """

    return _named_logger(name)
