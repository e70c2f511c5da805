"""Logging utilities for the Career Coach system.

Console output goes to stderr so ``--json`` command output on stdout stays
parseable. Every handler carries two filters: one stamps the current
correlation id on the record, the other masks provider API keys before any
formatter sees the message.
"""

import json
import logging
import logging.handlers
import re
import sys
import threading
from contextvars import ContextVar
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

# Correlation ID context for request tracing
correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")

REDACTED = "***"

# Key shapes issued by the supported backends, plus bearer headers.
_KEY_PATTERNS = [
    re.compile(r"sk-(?:ant-)?[A-Za-z0-9_\-]{8,}"),
    re.compile(r"hf_[A-Za-z0-9]{8,}"),
    re.compile(r"AIza[A-Za-z0-9_\-]{20,}"),
    re.compile(r"(Bearer\s+)[A-Za-z0-9._\-]+"),
]

_registered_secrets = set()
_secrets_lock = threading.Lock()

_STANDARD_RECORD_KEYS = set(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {
    "message", "asctime", "correlation_id",
}


def register_secrets(values: Iterable[Optional[str]]) -> None:
    """Remember configured key values so they are masked wherever they appear."""
    with _secrets_lock:
        _registered_secrets.update(v for v in values if v and len(v) >= 4)


def redact(text: str) -> str:
    """Mask API keys in ``text``."""
    with _secrets_lock:
        secrets = sorted(_registered_secrets, key=len, reverse=True)
    for secret in secrets:
        text = text.replace(secret, REDACTED)
    for pattern in _KEY_PATTERNS:
        text = pattern.sub(lambda m: (m.group(1) if m.groups() else "") + REDACTED, text)
    return text


class CorrelationIdFilter(logging.Filter):
    """Log filter to add correlation ID to log records."""

    def filter(self, record):
        record.correlation_id = correlation_id.get()
        return True


class SecretRedactingFilter(logging.Filter):
    """Rewrites the record message with API keys masked."""

    def filter(self, record):
        message = record.getMessage()
        masked = redact(message)
        if masked != message:
            record.msg = masked
            record.args = None
        return True


class StructuredFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record):
        log_entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "correlation_id": getattr(record, "correlation_id", ""),
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        # Fields passed through `extra=`, e.g. provider and operation timings
        for key, value in record.__dict__.items():
            if key not in _STANDARD_RECORD_KEYS:
                log_entry[key] = value

        return redact(json.dumps(log_entry, ensure_ascii=False, default=str))


class HumanReadableFormatter(logging.Formatter):
    """Human-readable log formatter for console output."""

    def format(self, record):
        timestamp = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S")
        record_correlation_id = getattr(record, "correlation_id", "")
        correlation_str = f"[{record_correlation_id}] " if record_correlation_id else ""

        message = record.getMessage()
        provider = getattr(record, "provider", None)
        if provider:
            message = f"({provider}) {message}"

        if record.exc_info:
            message += f"\n{redact(self.formatException(record.exc_info))}"

        return f"{timestamp} | {record.levelname:<8} | {record.name:<22} | {correlation_str}{message}"


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    enable_console: bool = True,
    enable_file: bool = False,
    structured: bool = False,
    max_file_size: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5
) -> None:
    """Setup logging configuration for the Career Coach system.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Path to log file
        enable_console: Enable console logging on stderr
        enable_file: Enable rotating file logging (requires ``log_file``)
        structured: Use structured JSON logging
        max_file_size: Maximum log file size in bytes
        backup_count: Number of backup log files to keep
    """
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    formatter = StructuredFormatter() if structured else HumanReadableFormatter()
    handler_filters = [CorrelationIdFilter(), SecretRedactingFilter()]

    handlers = []
    if enable_console:
        handlers.append(logging.StreamHandler(sys.stderr))

    if enable_file and log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.handlers.RotatingFileHandler(
            log_path,
            maxBytes=max_file_size,
            backupCount=backup_count,
            encoding="utf-8"
        ))

    for handler in handlers:
        handler.setFormatter(formatter)
        for handler_filter in handler_filters:
            handler.addFilter(handler_filter)
        root_logger.addHandler(handler)

    # requests logs full URLs at DEBUG
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    logging.getLogger("career_coach").debug("Logging system initialized", extra={
        "log_level": level,
        "console_enabled": enable_console,
        "file_enabled": bool(enable_file and log_file),
        "structured": structured,
    })


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def set_correlation_id(correlation_id_value: str) -> None:
    """Set correlation ID for current context."""
    correlation_id.set(correlation_id_value)


def get_correlation_id() -> str:
    """Get current correlation ID, or an empty string if not set."""
    return correlation_id.get()


def log_performance(operation: str, duration: float, provider: Optional[str] = None, **details) -> None:
    """Log how long one AI operation took.

    Args:
        operation: Operation name, e.g. ``analyze_resume``
        duration: Duration in seconds
        provider: Provider that served the call
        **details: Additional fields for structured output
    """
    extra = {
        "operation": operation,
        "duration_seconds": round(duration, 4),
        "provider": provider,
        **details,
    }
    get_logger("performance").info(f"{operation} took {duration:.3f}s", extra=extra)
