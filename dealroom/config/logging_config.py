"""
Logging setup: stdout plus an optional rotating file, every record tagged
with the request's correlation id.

The root logger stays at WARNING; only the dealroom package logs at the
configured level.
"""

import logging
import sys
from contextvars import ContextVar
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from dealroom.config.settings import Config

PACKAGE_LOGGER = "dealroom"
NO_CORRELATION_ID = "NO Correlation ID"

# Set per request by CorrelationIdMiddleware; copied into tasks the request spawns
correlation_id_var: ContextVar[str] = ContextVar(
    "correlation_id", default=NO_CORRELATION_ID
)

_HANDLER_NAME = "dealroom"


class CorrelationIdFilter(logging.Filter):
    def filter(self, record):
        record.correlation_id = correlation_id_var.get()
        return True


class SafeFormatter(logging.Formatter):
    """Formats records that bypassed the filter (e.g. from other handlers)."""

    def format(self, record):
        if not hasattr(record, "correlation_id"):
            record.correlation_id = NO_CORRELATION_ID
        return super().format(record)


def _build_handlers(log_file: Optional[str]) -> list[logging.Handler]:
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(log_file, maxBytes=10 * 1024 * 1024, backupCount=5)
        )
    return handlers


def setup_logging(
    level: str = "INFO", log_file: Optional[str] = None, fmt: Optional[str] = None
) -> logging.Logger:
    """
    Install the handlers on the root logger.

    Calling it again replaces the handlers a previous call installed instead
    of stacking duplicates.
    """
    root = logging.getLogger()
    root.setLevel(logging.WARNING)
    for handler in [h for h in root.handlers if h.get_name() == _HANDLER_NAME]:
        root.removeHandler(handler)
        handler.close()

    formatter = SafeFormatter(fmt or Config.LOG_FORMAT)
    for handler in _build_handlers(log_file):
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(formatter)
        handler.addFilter(CorrelationIdFilter())
        root.addHandler(handler)

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    package_logger.info(f"Logging is set up (level={level.upper()}, file={log_file or '-'})")
    return package_logger
