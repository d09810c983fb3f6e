"""Structured logging for gitpulse."""

from gitpulse.core.logging.config import LEVELS, LogConfig
from gitpulse.core.logging.logger import (
    StructuredLogger,
    configure_logging,
    current_trace_id,
    get_logger,
    log_context,
    log_duration,
    logger,
)

__all__ = [
    "LEVELS",
    "LogConfig",
    "StructuredLogger",
    "configure_logging",
    "current_trace_id",
    "get_logger",
    "log_context",
    "log_duration",
    "logger",
]
