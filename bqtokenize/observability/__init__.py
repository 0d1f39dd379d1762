"""Logging setup for bqtokenize."""

from .config import LoggingConfig
from .logging import configure_logging, correlation_context, correlation_id, get_logger

__all__ = [
    "LoggingConfig",
    "configure_logging",
    "correlation_context",
    "correlation_id",
    "get_logger",
]
