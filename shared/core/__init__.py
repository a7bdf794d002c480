"""Shared core utilities: self health endpoints and structured logging."""

from .health import ServiceHealth, HealthStatus
from .logging_config import (
    setup_logging,
    get_logger,
    RequestLoggingMiddleware,
    set_request_context,
    reset_request_context,
    generate_request_id,
    LoggerAdapter,
)

__all__ = [
    "ServiceHealth",
    "HealthStatus",
    "setup_logging",
    "get_logger",
    "RequestLoggingMiddleware",
    "set_request_context",
    "reset_request_context",
    "generate_request_id",
    "LoggerAdapter",
]
