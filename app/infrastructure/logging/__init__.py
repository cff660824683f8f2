"""Structured logging infrastructure.

This package provides centralized logging configuration and utilities
for the panel server using structlog.

Public API:
    - configure_logging(): Initialize logging for the application
    - get_module_logger(): Get a logger for the calling module
    - bind_request_context(): Context manager for request-scoped logging
    - get_correlation_id(): Get current correlation ID from context
    - clear_request_context(): Clear all request context
"""

from infrastructure.logging.setup import (
    configure_logging,
    get_module_logger,
)
from infrastructure.logging.context import (
    bind_request_context,
    get_correlation_id,
    clear_request_context,
)

__all__ = [
    "configure_logging",
    "get_module_logger",
    "bind_request_context",
    "get_correlation_id",
    "clear_request_context",
]
