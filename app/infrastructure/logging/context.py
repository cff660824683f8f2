"""Request context binding for structured logging.

Binds request-scoped values (correlation id, negotiated language, path)
to structlog's context variables so every log entry emitted while a
request is handled carries them.

Usage:
    from infrastructure.logging import bind_request_context

    with bind_request_context(request_path="/health", language="zh-CN"):
        logger.info("processing_request")
"""

import uuid
from contextlib import contextmanager
from typing import Any, Generator, Optional

import structlog


@contextmanager
def bind_request_context(
    correlation_id: Optional[str] = None,
    request_path: Optional[str] = None,
    request_method: Optional[str] = None,
    language: Optional[str] = None,
    **extra_context: Any,
) -> Generator[None, None, None]:
    """Bind request-scoped context to all logs within the context manager.

    Args:
        correlation_id: Unique request identifier. Auto-generated if not provided.
        request_path: HTTP request path (e.g., "/health").
        request_method: HTTP method (e.g., "GET").
        language: Language tag negotiated for the request.
        **extra_context: Additional key-value pairs to include in logs.
    """
    context: dict[str, Any] = {"correlation_id": correlation_id or str(uuid.uuid4())}

    if request_path is not None:
        context["request_path"] = request_path

    if request_method is not None:
        context["request_method"] = request_method

    if language is not None:
        context["language"] = language

    context.update(extra_context)

    structlog.contextvars.bind_contextvars(**context)
    try:
        yield
    finally:
        structlog.contextvars.unbind_contextvars(*context.keys())


def get_correlation_id() -> Optional[str]:
    """Get the current correlation ID from the logging context."""
    ctx = structlog.contextvars.get_contextvars()
    return ctx.get("correlation_id")


def clear_request_context() -> None:
    """Clear all request-scoped context from the logging context."""
    structlog.contextvars.clear_contextvars()
