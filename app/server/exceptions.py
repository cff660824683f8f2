"""Custom exceptions for the HTTP server lifecycle.

Initialization and bind errors abort startup and are returned to the
caller. Shutdown errors are fatal: the process is expected to terminate.
"""


class ServerError(Exception):
    """Base exception for all server lifecycle errors."""

    pass


class InitializationError(ServerError):
    """Raised when the server cannot be built.

    Wraps locale loading and route registration failures; the original
    error is available as __cause__.
    """

    pass


class BindError(ServerError):
    """Raised when the listener cannot bind its address."""

    def __init__(self, address: str, reason: str):
        self.address = address
        self.reason = reason
        super().__init__(f"Cannot listen on {address}: {reason}")


class ShutdownError(ServerError):
    """Raised when graceful shutdown does not complete within its deadline."""

    pass


class ServerStateError(ServerError):
    """Raised when a lifecycle operation is invoked in the wrong state."""

    pass
