"""HTTP server lifecycle: build, serve and gracefully stop the panel server."""

from server.exceptions import (
    BindError,
    InitializationError,
    ServerError,
    ServerStateError,
    ShutdownError,
)
from server.server import SHUTDOWN_TIMEOUT_SECONDS, Server, ServerState

__all__ = [
    "Server",
    "ServerState",
    "SHUTDOWN_TIMEOUT_SECONDS",
    "ServerError",
    "InitializationError",
    "BindError",
    "ShutdownError",
    "ServerStateError",
]
