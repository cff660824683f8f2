"""HTTP server lifecycle manager.

Builds the FastAPI engine with the localize middleware in front of the
registered routes, serves it with uvicorn on a background thread and
coordinates a bounded graceful shutdown.

Usage:
    server = Server(root_dir, settings)
    # On another thread, e.g. a signal handler:
    #     server.stop()
    server.run()  # blocks until stop() completes
"""

import socket
import threading
from concurrent.futures import Future
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple, Union

import uvicorn
from fastapi import FastAPI

from api.router import RouteRegistrar, SystemRouteRegistrar
from infrastructure.configuration import Settings
from infrastructure.i18n import LocalizeMiddleware, create_localization
from infrastructure.logging import get_module_logger
from infrastructure.services.providers import get_settings
from server.exceptions import (
    BindError,
    InitializationError,
    ServerStateError,
    ShutdownError,
)

logger = get_module_logger()

# In-flight requests get this long to finish; a shutdown still running
# after it is fatal
SHUTDOWN_TIMEOUT_SECONDS = 10
# uvicorn cancels leftover request tasks this long after the deadline
FORCE_EXIT_GRACE_SECONDS = 1.0
LISTEN_BACKLOG = 2048


class ServerState(str, Enum):
    """Lifecycle states of a Server."""

    CREATED = "created"
    INITIALIZED = "initialized"
    SERVING = "serving"
    STOPPED = "stopped"


class Server:
    """One HTTP server instance, owned by the caller that built it.

    Attributes:
        root_dir: Root directory used to resolve assets (locale files).
        settings: Application settings (listener address, i18n).
        app: FastAPI engine, available once initialized.
        address: (host, port) actually bound, available once serving.
        state: Current ServerState.
    """

    def __init__(
        self,
        root_dir: Union[str, Path],
        settings: Optional[Settings] = None,
        registrar: Optional[RouteRegistrar] = None,
    ):
        """Build the server: load locales, install middleware, register routes.

        Args:
            root_dir: Root directory for assets.
            settings: Application settings (default: get_settings()).
            registrar: Route registration boundary (default: system routes).

        Raises:
            InitializationError: If locale loading or route registration fails.
        """
        self.root_dir = Path(root_dir)
        self.settings = settings or get_settings()
        self.registrar = registrar or SystemRouteRegistrar()
        self.state = ServerState.CREATED
        self.app: Optional[FastAPI] = None
        self.address: Optional[Tuple[str, int]] = None

        self._lock = threading.Lock()
        self._done: Future = Future()
        self._serving = threading.Event()
        self._socket: Optional[socket.socket] = None
        self._uvicorn: Optional[uvicorn.Server] = None
        self._thread: Optional[threading.Thread] = None

        self._init()

    def _init(self) -> None:
        try:
            self.app = self._init_http_server()
        except Exception as e:
            logger.error("http_server_init_failed", error=str(e))
            raise InitializationError(f"init HTTP server error: {e}") from e
        self.state = ServerState.INITIALIZED

    def _init_http_server(self) -> FastAPI:
        negotiator, translator = create_localization(self.root_dir, self.settings.i18n)

        app = FastAPI(docs_url=None, redoc_url=None, openapi_url=None)
        app.state.settings = self.settings
        app.dependency_overrides[get_settings] = lambda: self.settings
        app.state.locale_bundle = translator.bundle
        app.add_middleware(
            LocalizeMiddleware, negotiator=negotiator, translator=translator
        )

        self.registrar.register(str(self.root_dir), app)
        return app

    def _bind(self) -> socket.socket:
        host = self.settings.server.PLUGIN_ADDR
        port = self.settings.server.PLUGIN_PORT
        bind_address = self.settings.server.bind_address

        try:
            family, socktype, proto, _, sockaddr = socket.getaddrinfo(
                host or None, port, type=socket.SOCK_STREAM, flags=socket.AI_PASSIVE
            )[0]
            sock = socket.socket(family, socktype, proto)
        except OSError as e:
            logger.error("http_server_bind_failed", address=bind_address, error=str(e))
            raise BindError(bind_address, str(e)) from e

        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind(sockaddr)
            sock.listen(LISTEN_BACKLOG)
        except OSError as e:
            sock.close()
            logger.error("http_server_bind_failed", address=bind_address, error=str(e))
            raise BindError(bind_address, str(e)) from e

        return sock

    def run(self) -> None:
        """Bind the listener, serve in the background and block until stopped.

        Raises:
            ServerStateError: If the server is not in the INITIALIZED state.
            BindError: If the address is in use or otherwise unreachable.
            ShutdownError: If stop() failed to shut the server down in time.
        """
        with self._lock:
            if self.state is not ServerState.INITIALIZED:
                raise ServerStateError(f"cannot run server in state {self.state.value}")

            self._socket = self._bind()
            self.address = self._socket.getsockname()[:2]

            config = uvicorn.Config(
                self.app,
                log_config=None,
                access_log=False,
                timeout_graceful_shutdown=SHUTDOWN_TIMEOUT_SECONDS + FORCE_EXIT_GRACE_SECONDS,
            )
            self._uvicorn = uvicorn.Server(config)
            self._thread = threading.Thread(
                target=self._serve,
                daemon=True,
                name="http-server",
            )
            self.state = ServerState.SERVING
            self._thread.start()

        logger.info("http_server_listening", address=f"{self.address[0]}:{self.address[1]}")
        self._serving.set()

        # Only stop() completes this future
        self._done.result()

    def _serve(self) -> None:
        try:
            self._uvicorn.run(sockets=[self._socket])
        except (Exception, SystemExit) as e:
            logger.error("http_server_serve_failed", error=str(e))
            return

        if self.state is not ServerState.STOPPED:
            logger.error("http_server_serve_exited", reason="not_stopped")

    def wait_until_serving(self, timeout: Optional[float] = None) -> bool:
        """Block until the listener is bound, up to timeout seconds."""
        return self._serving.wait(timeout)

    @property
    def stopped(self) -> bool:
        return self._done.done()

    def stop(self) -> None:
        """Gracefully shut the server down and unblock run().

        In-flight requests get SHUTDOWN_TIMEOUT_SECONDS to complete. Calling
        stop() again is a no-op.

        Raises:
            ShutdownError: If shutdown has not completed by the deadline, e.g.
                a request is still being handled. Leftover requests are
                cancelled, but the error is fatal for the process.
        """
        with self._lock:
            if self.state is ServerState.STOPPED:
                logger.info("http_server_already_stopped")
                return
            previous_state = self.state
            self.state = ServerState.STOPPED

        if previous_state is not ServerState.SERVING:
            logger.info("http_server_exited", previous_state=previous_state.value)
            self._done.set_result(None)
            return

        logger.info("http_server_shutdown_initiated", timeout=SHUTDOWN_TIMEOUT_SECONDS)
        self._uvicorn.should_exit = True
        self._thread.join(SHUTDOWN_TIMEOUT_SECONDS)

        if self._thread.is_alive():
            state = self._uvicorn.server_state
            pending_requests = len(state.tasks)
            open_connections = len(state.connections)

            self._uvicorn.force_exit = True
            self._thread.join(2 * FORCE_EXIT_GRACE_SECONDS)
            self._close_socket()
            error = ShutdownError(
                f"shutdown HTTP server error: not completed within {SHUTDOWN_TIMEOUT_SECONDS}s"
            )
            logger.critical(
                "http_server_shutdown_failed",
                error=str(error),
                pending_requests=pending_requests,
                open_connections=open_connections,
                serve_thread_alive=self._thread.is_alive(),
            )
            self._done.set_exception(error)
            raise error

        self._close_socket()
        logger.info("http_server_exited")
        self._done.set_result(None)

    def _close_socket(self) -> None:
        if self._socket is not None:
            self._socket.close()
            self._socket = None
