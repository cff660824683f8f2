"""Tests for the HTTP server lifecycle manager."""

import asyncio
import socket
import threading
import time
from concurrent.futures import ThreadPoolExecutor, wait
from unittest.mock import MagicMock

import httpx
import pytest

from infrastructure.i18n import DirectoryUnreadableError, NoLanguagesFoundError
from server import (
    SHUTDOWN_TIMEOUT_SECONDS,
    BindError,
    InitializationError,
    Server,
    ServerState,
    ServerStateError,
    ShutdownError,
)
import server.server as server_module


@pytest.fixture
def executor():
    with ThreadPoolExecutor(max_workers=2) as pool:
        yield pool


@pytest.fixture
def server(root_dir, settings):
    return Server(root_dir, settings)


@pytest.fixture
def running(server, executor):
    """Server.run() on a worker thread; yields (server, run_future)."""
    future = executor.submit(server.run)
    assert server.wait_until_serving(timeout=5)
    yield server, future
    server.stop()
    future.result(timeout=SHUTDOWN_TIMEOUT_SECONDS + 5)


def _url(server, path):
    host, port = server.address
    return f"http://{host}:{port}{path}"


class WorkRoutes:
    """Registers GET /work, a handler that runs for a fixed time."""

    def __init__(self, seconds):
        self.seconds = seconds
        self.started = threading.Event()

    def register(self, root_dir, router):
        @router.get("/work")
        async def work():
            self.started.set()
            await asyncio.sleep(self.seconds)
            return {"done": True}


def _start_work(server, routes, executor):
    """Run the server and send one GET /work; returns (run_future, response_future)."""
    run_future = executor.submit(server.run)
    assert server.wait_until_serving(timeout=5)
    response_future = executor.submit(httpx.get, _url(server, "/work"), timeout=30)
    assert routes.started.wait(timeout=5)
    return run_future, response_future


class TestServerInit:
    """Tests for Server construction."""

    def test_initialized(self, server):
        assert server.state is ServerState.INITIALIZED
        assert server.app is not None
        assert server.address is None
        assert not server.stopped

    def test_locale_bundle_on_app_state(self, server):
        bundle = server.app.state.locale_bundle
        assert [str(tag) for tag in bundle.languages] == ["en", "zh"]
        assert str(bundle.default_language) == "zh"

    def test_missing_locale_directory(self, tmp_path, settings, monkeypatch):
        """No <root>/assets and no ./assets: locale loading fails."""
        monkeypatch.chdir(tmp_path)
        with pytest.raises(InitializationError) as exc_info:
            Server(tmp_path / "root", settings)
        assert isinstance(exc_info.value.__cause__, DirectoryUnreadableError)

    def test_empty_locale_directory(self, tmp_path, settings):
        (tmp_path / "assets" / "lang").mkdir(parents=True)
        with pytest.raises(InitializationError) as exc_info:
            Server(tmp_path, settings)
        assert isinstance(exc_info.value.__cause__, NoLanguagesFoundError)

    def test_relative_assets_fallback(self, root_dir, tmp_path_factory, settings, monkeypatch):
        """A root without assets/ uses ./assets from the working directory."""
        monkeypatch.chdir(root_dir)
        server = Server(tmp_path_factory.mktemp("bare-root"), settings)
        assert len(server.app.state.locale_bundle.languages) == 2

    def test_registrar_receives_root_and_router(self, root_dir, settings):
        registrar = MagicMock()
        server = Server(root_dir, settings, registrar=registrar)
        registrar.register.assert_called_once_with(str(root_dir), server.app)

    def test_registrar_failure(self, root_dir, settings):
        registrar = MagicMock()
        registrar.register.side_effect = RuntimeError("bad route")
        with pytest.raises(InitializationError) as exc_info:
            Server(root_dir, settings, registrar=registrar)
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    def test_invalid_default_language(self, root_dir, settings):
        settings.i18n.default_language = "not a tag"
        with pytest.raises(InitializationError):
            Server(root_dir, settings)


class TestServerRunStop:
    """Tests for Server.run() and Server.stop()."""

    def test_serves_requests(self, running):
        server, _ = running
        assert server.state is ServerState.SERVING
        assert server.address[0] == "127.0.0.1"
        assert server.address[1] > 0

        response = httpx.get(_url(server, "/health"), headers={"Accept-Language": "en"})
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}
        assert response.headers["content-language"] == "en"

    def test_negotiates_language_over_http(self, running):
        server, _ = running
        response = httpx.get(_url(server, "/lang"), headers={"Accept-Language": "zh-CN,en;q=0.8"})
        assert response.json()["language"] == "zh-CN"

        response = httpx.get(_url(server, "/lang"))
        assert response.json()["language"] == "zh"

    def test_run_blocks_until_stop(self, server, executor):
        future = executor.submit(server.run)
        assert server.wait_until_serving(timeout=5)
        time.sleep(0.2)
        assert not future.done()

        started = time.monotonic()
        server.stop()
        assert future.result(timeout=SHUTDOWN_TIMEOUT_SECONDS + 5) is None
        assert time.monotonic() - started < SHUTDOWN_TIMEOUT_SECONDS
        assert server.state is ServerState.STOPPED
        assert server.stopped

    def test_stop_closes_listener(self, server, executor):
        future = executor.submit(server.run)
        assert server.wait_until_serving(timeout=5)
        address = server.address
        server.stop()
        future.result(timeout=SHUTDOWN_TIMEOUT_SECONDS + 5)

        with pytest.raises(httpx.TransportError):
            httpx.get(f"http://{address[0]}:{address[1]}/health", timeout=1)

    def test_in_flight_request_completes(self, root_dir, settings, executor):
        routes = WorkRoutes(seconds=1)
        server = Server(root_dir, settings, registrar=routes)
        run_future, response_future = _start_work(server, routes, executor)

        server.stop()

        response = response_future.result(timeout=5)
        assert response.status_code == 200
        assert response.json() == {"done": True}
        assert run_future.result(timeout=5) is None
        assert server.state is ServerState.STOPPED

    def test_stop_is_idempotent(self, server, executor):
        future = executor.submit(server.run)
        assert server.wait_until_serving(timeout=5)
        server.stop()
        server.stop()
        future.result(timeout=SHUTDOWN_TIMEOUT_SECONDS + 5)
        assert server.state is ServerState.STOPPED

    def test_stop_before_run(self, server):
        server.stop()
        assert server.state is ServerState.STOPPED
        assert server.stopped

    def test_run_after_stop(self, server):
        server.stop()
        with pytest.raises(ServerStateError):
            server.run()

    def test_run_twice(self, running):
        server, _ = running
        with pytest.raises(ServerStateError):
            server.run()

    def test_bind_error_when_address_in_use(self, root_dir, settings):
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as blocker:
            blocker.bind(("127.0.0.1", 0))
            blocker.listen(1)
            settings.server.PLUGIN_PORT = blocker.getsockname()[1]
            server = Server(root_dir, settings)

            with pytest.raises(BindError) as exc_info:
                server.run()

        assert exc_info.value.address == f"127.0.0.1:{settings.server.PLUGIN_PORT}"
        assert server.state is ServerState.INITIALIZED
        assert not server.stopped
        assert not server.wait_until_serving(timeout=0)


class TestServerShutdownFailure:
    """Tests for the fatal shutdown path."""

    @pytest.fixture
    def stuck_server(self, server):
        """Server whose serve thread never exits."""
        server.state = ServerState.SERVING
        server._uvicorn = MagicMock()
        server._thread = MagicMock()
        server._thread.is_alive.return_value = True
        return server

    def test_stop_raises_shutdown_error(self, stuck_server):
        with pytest.raises(ShutdownError):
            stuck_server.stop()

        assert stuck_server._uvicorn.should_exit is True
        assert stuck_server._uvicorn.force_exit is True
        stuck_server._thread.join.assert_any_call(SHUTDOWN_TIMEOUT_SECONDS)

    def test_completion_signal_carries_error(self, stuck_server):
        with pytest.raises(ShutdownError):
            stuck_server.stop()

        assert stuck_server.stopped
        with pytest.raises(ShutdownError):
            stuck_server._done.result(timeout=0)

    def test_second_stop_after_failure_is_noop(self, stuck_server):
        with pytest.raises(ShutdownError):
            stuck_server.stop()
        stuck_server.stop()

    def test_request_outliving_deadline(self, root_dir, settings, executor, monkeypatch):
        monkeypatch.setattr(server_module, "SHUTDOWN_TIMEOUT_SECONDS", 1)
        routes = WorkRoutes(seconds=30)
        server = Server(root_dir, settings, registrar=routes)
        run_future, response_future = _start_work(server, routes, executor)

        started = time.monotonic()
        with pytest.raises(ShutdownError):
            server.stop()
        assert time.monotonic() - started < 5

        with pytest.raises(ShutdownError):
            run_future.result(timeout=5)
        assert server.stopped

        # The leftover request is cancelled rather than left running
        done, _ = wait([response_future], timeout=10)
        assert response_future in done
