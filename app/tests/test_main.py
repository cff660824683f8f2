from unittest.mock import MagicMock

import pytest

import main
from server import BindError, InitializationError, ShutdownError


@pytest.fixture
def server_cls(monkeypatch, settings):
    server_cls = MagicMock()
    monkeypatch.setattr(main, "Server", server_cls)
    monkeypatch.setattr(main, "get_settings", lambda: settings)
    monkeypatch.setattr(main, "load_dotenv", MagicMock())
    monkeypatch.setattr(main, "_install_signal_handlers", MagicMock())
    return server_cls


def test_main_runs_until_stopped(server_cls, settings):
    assert main.main() == 0
    server_cls.assert_called_once_with(settings.server.ROOT_DIR, settings)
    server_cls.return_value.run.assert_called_once()
    main._install_signal_handlers.assert_called_once()


def test_main_init_failure(server_cls):
    server_cls.side_effect = InitializationError("init HTTP server error: boom")
    assert main.main() == 1
    main._install_signal_handlers.assert_not_called()


@pytest.mark.parametrize(
    "error",
    [BindError("127.0.0.1:7200", "address in use"), ShutdownError("timeout")],
)
def test_main_run_failure(server_cls, error):
    server_cls.return_value.run.side_effect = error
    assert main.main() == 1


def test_list_configs_logs_sections(settings):
    logger = MagicMock()
    main._list_configs(settings, logger)
    loaded = {
        call.kwargs["config_setting"]
        for call in logger.info.call_args_list
        if call.args[0] == "configuration_loaded"
    }
    assert {"server", "i18n"} <= loaded
