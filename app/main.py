import signal
import sys
import threading

from dotenv import load_dotenv

from infrastructure.logging import configure_logging
from infrastructure.services import get_settings
from server import BindError, InitializationError, Server, ShutdownError


def _list_configs(settings, logger) -> None:
    """Log every configuration section and its keys."""
    config_settings: dict[str, list[object]] = {"settings": []}

    for key, value in settings.model_dump().items():
        if isinstance(value, dict):
            config_settings[key] = list(value.keys())
        else:
            config_settings["settings"].append({key: value})

    logger.info("configuration_initialized", base_settings=config_settings["settings"])
    for key, value in config_settings.items():
        if key != "settings":
            logger.info("configuration_loaded", config_setting=key, keys=value)


def _install_signal_handlers(server: Server, logger) -> None:
    def _stop_in_background() -> None:
        try:
            server.stop()
        except ShutdownError:
            # run() re-raises the same error and the process exits from there
            pass

    def _handle_exit(signum, frame):  # pylint: disable=unused-argument
        logger.info("shutdown_signal_received", signal=signal.Signals(signum).name)
        threading.Thread(target=_stop_in_background, name="http-server-stop").start()

    signal.signal(signal.SIGINT, _handle_exit)
    signal.signal(signal.SIGTERM, _handle_exit)


def main() -> int:
    """Start the HTTP server and block until a shutdown signal stops it."""
    load_dotenv()
    settings = get_settings()
    logger = configure_logging(settings=settings)
    logger.info("application_startup")
    _list_configs(settings, logger)

    try:
        server = Server(settings.server.ROOT_DIR, settings)
    except InitializationError as e:
        logger.error("application_init_failed", error=str(e))
        return 1

    _install_signal_handlers(server, logger)

    try:
        server.run()
    except BindError as e:
        logger.error("application_bind_failed", error=str(e))
        return 1
    except ShutdownError as e:
        logger.critical("application_shutdown_failed", error=str(e))
        return 1

    logger.info("application_exited")
    return 0


if __name__ == "__main__":
    sys.exit(main())
