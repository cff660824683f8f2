"""Structlog configuration for the panel server.

configure_logging() runs once, from the entrypoint (or the test conftest).
Loggers handed out by get_module_logger() are lazy proxies: they are bound
to the configuration that is active when they first emit, so modules can
create them at import time, before logging is configured.

Usage:
    from infrastructure.logging import configure_logging, get_module_logger

    logger = get_module_logger()

    def main():
        configure_logging(settings=settings)
        logger.info("application_startup")
"""

import inspect
import logging
import sys
from typing import List, Optional

import structlog
from structlog.stdlib import BoundLogger
from structlog.typing import Processor

from infrastructure.configuration import Settings

# Above CRITICAL: nothing reaches a handler
SILENT_LEVEL = logging.CRITICAL + 1


def _is_test_environment() -> bool:
    return "pytest" in sys.modules


def _build_processors(json_output: bool) -> List[Processor]:
    """Processor chain ending in a JSON renderer (production) or console renderer."""
    processors: List[Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.MODULE,
                structlog.processors.CallsiteParameter.LINENO,
            ]
        ),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())
    return processors


def configure_logging(
    settings: Optional[Settings] = None,
    log_level: Optional[str] = None,
    is_production: Optional[bool] = None,
) -> BoundLogger:
    """Configure structlog on top of the stdlib root logger.

    uvicorn runs with ``log_config=None`` and therefore logs through the same
    root logger and level.

    Args:
        settings: Settings instance. Read from the environment when omitted.
        log_level: Overrides settings.LOG_LEVEL.
        is_production: Overrides settings.is_production (JSON vs console output).

    Returns:
        Logger for the caller.
    """
    if _is_test_environment():
        level = SILENT_LEVEL
        json_output = False
    else:
        settings = settings or Settings()
        level_name = (log_level or settings.LOG_LEVEL).upper()
        level = getattr(logging, level_name, logging.INFO)
        json_output = settings.is_production if is_production is None else is_production

    structlog.configure(
        processors=_build_processors(json_output),
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(format="%(message)s", level=level, force=True)

    return structlog.stdlib.get_logger()


def get_module_logger() -> BoundLogger:
    """Logger bound to the calling module.

    Example:
        # In server/server.py
        logger = get_module_logger()
        # context: {"component": "server", "module_path": "server.server"}
    """
    frame = inspect.currentframe()
    caller = frame.f_back if frame is not None else None
    module = inspect.getmodule(caller) if caller is not None else None
    if module is None:
        return structlog.stdlib.get_logger(component="unknown")

    module_name = module.__name__
    return structlog.stdlib.get_logger(
        component=module_name.rsplit(".", 1)[-1],
        module_path=module_name,
    )
