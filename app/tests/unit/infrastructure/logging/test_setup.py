"""Unit tests for infrastructure.logging.setup module."""

import logging
from unittest.mock import Mock

import pytest
import structlog

from infrastructure.configuration import Settings
from infrastructure.logging import setup
from infrastructure.logging.setup import (
    SILENT_LEVEL,
    _build_processors,
    _is_test_environment,
    configure_logging,
    get_module_logger,
)


@pytest.fixture
def mock_settings():
    """Mock Settings instance for testing."""
    settings = Mock(spec=Settings)
    settings.LOG_LEVEL = "WARNING"
    settings.is_production = True
    return settings


@pytest.fixture
def outside_tests(monkeypatch):
    """Take the non-test configuration branch, then silence logging again."""
    monkeypatch.setattr(setup, "_is_test_environment", lambda: False)
    yield
    monkeypatch.undo()
    configure_logging()


@pytest.mark.unit
class TestConfigureLogging:
    """Test suite for configure_logging function."""

    def test_detects_pytest(self):
        assert _is_test_environment() is True

    def test_returns_logger(self, mock_settings):
        result = configure_logging(settings=mock_settings)

        assert hasattr(result, "info")
        assert hasattr(result, "error")

    def test_suppresses_output_in_tests(self, mock_settings):
        configure_logging(settings=mock_settings, log_level="DEBUG")

        assert logging.root.level == SILENT_LEVEL

    def test_level_from_settings(self, mock_settings, outside_tests):
        configure_logging(settings=mock_settings)

        assert logging.root.level == logging.WARNING

    def test_level_override(self, mock_settings, outside_tests):
        configure_logging(settings=mock_settings, log_level="debug")

        assert logging.root.level == logging.DEBUG

    def test_unknown_level_falls_back_to_info(self, mock_settings, outside_tests):
        configure_logging(settings=mock_settings, log_level="chatty")

        assert logging.root.level == logging.INFO

    def test_production_renders_json(self, mock_settings, outside_tests):
        configure_logging(settings=mock_settings)

        renderer = structlog.get_config()["processors"][-1]
        assert isinstance(renderer, structlog.processors.JSONRenderer)

    def test_development_override_renders_console(self, mock_settings, outside_tests):
        configure_logging(settings=mock_settings, is_production=False)

        renderer = structlog.get_config()["processors"][-1]
        assert isinstance(renderer, structlog.dev.ConsoleRenderer)


@pytest.mark.unit
class TestBuildProcessors:
    def test_request_context_is_merged(self):
        processors = _build_processors(json_output=True)

        assert structlog.contextvars.merge_contextvars in processors
        assert processors[0] is structlog.stdlib.filter_by_level


@pytest.mark.unit
class TestGetModuleLogger:
    """Test suite for get_module_logger."""

    def test_binds_component(self):
        logger = get_module_logger()
        context = structlog.get_context(logger)

        assert context["module_path"] == __name__
        assert context["component"] == __name__.rsplit(".", 1)[-1]

    def test_created_before_configuration_uses_active_config(self, mock_settings, outside_tests):
        logger = get_module_logger()
        configure_logging(settings=mock_settings)

        bound = logger.bind()
        assert isinstance(bound._processors[-1], structlog.processors.JSONRenderer)
