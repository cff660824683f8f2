"""Infrastructure configuration module - public API.

This module provides centralized configuration management for the panel
server using Pydantic BaseSettings with domain-based organization.

Exports:
    Settings: Main settings class (for testing/overrides)
    ServerSettings: Listener settings class
    I18nSettings: Locale negotiation settings class

Example:
    ```python
    from infrastructure.services import get_settings

    settings = get_settings()

    host = settings.server.PLUGIN_ADDR
    default_language = settings.i18n.default_language
    ```
"""

from infrastructure.configuration.settings import Settings
from infrastructure.configuration.features.i18n import I18nSettings
from infrastructure.configuration.infrastructure.server import ServerSettings

__all__ = ["Settings", "I18nSettings", "ServerSettings"]
