"""
Dependency injection services.

Provides type aliases and provider functions for FastAPI dependency injection.
"""

from infrastructure.services.dependencies import LocalizerDep, SettingsDep
from infrastructure.services.providers import get_request_localizer, get_settings

__all__ = [
    "SettingsDep",
    "LocalizerDep",
    "get_settings",
    "get_request_localizer",
]
