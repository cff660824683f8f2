"""
Type aliases for FastAPI dependency injection.

Provides annotated type hints for common infrastructure dependencies.
"""

from typing import Annotated

from fastapi import Depends

from infrastructure.configuration import Settings
from infrastructure.i18n.translator import Localizer
from infrastructure.services.providers import get_request_localizer, get_settings

# Settings dependency
SettingsDep = Annotated[Settings, Depends(get_settings)]

# Localizer bound to the language negotiated for the request
LocalizerDep = Annotated[Localizer, Depends(get_request_localizer)]

__all__ = [
    "SettingsDep",
    "LocalizerDep",
]
