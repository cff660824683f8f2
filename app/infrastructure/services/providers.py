"""
Factory functions for dependency injection.

Provides application-scoped singleton providers for core infrastructure services.
"""

from functools import lru_cache

from fastapi import Request

from infrastructure.configuration import Settings
from infrastructure.i18n.translator import Localizer


@lru_cache
def get_settings() -> Settings:
    """
    Get application-scoped settings singleton.

    The @lru_cache decorator ensures only ONE instance is created per process.

    Application code should use the DI type alias for testability:
        from infrastructure.services import SettingsDep
        @router.get("/version")
        def get_version(settings: SettingsDep):
            return {"version": settings.GIT_SHA}

    Returns:
        Settings: Cached settings instance loaded from environment.
    """
    return Settings()


def get_request_localizer(request: Request) -> Localizer:
    """
    Get the Localizer negotiated for the current request.

    Raises:
        RuntimeError: If the localize middleware is not installed.
    """
    localizer = getattr(request.state, "localizer", None)
    if localizer is None:
        raise RuntimeError("LocalizeMiddleware is not installed on this application")
    return localizer
