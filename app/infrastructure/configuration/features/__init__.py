"""Feature settings __init__ - exports all feature settings."""

from infrastructure.configuration.features.i18n import I18nSettings

__all__ = [
    "I18nSettings",
]
