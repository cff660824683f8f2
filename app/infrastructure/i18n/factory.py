"""Factory functions for creating i18n components.

Provides convenience functions for building the locale bundle and the
negotiation middleware from application settings.
"""

from pathlib import Path
from typing import Optional, Tuple, Union

from infrastructure.configuration import I18nSettings
from infrastructure.i18n.loader import JSONTranslationLoader, resolve_locale_dir
from infrastructure.i18n.models import LanguageTag, LocaleBundle
from infrastructure.i18n.resolvers import LocaleNegotiator
from infrastructure.i18n.translator import Translator
from infrastructure.logging import get_module_logger

logger = get_module_logger()


def create_locale_bundle(
    root_dir: Union[str, Path],
    i18n_settings: Optional[I18nSettings] = None,
) -> LocaleBundle:
    """Load the locale bundle for a root directory.

    Language files are read from ``<root_dir>/assets/lang`` (or
    ``./assets/lang`` when the root has no assets directory).

    Args:
        root_dir: Application root directory.
        i18n_settings: Locale settings (default: read from environment).

    Returns:
        LocaleBundle: Immutable bundle with every supported language loaded.

    Raises:
        LocaleError: If the directory is unreadable, holds no language file
            or a translation file is malformed.
        LanguageTagError: If the configured default language is malformed.
    """
    i18n_settings = i18n_settings or I18nSettings()
    default_language = LanguageTag.parse(i18n_settings.default_language)

    if i18n_settings.file_format != JSONTranslationLoader.file_format:
        raise ValueError(f"Unsupported translation file format: {i18n_settings.file_format}")

    loader = JSONTranslationLoader(
        translations_dir=resolve_locale_dir(root_dir),
        extension=i18n_settings.file_extension,
    )
    return loader.load_bundle(default_language)


def create_localization(
    root_dir: Union[str, Path],
    i18n_settings: Optional[I18nSettings] = None,
) -> Tuple[LocaleNegotiator, Translator]:
    """Build the negotiator and translator for the localize middleware.

    Usage:
        negotiator, translator = create_localization(root_dir, settings.i18n)
        app.add_middleware(
            LocalizeMiddleware, negotiator=negotiator, translator=translator
        )
    """
    i18n_settings = i18n_settings or I18nSettings()
    bundle = create_locale_bundle(root_dir, i18n_settings)
    negotiator = LocaleNegotiator(bundle, strict=i18n_settings.strict_negotiation)
    translator = Translator(bundle)

    logger.info(
        "localization_created",
        root_path=str(bundle.root_path),
        language_count=len(bundle.languages),
        strict=negotiator.strict,
    )
    return negotiator, translator
