"""i18n system - language negotiation and translation lookup.

Discovers per-language translation files, negotiates a request's language
from its Accept-Language header and exposes translations to handlers.

Main components:
- models: LanguageTag, TranslationCatalog, LocaleBundle
- loader: load_supported_languages and JSONTranslationLoader
- resolvers: parse_accept_language and LocaleNegotiator
- translator: Translator and the per-request Localizer
- middleware: LocalizeMiddleware for Starlette/FastAPI
"""

from infrastructure.i18n.context import get_language, get_localizer
from infrastructure.i18n.exceptions import (
    AcceptLanguageError,
    DirectoryUnreadableError,
    LanguageTagError,
    LocaleError,
    NoLanguagesFoundError,
    TranslationFileError,
)
from infrastructure.i18n.factory import create_locale_bundle, create_localization
from infrastructure.i18n.loader import (
    JSONTranslationLoader,
    load_supported_languages,
    resolve_locale_dir,
)
from infrastructure.i18n.middleware import LocalizeMiddleware
from infrastructure.i18n.models import LanguageTag, LocaleBundle, TranslationCatalog
from infrastructure.i18n.resolvers import (
    LanguagePreference,
    LocaleNegotiator,
    find_best_match,
    parse_accept_language,
)
from infrastructure.i18n.translator import Localizer, Translator

__all__ = [
    "LanguageTag",
    "TranslationCatalog",
    "LocaleBundle",
    "LocaleError",
    "DirectoryUnreadableError",
    "NoLanguagesFoundError",
    "TranslationFileError",
    "LanguageTagError",
    "AcceptLanguageError",
    "JSONTranslationLoader",
    "load_supported_languages",
    "resolve_locale_dir",
    "LanguagePreference",
    "LocaleNegotiator",
    "find_best_match",
    "parse_accept_language",
    "Translator",
    "Localizer",
    "LocalizeMiddleware",
    "get_language",
    "get_localizer",
    "create_locale_bundle",
    "create_localization",
]
