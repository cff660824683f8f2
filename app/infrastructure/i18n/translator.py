"""Translation service for retrieving and interpolating translated messages."""

import re
from typing import Any, Dict, Iterator, Mapping, Optional

from infrastructure.i18n.models import LanguageTag, LocaleBundle, TranslationCatalog
from infrastructure.logging import get_module_logger

logger = get_module_logger()

_DOUBLE_PATTERN = re.compile(r"\{\{(\w+)\}\}")
_SINGLE_PATTERN = re.compile(r"\{(\w+)\}")


class Translator:
    """Looks up messages in a LocaleBundle with variable interpolation.

    Lookup order for a language: the exact tag, its primary language
    ("zh" for "zh-CN"), then the bundle's default language.

    Attributes:
        bundle: Read-only LocaleBundle shared across requests.
    """

    def __init__(self, bundle: LocaleBundle):
        self.bundle = bundle

    @property
    def default_language(self) -> LanguageTag:
        return self.bundle.default_language

    def iter_catalogs(self, language: LanguageTag) -> Iterator[TranslationCatalog]:
        """Yield loaded catalogs for language in lookup order."""
        seen = set()
        for tag in (language, language.base, self.default_language):
            if tag in seen:
                continue
            seen.add(tag)
            catalog = self.bundle.get_catalog(tag)
            if catalog is not None:
                yield catalog

    def resolve_catalog(self, language: LanguageTag) -> Optional[TranslationCatalog]:
        """Return the first loaded catalog in the lookup order for language."""
        return next(self.iter_catalogs(language), None)

    def translate(
        self,
        key: str,
        language: LanguageTag,
        variables: Optional[Dict[str, Any]] = None,
    ) -> str:
        """Retrieve and interpolate a translated message.

        Performs variable substitution using {{variable_name}} or
        {variable_name} syntax.

        Args:
            key: Dot-separated translation key (e.g., "common.welcome").
            language: Language to translate to.
            variables: Optional dict of variables for interpolation.

        Returns:
            Translated and interpolated message string.

        Raises:
            KeyError: If key is not found in any catalog of the lookup order.
            ValueError: If the message needs a variable that was not given.
        """
        for catalog in self.iter_catalogs(language):
            message = catalog.get_message(key)
            if message is None:
                continue
            if catalog.language != language:
                logger.debug(
                    "used_fallback_translation",
                    key=key,
                    requested_language=str(language),
                    fallback_language=str(catalog.language),
                )
            return self._interpolate(message, variables or {})

        logger.warning(
            "translation_not_found",
            key=key,
            language=str(language),
            default_language=str(self.default_language),
        )
        raise KeyError(
            f"Translation not found for key {key} in {language} "
            f"or default {self.default_language}"
        )

    def has_message(self, key: str, language: LanguageTag) -> bool:
        """Check if key resolves for language, fallbacks included."""
        return any(c.has_message(key) for c in self.iter_catalogs(language))

    def _interpolate(self, message: str, variables: Mapping[str, Any]) -> str:
        double_matches = _DOUBLE_PATTERN.findall(message)
        single_matches = _SINGLE_PATTERN.findall(message)

        for var_name in dict.fromkeys(double_matches + single_matches):
            if var_name not in variables:
                logger.error(
                    "missing_interpolation_variable",
                    variable=var_name,
                    available_variables=list(variables.keys()),
                )
                raise ValueError(f"Missing interpolation variable: {var_name}")

        # Double-brace placeholders first so "{{x}}" is not read as "{" + "{x}" + "}"
        for var_name in double_matches:
            message = message.replace(f"{{{{{var_name}}}}}", str(variables[var_name]))
        for var_name in single_matches:
            message = message.replace(f"{{{var_name}}}", str(variables[var_name]))

        return message


class Localizer:
    """Translator bound to the language negotiated for one request."""

    def __init__(self, translator: Translator, language: LanguageTag):
        self.translator = translator
        self.language = language

    def get_message(self, key: str, **variables: Any) -> str:
        return self.translator.translate(key, self.language, variables)

    def has_message(self, key: str) -> bool:
        return self.translator.has_message(key, self.language)

    def messages(self) -> Dict[str, str]:
        """Flattened catalog for the request language, fallbacks applied."""
        merged: Dict[str, str] = {}
        for catalog in self.translator.iter_catalogs(self.language):
            for key, message in catalog.messages.items():
                merged.setdefault(key, message)
        return merged
