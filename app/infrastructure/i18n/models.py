"""Translation models for the i18n system.

Defines the language tag, the per-language translation catalog and the
process-wide locale bundle. All of them are immutable once built so they
can be shared by concurrently handled requests without locking.
"""

import re
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from infrastructure.i18n.exceptions import LanguageTagError

_LANGUAGE_RE = re.compile(r"^[A-Za-z]{2,8}$")
_SCRIPT_RE = re.compile(r"^[A-Za-z]{4}$")
_REGION_RE = re.compile(r"^(?:[A-Za-z]{2}|[0-9]{3})$")
_VARIANT_RE = re.compile(r"^(?:[A-Za-z0-9]{5,8}|[0-9][A-Za-z0-9]{3})$")
_EXTENSION_RE = re.compile(r"^[A-Za-z0-9]{1,8}$")

UNDETERMINED = "und"


@dataclass(frozen=True)
class LanguageTag:
    """Structured identifier for a language/locale.

    Follows the IETF BCP 47 subtag layout
    (language[-script][-region][-variant...][-extension...]) and keeps the
    canonical casing of each subtag, so "ZH_hans_cn" becomes "zh-Hans-CN".

    Attributes:
        language: Primary language subtag, lower case (e.g., "zh").
        script: Optional script subtag, title case (e.g., "Hans").
        region: Optional region subtag, upper case (e.g., "CN").
        variants: Variant subtags, lower case.
        extensions: Extension and private-use subtags (singleton first),
            lower case.
    """

    language: str
    script: Optional[str] = None
    region: Optional[str] = None
    variants: Tuple[str, ...] = ()
    extensions: Tuple[str, ...] = ()

    def __str__(self) -> str:
        parts = [self.language]
        if self.script:
            parts.append(self.script)
        if self.region:
            parts.append(self.region)
        parts.extend(self.variants)
        parts.extend(self.extensions)
        return "-".join(parts)

    @classmethod
    def parse(cls, text: str) -> "LanguageTag":
        """Parse a language tag string.

        Accepts "-" or "_" as the subtag separator.

        Args:
            text: Tag string (e.g., "en", "zh-CN", "sr_Latn_RS").

        Returns:
            Parsed LanguageTag.

        Raises:
            LanguageTagError: If the string is not a well-formed tag.
        """
        if not isinstance(text, str) or not text.strip():
            raise LanguageTagError(f"Empty language tag: {text!r}")

        subtags = text.strip().replace("_", "-").split("-")
        if not _LANGUAGE_RE.match(subtags[0]):
            raise LanguageTagError(f"Invalid language subtag in {text!r}")

        language = subtags[0].lower()
        script = None
        region = None
        variants = []
        index = 1

        if index < len(subtags) and _SCRIPT_RE.match(subtags[index]):
            script = subtags[index].title()
            index += 1
        if index < len(subtags) and _REGION_RE.match(subtags[index]):
            region = subtags[index].upper()
            index += 1
        while index < len(subtags) and _VARIANT_RE.match(subtags[index]):
            variants.append(subtags[index].lower())
            index += 1

        extensions = subtags[index:]
        if extensions:
            # Extensions must start with a singleton (e.g. "u", "x") and carry a value
            if len(extensions[0]) != 1 or len(extensions) < 2:
                raise LanguageTagError(f"Invalid subtag sequence in {text!r}")
            if not all(_EXTENSION_RE.match(s) for s in extensions):
                raise LanguageTagError(f"Invalid extension subtag in {text!r}")

        return cls(
            language=language,
            script=script,
            region=region,
            variants=tuple(variants),
            extensions=tuple(s.lower() for s in extensions),
        )

    @classmethod
    def undetermined(cls) -> "LanguageTag":
        """Placeholder tag for an unknown language ("und")."""
        return cls(language=UNDETERMINED)

    @property
    def is_undetermined(self) -> bool:
        return self.language == UNDETERMINED

    @property
    def base(self) -> "LanguageTag":
        """Language-only tag (e.g., "zh" for "zh-Hans-CN")."""
        return LanguageTag(language=self.language)

    def matches(self, other: "LanguageTag", strict: bool = False) -> bool:
        """Check whether two tags denote the same language.

        Args:
            other: Tag to compare with.
            strict: If True, requires an exact match. If False, tags sharing
                the primary language subtag match (e.g., "zh-CN" and "zh").

        Returns:
            True if the tags match.
        """
        if self == other:
            return True
        if strict:
            return False
        return self.language == other.language


@dataclass(frozen=True)
class TranslationCatalog:
    """Read-only translations for a single language.

    Nested objects in translation files are flattened into dot-separated
    keys ({"nav": {"home": "Home"}} -> "nav.home").

    Attributes:
        language: The LanguageTag this catalog is for.
        messages: Flattened mapping of translation key to message string.
        source: File the catalog was loaded from, if any.
    """

    language: LanguageTag
    messages: Mapping[str, str] = field(default_factory=dict)
    source: Optional[Path] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "messages", MappingProxyType(dict(self.messages)))

    def get_message(self, key: str) -> Optional[str]:
        """Retrieve a translation message by key, or None if not found."""
        return self.messages.get(key)

    def has_message(self, key: str) -> bool:
        return key in self.messages

    def __len__(self) -> int:
        return len(self.messages)


@dataclass(frozen=True)
class LocaleBundle:
    """Process-wide set of loaded translation catalogs.

    Built once at startup, before the server accepts requests, and never
    mutated afterward.

    Attributes:
        root_path: Directory the language files were loaded from.
        languages: Supported languages, in directory listing order.
        default_language: Language used when negotiation yields nothing.
        file_format: Translation file format (e.g., "json").
        catalogs: Mapping of LanguageTag to its TranslationCatalog.
    """

    root_path: Path
    languages: Tuple[LanguageTag, ...]
    default_language: LanguageTag
    file_format: str = "json"
    catalogs: Mapping[LanguageTag, TranslationCatalog] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "languages", tuple(self.languages))
        object.__setattr__(self, "catalogs", MappingProxyType(dict(self.catalogs)))

    def supports(self, tag: LanguageTag) -> bool:
        return tag in self.languages

    def get_catalog(self, tag: LanguageTag) -> Optional[TranslationCatalog]:
        """Return the catalog for tag, or None when the language is not loaded."""
        return self.catalogs.get(tag)
