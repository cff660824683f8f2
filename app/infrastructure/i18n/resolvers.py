"""Locale resolution logic for determining a request's language.

Parses weighted Accept-Language headers and picks the language used to
serve a request, falling back to the bundle's default language.
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Sequence

from infrastructure.i18n.exceptions import AcceptLanguageError, LanguageTagError
from infrastructure.i18n.models import LanguageTag, LocaleBundle
from infrastructure.logging import get_module_logger

logger = get_module_logger().bind(component="i18n.resolver")

WILDCARD = "*"

_QVALUE_RE = re.compile(r"^(?:0(?:\.[0-9]{0,3})?|1(?:\.0{0,3})?)$")


@dataclass(frozen=True)
class LanguagePreference:
    """One weighted entry of an Accept-Language header.

    Attributes:
        tag: Requested language, or None for the "*" wildcard.
        quality: Weight between 0 and 1 (q-value).
    """

    tag: Optional[LanguageTag]
    quality: float = 1.0

    @property
    def is_wildcard(self) -> bool:
        return self.tag is None


def _parse_quality(entry: str, params: Sequence[str]) -> float:
    quality = 1.0
    for param in params:
        name, sep, value = param.partition("=")
        name = name.strip().lower()
        value = value.strip()
        if name != "q" or not sep:
            raise AcceptLanguageError(f"Unsupported parameter in {entry!r}")
        if not _QVALUE_RE.match(value):
            raise AcceptLanguageError(f"Invalid quality value in {entry!r}")
        quality = float(value)
    return quality


def parse_accept_language(header: Optional[str]) -> List[LanguagePreference]:
    """Parse an Accept-Language header into an ordered preference list.

    Parses "zh-CN,en;q=0.8" -> [(zh-CN, 1.0), (en, 0.8)]. Entries are
    sorted by descending quality; entries of equal quality keep header
    order. Entries with q=0 are dropped since they mark a language as
    not acceptable.

    Args:
        header: Raw header value. None or blank yields an empty list.

    Returns:
        Preferences in selection order.

    Raises:
        AcceptLanguageError: If any entry is malformed.
    """
    if header is None or not header.strip():
        return []

    preferences = []
    for entry in header.split(","):
        entry = entry.strip()
        if not entry:
            continue

        lang_range, *params = entry.split(";")
        lang_range = lang_range.strip()
        quality = _parse_quality(entry, params)

        if lang_range == WILDCARD:
            tag = None
        else:
            try:
                tag = LanguageTag.parse(lang_range)
            except LanguageTagError as e:
                raise AcceptLanguageError(f"Invalid language range {lang_range!r}") from e

        if quality > 0:
            preferences.append(LanguagePreference(tag=tag, quality=quality))

    # sorted() is stable, so equal weights keep header order
    return sorted(preferences, key=lambda p: p.quality, reverse=True)


def find_best_match(
    requested: Sequence[LanguageTag],
    available: Sequence[LanguageTag],
) -> Optional[LanguageTag]:
    """Find the best available language for a list of requested ones.

    For each requested language in order, an exact match wins over a match
    on the primary language subtag alone ("zh-TW" requested, "zh" available).

    Args:
        requested: Requested languages in preference order.
        available: Available languages.

    Returns:
        Best matching available language, or None if nothing matches.
    """
    for req in requested:
        for avail in available:
            if req.matches(avail, strict=True):
                return avail
        for avail in available:
            if req.matches(avail, strict=False):
                return avail
    return None


class LocaleNegotiator:
    """Selects the language for a request from its Accept-Language header.

    By default the first parsed preference is selected as-is, even when
    the locale directory has no file for it. With strict=True the
    preferences are intersected with the bundle's supported languages.

    Absent, empty or malformed headers select the bundle's default language.
    Negotiation only consults the pre-loaded bundle and never performs I/O.
    """

    def __init__(self, bundle: LocaleBundle, strict: bool = False):
        self.bundle = bundle
        self.strict = strict

    @property
    def default_language(self) -> LanguageTag:
        return self.bundle.default_language

    def negotiate(self, header: Optional[str]) -> LanguageTag:
        """Return the language selected for a header value.

        Args:
            header: Accept-Language header value, if any.

        Returns:
            Selected LanguageTag.
        """
        try:
            preferences = parse_accept_language(header)
        except AcceptLanguageError as e:
            logger.debug("accept_language_unparsable", header=header, error=str(e))
            return self.default_language

        requested = [p.tag for p in preferences if p.tag is not None]
        if not requested:
            return self.default_language

        if not self.strict:
            return requested[0]

        match = find_best_match(requested, self.bundle.languages)
        if match is None:
            logger.debug(
                "no_supported_language_in_header",
                header=header,
                default=str(self.default_language),
            )
            return self.default_language
        return match
