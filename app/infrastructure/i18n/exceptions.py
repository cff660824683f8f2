"""Custom exceptions for the i18n system.

All errors derive from LocaleError. Catalog loading failures are fatal
at startup. Tag and header parsing failures are also ValueErrors; they
are recoverable and handled by the callers (malformed filenames are
skipped, malformed headers fall back to the default language).
"""

from pathlib import Path
from typing import Union


class LocaleError(Exception):
    """Base exception for all locale catalog errors.

    Example:
        try:
            bundle = loader.load_bundle(default_language)
        except LocaleError as e:
            logger.error("locale_bundle_load_failed", error=str(e))
    """

    pass


class DirectoryUnreadableError(LocaleError):
    """Raised when the locale directory cannot be opened or listed."""

    def __init__(self, directory: Union[str, Path], reason: str):
        self.directory = Path(directory)
        self.reason = reason
        super().__init__(f"Cannot read locale directory {self.directory}: {reason}")


class NoLanguagesFoundError(LocaleError):
    """Raised when a locale directory yields no usable language file."""

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)
        super().__init__(f"No language file found in directory: {self.directory}")


class TranslationFileError(LocaleError):
    """Raised when a translation file cannot be read or decoded."""

    def __init__(self, path: Union[str, Path], reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Invalid translation file {self.path}: {reason}")


class LanguageTagError(LocaleError, ValueError):
    """Raised when a string is not a well-formed language tag."""

    pass


class AcceptLanguageError(LocaleError, ValueError):
    """Raised when an Accept-Language header value cannot be parsed."""

    pass
