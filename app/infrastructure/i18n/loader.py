"""Translation file discovery and loading.

Scans a locale directory for per-language files named
``<language-tag>.<format>`` and loads them into an immutable LocaleBundle.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Iterator, Tuple, Union

from infrastructure.i18n.exceptions import (
    DirectoryUnreadableError,
    LanguageTagError,
    NoLanguagesFoundError,
    TranslationFileError,
)
from infrastructure.i18n.models import LanguageTag, LocaleBundle, TranslationCatalog
from infrastructure.logging import get_module_logger

logger = get_module_logger()

DEFAULT_EXTENSION = ".json"


def resolve_locale_dir(root_dir: Union[str, Path]) -> Path:
    """Return the language directory for a root directory.

    Uses ``<root_dir>/assets/lang``, falling back to ``./assets/lang`` when
    ``<root_dir>/assets`` does not exist.
    """
    assets = Path(root_dir) / "assets"
    if not assets.exists():
        logger.info("assets_dir_fallback", missing=str(assets), fallback="./assets")
        assets = Path("./assets")
    return assets / "lang"


def discover_language_files(
    directory: Union[str, Path],
    extension: str = DEFAULT_EXTENSION,
) -> Dict[LanguageTag, Path]:
    """Map each language found in directory to the file it was read from.

    Lists direct entries only. Entries without the extension and entries
    whose name is not a valid language tag are skipped.

    Args:
        directory: Locale directory to scan.
        extension: Translation file suffix, including the dot.

    Returns:
        Dict of LanguageTag to file path, in sorted filename order.

    Raises:
        DirectoryUnreadableError: If the directory cannot be opened or listed.
    """
    directory = Path(directory)
    try:
        with os.scandir(directory) as entries:
            names = sorted(entry.name for entry in entries if not entry.is_dir())
    except OSError as e:
        logger.error("lang_directory_unreadable", directory=str(directory), error=str(e))
        raise DirectoryUnreadableError(directory, e.strerror or str(e)) from e

    found: Dict[LanguageTag, Path] = {}
    for name in names:
        if not name.endswith(extension):
            logger.debug("lang_file_skipped", file=name, reason="extension")
            continue
        candidate = name[: -len(extension)]
        try:
            tag = LanguageTag.parse(candidate)
        except LanguageTagError:
            logger.warning("lang_file_skipped", file=name, reason="invalid_tag")
            continue
        if tag in found:
            logger.warning("lang_file_duplicate", file=name, language=str(tag))
            continue
        found[tag] = directory / name

    return found


def load_supported_languages(
    directory: Union[str, Path],
    extension: str = DEFAULT_EXTENSION,
) -> Tuple[LanguageTag, ...]:
    """Build the supported language set from a locale directory.

    Args:
        directory: Locale directory to scan.
        extension: Translation file suffix, including the dot.

    Returns:
        Non-empty tuple of supported LanguageTags.

    Raises:
        DirectoryUnreadableError: If the directory cannot be opened or listed.
        NoLanguagesFoundError: If no usable language file was found.
    """
    tags = tuple(discover_language_files(directory, extension))
    if not tags:
        logger.error("lang_files_not_found", directory=str(directory))
        raise NoLanguagesFoundError(directory)

    logger.info(
        "supported_languages_loaded",
        directory=str(directory),
        languages=[str(tag) for tag in tags],
    )
    return tags


def _flatten(data: Dict[str, Any], prefix: str = "") -> Iterator[Tuple[str, str]]:
    for key, value in data.items():
        path = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, dict):
            yield from _flatten(value, path)
        elif isinstance(value, list):
            raise ValueError(f"list values are not supported (key {path!r})")
        elif value is None:
            continue
        elif isinstance(value, str):
            yield path, value
        else:
            yield path, json.dumps(value)


class JSONTranslationLoader:
    """Loader for JSON translation files.

    Expects files in format: <language-tag>.json in the specified
    translations directory, each holding a flat or nested object of
    translation keys to strings.

    Attributes:
        translations_dir: Path to directory containing translation files.
        extension: Translation file suffix, including the dot.
    """

    file_format = "json"

    def __init__(
        self,
        translations_dir: Union[str, Path],
        extension: str = DEFAULT_EXTENSION,
    ):
        self.translations_dir = Path(translations_dir)
        self.extension = extension

    def load_file(self, tag: LanguageTag, path: Path) -> TranslationCatalog:
        """Parse a single translation file into a catalog.

        Raises:
            TranslationFileError: If the file cannot be read or is not a
                JSON object of strings.
        """
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.error("translation_file_invalid", file=str(path), error=str(e))
            raise TranslationFileError(path, str(e)) from e

        if not isinstance(data, dict):
            raise TranslationFileError(path, "expected a JSON object at top level")

        try:
            messages = dict(_flatten(data))
        except ValueError as e:
            raise TranslationFileError(path, str(e)) from e

        return TranslationCatalog(language=tag, messages=messages, source=path)

    def load(self, tag: LanguageTag) -> TranslationCatalog:
        """Load the catalog for one language.

        Raises:
            FileNotFoundError: If the directory has no file for the language.
            TranslationFileError: If the file is malformed.
        """
        return self.load_file(tag, self.path_for(tag))

    def path_for(self, tag: LanguageTag) -> Path:
        """Path of the file holding a language's translations.

        Raises:
            FileNotFoundError: If the directory has no file for the language.
        """
        path = self.translations_dir / f"{tag}{self.extension}"
        if path.is_file():
            return path

        # Non-canonical file names, e.g. zh_cn.json for zh-CN
        path = discover_language_files(self.translations_dir, self.extension).get(tag)
        if path is None:
            raise FileNotFoundError(
                f"No translation file found for {tag} in {self.translations_dir}"
            )
        return path

    def load_bundle(self, default_language: LanguageTag) -> LocaleBundle:
        """Load every language in the directory into a LocaleBundle.

        Raises:
            DirectoryUnreadableError: If the directory cannot be listed.
            NoLanguagesFoundError: If no usable language file was found.
            TranslationFileError: If any translation file is malformed.
        """
        languages = load_supported_languages(self.translations_dir, self.extension)
        catalogs = {tag: self.load(tag) for tag in languages}

        if default_language not in catalogs:
            logger.warning(
                "default_language_not_supported",
                default_language=str(default_language),
                languages=[str(tag) for tag in catalogs],
            )

        bundle = LocaleBundle(
            root_path=self.translations_dir,
            languages=languages,
            default_language=default_language,
            file_format=self.file_format,
            catalogs=catalogs,
        )
        logger.info(
            "locale_bundle_loaded",
            root_path=str(self.translations_dir),
            languages=[str(tag) for tag in bundle.languages],
            default_language=str(default_language),
        )
        return bundle
