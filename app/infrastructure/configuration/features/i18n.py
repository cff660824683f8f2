"""Localization feature settings."""

from pydantic import Field, field_validator

from infrastructure.configuration.base import FeatureSettings


class I18nSettings(FeatureSettings):
    """Locale negotiation configuration.

    Environment Variables:
        I18N_DEFAULT_LANGUAGE: Language selected when a request carries no
            usable Accept-Language header (default: zh)
        I18N_FILE_FORMAT: Extension of the per-language translation files
            (default: json)
        I18N_STRICT_NEGOTIATION: Only select languages present in the locale
            directory (default: False, first header preference wins)
    """

    default_language: str = Field(default="zh", alias="I18N_DEFAULT_LANGUAGE")
    file_format: str = Field(default="json", alias="I18N_FILE_FORMAT")
    strict_negotiation: bool = Field(default=False, alias="I18N_STRICT_NEGOTIATION")

    @field_validator("file_format")
    @classmethod
    def normalize_file_format(cls, v: str) -> str:
        """Strip any leading dot so both 'json' and '.json' are accepted."""
        v = v.strip().lstrip(".")
        if not v:
            raise ValueError("I18N_FILE_FORMAT must not be empty")
        return v.lower()

    @property
    def file_extension(self) -> str:
        return f".{self.file_format}"
