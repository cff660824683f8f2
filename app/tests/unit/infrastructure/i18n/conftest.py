"""Feature-level fixtures for i18n system tests."""

import pytest

from infrastructure.i18n import (
    JSONTranslationLoader,
    LanguageTag,
    LocaleNegotiator,
    Translator,
)


@pytest.fixture
def json_loader(lang_dir):
    """JSONTranslationLoader over the en/zh sample directory."""
    return JSONTranslationLoader(lang_dir)


@pytest.fixture
def bundle(json_loader):
    """Bundle with en and zh loaded, zh as default language."""
    return json_loader.load_bundle(LanguageTag.parse("zh"))


@pytest.fixture
def negotiator(bundle):
    return LocaleNegotiator(bundle)


@pytest.fixture
def strict_negotiator(bundle):
    return LocaleNegotiator(bundle, strict=True)


@pytest.fixture
def translator(bundle):
    return Translator(bundle)
