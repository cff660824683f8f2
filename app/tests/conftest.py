import json
import sys
from pathlib import Path

# Ensure the application package root is on sys.path so importing application
# modules (e.g. `infrastructure.i18n`) works during pytest collection.
project_root = str(Path(__file__).resolve().parents[1])
if project_root not in sys.path:
    sys.path.insert(0, project_root)

import pytest

from infrastructure.configuration import I18nSettings, ServerSettings, Settings
from infrastructure.logging import configure_logging

configure_logging()


EN_MESSAGES = {
    "common": {
        "welcome": "Welcome, {{name}}",
        "logout": "Log out",
    },
    "status": {"online": "Online"},
    "title": "Panel",
}

ZH_MESSAGES = {
    "common": {
        "welcome": "欢迎, {{name}}",
    },
    "title": "面板",
}


def _write_lang_file(directory: Path, name: str, data) -> Path:
    path = directory / name
    path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
    return path


@pytest.fixture
def write_lang_file():
    """Write a JSON translation file: write_lang_file(directory, "en.json", data)."""
    return _write_lang_file


@pytest.fixture
def root_dir(tmp_path):
    """Application root with assets/lang/en.json and assets/lang/zh.json."""
    lang_dir = tmp_path / "assets" / "lang"
    lang_dir.mkdir(parents=True)
    _write_lang_file(lang_dir, "en.json", EN_MESSAGES)
    _write_lang_file(lang_dir, "zh.json", ZH_MESSAGES)
    return tmp_path


@pytest.fixture
def lang_dir(root_dir):
    return root_dir / "assets" / "lang"


@pytest.fixture
def settings():
    """Settings bound to a free loopback port with Chinese as default."""
    return Settings(
        server=ServerSettings(PLUGIN_ADDR="127.0.0.1", PLUGIN_PORT=0),
        i18n=I18nSettings(default_language="zh"),
    )
