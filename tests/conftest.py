from __future__ import annotations

from pathlib import Path
from typing import Iterable

import polib
import pytest

from html_i18n.core.config import Settings
from html_i18n.domain.catalogs.models import Catalog, Message, TranslationPass
from html_i18n.domain.catalogs.store import load_catalog

FR_MESSAGES = [
    Message(msgid="works", msgstr="marche"),
    Message(msgid="Hello", msgstr="Bonjour"),
    Message(msgid="a", msgstr="A"),
    Message(msgid="Open", msgctxt="verb", msgstr="Ouvrir"),
    Message(msgid="Open", msgctxt="adjective", msgstr="Ouvert"),
    Message(msgid="placeholder"),
    Message(msgid="never used", msgstr="jamais utilisé"),
]


def write_po(directory: Path, language: str, messages: Iterable[Message]) -> Path:
    po = polib.POFile()
    po.metadata = {
        "Language": language,
        "MIME-Version": "1.0",
        "Content-Type": "text/plain; charset=UTF-8",
        "Content-Transfer-Encoding": "8bit",
    }
    for message in messages:
        entry = polib.POEntry(msgid=message.msgid, msgstr=message.msgstr)
        if message.msgctxt:
            entry.msgctxt = message.msgctxt
        po.append(entry)
    path = directory / f"{language}.po"
    po.save(str(path))
    return path


@pytest.fixture
def translations_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "i18n"
    directory.mkdir()
    write_po(directory, "en", [])
    write_po(directory, "fr", FR_MESSAGES)
    return directory


@pytest.fixture
def fr_catalog(translations_dir: Path) -> Catalog:
    return load_catalog(str(translations_dir), "fr", "en")


@pytest.fixture
def en_catalog(translations_dir: Path) -> Catalog:
    return load_catalog(str(translations_dir), "en", "en")


@pytest.fixture
def translation_pass() -> TranslationPass:
    return TranslationPass()


@pytest.fixture
def make_settings(translations_dir: Path):
    def factory(**overrides) -> Settings:
        values = {
            "TRANSLATIONS_DIR": str(translations_dir),
            "SOURCE_LANGUAGE": "en",
            "LANGUAGES": "en,fr",
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return factory
