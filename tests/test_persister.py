import polib
import yaml

from html_i18n.domain.catalogs.models import Catalog, Message, TranslationPass
from html_i18n.domain.catalogs.persister import merged_messages, report_unused, save
from html_i18n.domain.catalogs.store import load_catalog
from html_i18n.domain.markers.rewriter import translate


def _keys(path):
    return [(entry.msgid, entry.msgctxt or "", entry.msgstr) for entry in polib.pofile(str(path))]


def test_save_appends_missing_and_drops_stale_placeholders(fr_catalog, translations_dir, translation_pass):
    translate("<p i18n>works</p><p i18n>brand new</p>", fr_catalog, translation_pass)

    written = save(fr_catalog, translation_pass)

    keys = _keys(translations_dir / "fr.po")
    assert written == len(keys)
    assert ("brand new", "", "") in keys
    assert ("placeholder", "", "") not in keys
    assert ("never used", "", "jamais utilisé") in keys
    assert keys == sorted(keys, key=lambda key: (key[0], key[1]))


def test_save_keeps_referenced_placeholders(fr_catalog, translations_dir, translation_pass):
    translate("<p i18n>placeholder</p>", fr_catalog, translation_pass)
    save(fr_catalog, translation_pass)

    assert ("placeholder", "", "") in _keys(translations_dir / "fr.po")


def test_save_is_idempotent(fr_catalog, translations_dir, translation_pass):
    translate("<p i18n>brand new</p><p i18n>brand new</p>", fr_catalog, translation_pass)
    path = translations_dir / "fr.po"

    save(fr_catalog, translation_pass)
    first = path.read_bytes()
    save(fr_catalog, translation_pass)

    assert path.read_bytes() == first
    assert [key for key in _keys(path) if key[0] == "brand new"] == [("brand new", "", "")]


def test_save_updates_the_loaded_catalog(fr_catalog, translations_dir, translation_pass):
    translate("<p i18n>brand new</p>", fr_catalog, translation_pass)
    save(fr_catalog, translation_pass)

    reloaded = load_catalog(str(translations_dir), "fr", "en")
    assert [m.key for m in fr_catalog.messages] == [m.key for m in reloaded.messages]
    assert fr_catalog.lookup("works") == "marche"


def test_duplicates_keep_first_occurrence(translations_dir):
    catalog = Catalog(
        language="fr",
        source_language="en",
        directory=str(translations_dir),
        messages=[
            Message(msgid="b", msgstr="premier"),
            Message(msgid="a", msgstr="A"),
            Message(msgid="b", msgstr="second"),
            Message(msgid="b", msgctxt="ctx", msgstr="contexte"),
        ],
    )
    translation_pass = TranslationPass(missing=[Message(msgid="a"), Message(msgid="c")])
    translation_pass.mark_seen("c")

    merged = merged_messages(catalog, translation_pass)

    assert [(m.msgid, m.msgctxt, m.msgstr) for m in merged] == [
        ("a", "", "A"),
        ("b", "", "premier"),
        ("b", "ctx", "contexte"),
        ("c", "", ""),
    ]


def test_report_unused(fr_catalog, translations_dir, translation_pass):
    translate(
        '<p i18n>works</p><p i18n>Hello</p><p i18n>a</p><p i18n>placeholder</p><b i18n i18n-context="verb">Open</b>',
        fr_catalog,
        translation_pass,
    )

    count = report_unused(fr_catalog, translation_pass)

    report = translations_dir / "fr-unused-messages.yaml"
    lines = report.read_text(encoding="utf-8").splitlines()
    assert count == 2
    assert lines[0].startswith("# Generated at ")
    assert lines[1:] == ['- {msgid: "Open", msgctxt: "adjective"}', '- "never used"']
    assert yaml.safe_load(report.read_text(encoding="utf-8")) == [
        {"msgid": "Open", "msgctxt": "adjective"},
        "never used",
    ]


def test_misses_count_as_used(fr_catalog, translation_pass):
    translate("<p i18n>placeholder</p>", fr_catalog, translation_pass)
    unused = report_unused(fr_catalog, translation_pass)
    assert unused == len(fr_catalog.messages) - 1


def test_report_removed_when_nothing_unused(translations_dir):
    report = translations_dir / "fr-unused-messages.yaml"
    report.write_text("# stale\n", encoding="utf-8")
    catalog = Catalog(
        language="fr",
        source_language="en",
        directory=str(translations_dir),
        messages=[Message(msgid="works", msgstr="marche")],
    )
    translation_pass = TranslationPass()
    translation_pass.mark_seen("works")

    assert report_unused(catalog, translation_pass) == 0
    assert not report.exists()
    assert report_unused(catalog, translation_pass) == 0
