import pytest

from html_i18n.core.errors import InvalidLanguageTag
from html_i18n.domain.languages.services import canonical_tag, match, parse_accept_language


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("en", "en"),
        ("EN-us", "en-US"),
        ("pt_br", "pt-BR"),
        ("zh-hant-tw", "zh-Hant-TW"),
    ],
)
def test_canonical_tag(raw, expected):
    assert canonical_tag(raw) == expected


@pytest.mark.parametrize("raw", ["", "not a tag!", "12", "en-US-x-y"])
def test_canonical_tag_rejects_garbage(raw):
    with pytest.raises(InvalidLanguageTag):
        canonical_tag(raw)


def test_parse_accept_language_orders_by_weight():
    header = "en;q=0.5, fr-CH, de;q=0, fr;q=0.9, it;q=bogus"
    assert parse_accept_language(header) == [("fr-CH", 1.0), ("fr", 0.9), ("en", 0.5)]


def test_parse_accept_language_empty():
    assert parse_accept_language(None) == []
    assert parse_accept_language("") == []


def test_higher_weight_wins():
    assert match("en;q=0.5, fr;q=0.9", ["en", "fr"]) == "fr"
    assert match("fr;q=0.2, en", ["en", "fr"]) == "en"


def test_region_falls_back_to_language():
    assert match("fr-CH, en;q=0.1", ["en", "fr"]) == "fr"


def test_language_matches_available_region():
    assert match("pt", ["en", "pt-BR"]) == "pt-BR"
    assert match("fr", ["en", "fr-FR"]) == "fr-FR"


def test_case_insensitive_exact_match():
    assert match("PT-br", ["en", "pt-BR", "pt-PT"]) == "pt-BR"


def test_falls_back_to_first_available():
    assert match("de, ja;q=0.5", ["en", "fr"]) == "en"
    assert match(None, ["fr", "en"]) == "fr"
    assert match("*", ["fr", "en"]) == "fr"
    assert match("!!!, fr", ["en", "fr"]) == "fr"


def test_match_requires_languages():
    with pytest.raises(ValueError):
        match("fr", [])
