"""Marker-driven HTML rewriting.

Passes run in a fixed order over the parsed document:

1. optional script exposing the selected and source languages,
2. inner-content translation of marker tags and marker attributes,
3. ``-keep-on`` pruning,
4. attribute translation on ``-attrs`` elements,
5. serialization, dropping any literal marker tags left in the text.
"""
from __future__ import annotations

import html
import json
import logging
from typing import Iterator, Optional, Union

from bs4 import BeautifulSoup, ParserRejectedMarkup, Tag
from bs4.dammit import EntitySubstitution
from bs4.formatter import HTMLFormatter

from html_i18n.core.errors import HTMLParseError, MessageNotFound
from html_i18n.domain.catalogs.models import Catalog, TranslationPass
from html_i18n.domain.catalogs.resolver import resolve
from html_i18n.domain.markers.schemas import MarkerConfig, MarkerKind

logger = logging.getLogger(__name__)

PARSER = "html.parser"

# Like bs4's "html5" formatter, but leaves non-ASCII text alone instead of
# turning it into named entities.
FORMATTER = HTMLFormatter(
    entity_substitution=EntitySubstitution.substitute_xml,
    void_element_close_prefix=None,
    empty_attributes_are_booleans=True,
)

TRANSLATABLE = frozenset({MarkerKind.TAG_WRAPPER, MarkerKind.ATTRIBUTE_FLAG})


def parse_html(source: Union[bytes, str], encoding: Optional[str] = None) -> BeautifulSoup:
    try:
        return BeautifulSoup(source, PARSER, from_encoding=encoding, multi_valued_attributes=None)
    except ParserRejectedMarkup as exc:
        raise HTMLParseError(f"while parsing output page HTML: {exc}") from exc


def _parse_fragment(markup: str) -> BeautifulSoup:
    return BeautifulSoup(markup, PARSER, multi_valued_attributes=None)


def _attached(element: Tag, root: BeautifulSoup) -> bool:
    if element.decomposed:
        return False
    return any(parent is root for parent in element.parents)


def _select(root: BeautifulSoup, markers: MarkerConfig, kinds: frozenset) -> Iterator[Tag]:
    """Yield attached elements carrying any of ``kinds``, in document order."""
    for element in root.find_all(True):
        if not _attached(element, root):
            continue
        if markers.classify(element) & kinds:
            yield element


def _lookup(catalog: Catalog, translation_pass: TranslationPass, msgid: str, msgctxt: str = "") -> Optional[str]:
    try:
        return resolve(catalog, translation_pass, msgid, msgctxt)
    except MessageNotFound:
        logger.debug("Missing translation for %r (msgctxt=%r) [lang=%s]", msgid, msgctxt, catalog.language)
        translation_pass.add_missing(msgid, msgctxt)
        return None


def expose_languages(root: BeautifulSoup, catalog: Catalog) -> None:
    script = root.new_tag("script")
    script.string = "window.i18nLanguage = {}; window.i18nSourceLanguage = {};".format(
        json.dumps(catalog.language), json.dumps(catalog.source_language)
    ).replace("</", "<\\/")
    head = root.find("head")
    if head is not None:
        head.append(script)
        return
    # <head> may be omitted; fall back to the top of <body>, <html> or the document.
    container = root.find("body") or root.find("html") or root
    container.insert(0, script)


def translate_contents(root: BeautifulSoup, catalog: Catalog, translation_pass: TranslationPass) -> None:
    markers = catalog.markers
    for element in list(_select(root, markers, TRANSLATABLE)):
        # An earlier hit may have replaced this element's ancestor contents.
        if not _attached(element, root):
            continue
        element.attrs.pop(markers.attribute, None)
        msgctxt = element.attrs.pop(markers.context_attribute, None) or ""
        if catalog.is_source:
            continue

        msgid = html.unescape(element.decode_contents(formatter=FORMATTER)).strip()
        if not msgid:
            continue

        translated = _lookup(catalog, translation_pass, msgid, msgctxt)
        if translated is None:
            continue
        if "<" not in translated:
            element.string = html.unescape(translated)
            continue
        fragment = _parse_fragment(translated)
        element.clear()
        for child in list(fragment.contents):
            element.append(child.extract())


def prune_other_languages(root: BeautifulSoup, catalog: Catalog) -> None:
    attribute = catalog.markers.keep_on_attribute
    for element in list(_select(root, catalog.markers, frozenset({MarkerKind.KEEP_ON}))):
        if not _attached(element, root):
            continue
        if element.attrs.get(attribute) != catalog.language:
            element.decompose()
        else:
            del element.attrs[attribute]


def _translate_list(catalog: Catalog, translation_pass: TranslationPass, value: str) -> str:
    items = []
    for item in value.split(","):
        msgid = item.strip()
        translated = _lookup(catalog, translation_pass, msgid) if msgid else None
        items.append(item if translated is None else translated)
    return ",".join(items).strip(",")


def translate_attributes(root: BeautifulSoup, catalog: Catalog, translation_pass: TranslationPass) -> None:
    markers = catalog.markers
    for element in list(_select(root, markers, frozenset({MarkerKind.ATTRS}))):
        del element.attrs[markers.attrs_attribute]
        plain = {}
        translated_attrs = {}
        for name, value in element.attrs.items():
            value = value or ""
            if not name.startswith(markers.attribute_prefix):
                plain[name] = value
                continue
            if name.startswith(markers.commas_prefix):
                name = name[len(markers.commas_prefix):]
                if not catalog.is_source:
                    value = _translate_list(catalog, translation_pass, value)
            elif name.startswith(markers.attribute_prefix):
                name = name[len(markers.attribute_prefix):]
                if not catalog.is_source:
                    translated = _lookup(catalog, translation_pass, value)
                    value = value if translated is None else translated
            translated_attrs[name] = value
        # Marker-derived values replace any plain attribute of the same name.
        plain.update(translated_attrs)
        element.attrs = plain


def render(root: BeautifulSoup, markers: MarkerConfig) -> str:
    rendered = root.decode(formatter=FORMATTER)
    return rendered.replace(f"<{markers.tag}>", "").replace(f"</{markers.tag}>", "")


def translate(
    source: Union[bytes, str],
    catalog: Catalog,
    translation_pass: TranslationPass,
    encoding: Optional[str] = None,
) -> str:
    """Translate an HTML document into ``catalog.language``.

    Lookups and misses are recorded on ``translation_pass``. A miss never
    aborts the pass; the original text is kept.

    Raises HTMLParseError when the markup cannot be parsed.
    """
    root = parse_html(source, encoding)
    if catalog.expose_to_js:
        expose_languages(root, catalog)
    translate_contents(root, catalog, translation_pass)
    prune_other_languages(root, catalog)
    translate_attributes(root, catalog, translation_pass)
    return render(root, catalog.markers)


__all__ = [
    "FORMATTER",
    "expose_languages",
    "parse_html",
    "prune_other_languages",
    "render",
    "translate",
    "translate_attributes",
    "translate_contents",
]
