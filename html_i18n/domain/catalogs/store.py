"""Load .po catalogs from disk into memory."""
from __future__ import annotations

import logging
import os
from typing import Dict, Iterable, Optional

import polib

from html_i18n.core.errors import CatalogLoadError
from html_i18n.domain.catalogs.models import Catalog, Message
from html_i18n.domain.markers.schemas import MarkerConfig

logger = logging.getLogger(__name__)


def message_from_entry(entry: polib.POEntry) -> Message:
    """Convert a polib entry into an immutable Message."""
    return Message(
        msgid=entry.msgid,
        msgctxt=entry.msgctxt or "",
        msgstr=entry.msgstr or "",
        msgid_plural=entry.msgid_plural or "",
        msgstr_plural=tuple(sorted((int(index), value) for index, value in (entry.msgstr_plural or {}).items())),
        comment=entry.comment or "",
        tcomment=entry.tcomment or "",
        flags=tuple(entry.flags),
        occurrences=tuple((str(path), str(line)) for path, line in entry.occurrences),
    )


def load_catalog(
    directory: str,
    language: str,
    source_language: str,
    markers: Optional[MarkerConfig] = None,
    expose_to_js: bool = False,
) -> Catalog:
    """Parse ``<directory>/<language>.po``. Raises CatalogLoadError."""
    path = os.path.join(directory, f"{language}.po")
    # polib treats a non-existent path as inline PO content, so check first.
    if not os.path.isfile(path):
        raise CatalogLoadError(f"while loading translations for {language}: {path} does not exist")

    try:
        po = polib.pofile(path)
    except (OSError, ValueError) as exc:
        raise CatalogLoadError(f"while loading translations for {language}: {exc}") from exc

    messages = [message_from_entry(entry) for entry in po if not entry.obsolete]
    return Catalog(
        language=language,
        source_language=source_language,
        directory=directory,
        messages=messages,
        markers=markers,
        expose_to_js=expose_to_js,
        header=po.header,
        metadata=dict(po.metadata),
    )


def load_catalogs(
    directory: str,
    source_language: str,
    languages: Iterable[str],
    markers: Optional[MarkerConfig] = None,
    expose_to_js: bool = False,
) -> Dict[str, Catalog]:
    """Load one catalog per target language, keyed by language tag.

    The first catalog that fails to load aborts the whole operation.
    """
    catalogs: Dict[str, Catalog] = {}
    for language in languages:
        catalog = load_catalog(directory, language, source_language, markers, expose_to_js)
        catalogs[language] = catalog
        logger.info("Loaded %d translations [lang=%s]", catalog.translated_count, language)
    return catalogs


__all__ = ["load_catalog", "load_catalogs", "message_from_entry"]
