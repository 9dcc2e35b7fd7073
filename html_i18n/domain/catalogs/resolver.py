"""Message lookup against a loaded catalog."""
from __future__ import annotations

from html_i18n.core.errors import MessageNotFound
from html_i18n.domain.catalogs.models import Catalog, TranslationPass


def resolve(catalog: Catalog, translation_pass: TranslationPass, msgid: str, msgctxt: str = "") -> str:
    """Return the msgstr for ``(msgid, msgctxt)``.

    Every attempted lookup is recorded in ``translation_pass.seen``, whether
    it succeeds or not. An empty msgid resolves to "" without being recorded.
    Placeholders with an empty msgstr never count as a translation.

    Raises MessageNotFound on a miss.
    """
    if msgid == "":
        return ""

    translation_pass.mark_seen(msgid, msgctxt)
    translated = catalog.lookup(msgid, msgctxt)
    if not translated:
        raise MessageNotFound(catalog.language, msgid, msgctxt)
    return translated


__all__ = ["resolve"]
