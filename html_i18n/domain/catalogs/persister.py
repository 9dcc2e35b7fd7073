"""Write catalogs and unused-message reports back to disk.

Callers are expected to hold the catalog's language lock; nothing here
synchronizes on its own.
"""
from __future__ import annotations

import json
import logging
import os
import tempfile
from datetime import datetime, timezone
from typing import Iterable, List

import polib

from html_i18n.domain.catalogs.models import Catalog, Message, MessageKey, TranslationPass

logger = logging.getLogger(__name__)


def _sort_key(message: Message) -> MessageKey:
    return (message.msgid, message.msgctxt)


def entry_from_message(message: Message) -> polib.POEntry:
    """Convert a Message back into a polib entry."""
    kwargs = {
        "msgid": message.msgid,
        "msgstr": message.msgstr,
        "comment": message.comment,
        "tcomment": message.tcomment,
        "flags": list(message.flags),
        "occurrences": list(message.occurrences),
    }
    if message.msgctxt:
        kwargs["msgctxt"] = message.msgctxt
    if message.msgid_plural:
        kwargs["msgid_plural"] = message.msgid_plural
        kwargs["msgstr_plural"] = dict(message.msgstr_plural) or {0: "", 1: ""}
    return polib.POEntry(**kwargs)


def deduplicate(messages: Iterable[Message]) -> List[Message]:
    """Keep the first message for every ``(msgid, msgctxt)`` key."""
    keys: set[MessageKey] = set()
    unique: List[Message] = []
    for message in messages:
        if message.key in keys:
            continue
        keys.add(message.key)
        unique.append(message)
    return unique


def merged_messages(catalog: Catalog, translation_pass: TranslationPass) -> List[Message]:
    """Compute the message table that ``save`` would write.

    Unreferenced placeholders are dropped, missing units are appended as new
    placeholders, duplicates collapse to their first occurrence and the
    result is sorted by ``(msgid, msgctxt)``.
    """
    kept = [
        message
        for message in catalog.messages
        if message.key in translation_pass.seen or message.translated
    ]
    candidates = kept + [Message(msgid=m.msgid, msgctxt=m.msgctxt) for m in translation_pass.missing]
    return sorted(deduplicate(candidates), key=_sort_key)


def render_po(catalog: Catalog, messages: Iterable[Message]) -> str:
    po = polib.POFile()
    po.header = catalog.header
    po.metadata = dict(catalog.metadata)
    for message in messages:
        po.append(entry_from_message(message))
    return str(po)


def atomic_write(path: str, content: str) -> None:
    """Replace ``path`` with ``content`` without exposing a partial file."""
    directory = os.path.dirname(path) or "."
    fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as handle:
            handle.write(content)
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise


def save(catalog: Catalog, translation_pass: TranslationPass) -> int:
    """Merge the pass into the catalog and rewrite its .po file.

    Returns the number of messages written.
    """
    messages = merged_messages(catalog, translation_pass)
    atomic_write(catalog.po_file_path, render_po(catalog, messages))
    catalog.replace_messages(messages)
    logger.info("Saved %d messages to %s [lang=%s]", len(messages), catalog.po_file_path, catalog.language)
    return len(messages)


def unused_messages(catalog: Catalog, translation_pass: TranslationPass) -> List[Message]:
    return [message for message in catalog.messages if message.key not in translation_pass.seen]


def _report_line(message: Message) -> str:
    msgid = json.dumps(message.msgid, ensure_ascii=False)
    if message.msgctxt:
        msgctxt = json.dumps(message.msgctxt, ensure_ascii=False)
        return f"- {{msgid: {msgid}, msgctxt: {msgctxt}}}\n"
    return f"- {msgid}\n"


def report_unused(catalog: Catalog, translation_pass: TranslationPass) -> int:
    """Write the unused-messages report and return how many entries it lists.

    When nothing is unused any previous report is removed.
    """
    unused = unused_messages(catalog, translation_pass)
    path = catalog.unused_messages_file_path
    if not unused:
        if os.path.exists(path):
            os.remove(path)
        return 0

    generated_at = datetime.now(timezone.utc).isoformat(timespec="seconds")
    lines = [f"# Generated at {generated_at}\n"]
    lines.extend(_report_line(message) for message in unused)
    atomic_write(path, "".join(lines))
    logger.info("Wrote %d unused messages to %s [lang=%s]", len(unused), path, catalog.language)
    return len(unused)


__all__ = [
    "atomic_write",
    "deduplicate",
    "entry_from_message",
    "merged_messages",
    "render_po",
    "report_unused",
    "save",
    "unused_messages",
]
