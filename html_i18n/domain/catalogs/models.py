"""In-memory catalog representation and per-pass accumulators."""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set, Tuple

from html_i18n.domain.markers.schemas import MarkerConfig

MessageKey = Tuple[str, str]


@dataclass(frozen=True)
class Message:
    """One catalog entry. Identity is ``(msgid, msgctxt)``."""

    msgid: str
    msgctxt: str = ""
    msgstr: str = ""
    msgid_plural: str = field(default="", compare=False)
    msgstr_plural: Tuple[Tuple[int, str], ...] = field(default=(), compare=False)
    comment: str = field(default="", compare=False)
    tcomment: str = field(default="", compare=False)
    flags: Tuple[str, ...] = field(default=(), compare=False)
    occurrences: Tuple[Tuple[str, str], ...] = field(default=(), compare=False)

    @property
    def key(self) -> MessageKey:
        return (self.msgid, self.msgctxt)

    @property
    def translated(self) -> bool:
        if self.msgstr:
            return True
        return any(value for _, value in self.msgstr_plural)


@dataclass
class TranslationPass:
    """Lookups made while translating one document.

    ``seen`` holds every key the resolver was asked about, hit or miss;
    ``missing`` holds the units that had no translation, in document order.
    """

    seen: Set[MessageKey] = field(default_factory=set)
    missing: List[Message] = field(default_factory=list)

    def mark_seen(self, msgid: str, msgctxt: str = "") -> None:
        self.seen.add((msgid, msgctxt))

    def add_missing(self, msgid: str, msgctxt: str = "") -> None:
        self.missing.append(Message(msgid=msgid, msgctxt=msgctxt))

    def merge(self, other: "TranslationPass") -> None:
        self.seen.update(other.seen)
        self.missing.extend(other.missing)


class Catalog:
    """Messages for one target language, loaded from ``<directory>/<language>.po``.

    The message table is replaced wholesale by the persister and is never
    mutated in place, so lookups can run without locking.
    """

    def __init__(
        self,
        language: str,
        source_language: str,
        directory: str,
        messages: Iterable[Message] = (),
        markers: Optional[MarkerConfig] = None,
        expose_to_js: bool = False,
        header: str = "",
        metadata: Optional[Dict[str, str]] = None,
    ) -> None:
        self.language = language
        self.source_language = source_language
        self.directory = directory
        self.markers = markers or MarkerConfig()
        self.expose_to_js = expose_to_js
        self.header = header
        self.metadata: Dict[str, str] = dict(metadata or {})
        self.replace_messages(messages)

    def __repr__(self) -> str:
        return f"Catalog(language={self.language!r}, messages={len(self._messages)})"

    @property
    def messages(self) -> Tuple[Message, ...]:
        return self._messages

    @property
    def is_source(self) -> bool:
        return self.language == self.source_language

    @property
    def translated_count(self) -> int:
        return sum(1 for message in self._messages if message.translated)

    @property
    def po_file_path(self) -> str:
        return os.path.join(self.directory, f"{self.language}.po")

    @property
    def unused_messages_file_path(self) -> str:
        return os.path.join(self.directory, f"{self.language}-unused-messages.yaml")

    def replace_messages(self, messages: Iterable[Message]) -> None:
        table = tuple(messages)
        index: Dict[MessageKey, str] = {}
        for message in table:
            if message.msgstr and message.key not in index:
                index[message.key] = message.msgstr
        self._messages, self._index = table, index

    def lookup(self, msgid: str, msgctxt: str = "") -> Optional[str]:
        return self._index.get((msgid, msgctxt))


__all__ = ["Catalog", "Message", "MessageKey", "TranslationPass"]
