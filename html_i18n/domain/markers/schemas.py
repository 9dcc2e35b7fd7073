"""Marker names and the closed set of marker kinds found on elements."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet

from bs4 import Tag


class MarkerKind(str, Enum):
    """Every way an element can be flagged for the translation passes."""

    TAG_WRAPPER = "tag-wrapper"
    ATTRIBUTE_FLAG = "attribute-flag"
    CONTEXT = "context"
    KEEP_ON = "keep-on"
    ATTRS = "attrs"


@dataclass(frozen=True)
class MarkerConfig:
    """Marker tag and attribute names, plus the names derived from them."""

    tag: str = "i18n"
    attribute: str = "i18n"

    @property
    def context_attribute(self) -> str:
        return f"{self.attribute}-context"

    @property
    def keep_on_attribute(self) -> str:
        return f"{self.attribute}-keep-on"

    @property
    def attrs_attribute(self) -> str:
        return f"{self.attribute}-attrs"

    @property
    def attribute_prefix(self) -> str:
        return f"{self.attribute}:"

    @property
    def commas_prefix(self) -> str:
        return f"{self.attribute}:commas:"

    def classify(self, element: Tag) -> FrozenSet[MarkerKind]:
        """Return the marker kinds carried by ``element``."""
        kinds = set()
        if element.name == self.tag:
            kinds.add(MarkerKind.TAG_WRAPPER)
        attrs = element.attrs
        if self.attribute in attrs:
            kinds.add(MarkerKind.ATTRIBUTE_FLAG)
        if self.context_attribute in attrs:
            kinds.add(MarkerKind.CONTEXT)
        if self.keep_on_attribute in attrs:
            kinds.add(MarkerKind.KEEP_ON)
        if self.attrs_attribute in attrs:
            kinds.add(MarkerKind.ATTRS)
        return frozenset(kinds)


__all__ = ["MarkerConfig", "MarkerKind"]
