"""Language tag parsing and Accept-Language negotiation."""
from __future__ import annotations

import logging
from typing import List, Sequence, Tuple

from babel.core import negotiate_locale, parse_locale

from html_i18n.core.errors import InvalidLanguageTag

logger = logging.getLogger(__name__)

WILDCARD = "*"


def canonical_tag(value: str) -> str:
    """Return the BCP-47 spelling of a locale identifier.

    Accepts both ``pt-br`` and ``pt_BR`` styles and always returns the
    hyphenated form with a lowercase language, titlecase script and
    uppercase region (``pt-BR``, ``zh-Hant-TW``).
    """
    raw = (value or "").strip().replace("_", "-")
    try:
        language, territory, script, variant = parse_locale(raw, sep="-")[:4]
    except ValueError as exc:
        raise InvalidLanguageTag(f"invalid language code {value!r}: {exc}") from exc
    return "-".join(part for part in (language, script, territory, variant) if part)


def primary_language(tag: str) -> str:
    return tag.split("-", 1)[0].lower()


def parse_accept_language(header: str | None) -> List[Tuple[str, float]]:
    """Parse an Accept-Language header into ``(tag, quality)`` pairs.

    Pairs are ordered by descending quality; ties keep header order.
    Entries with ``q=0`` or an unreadable weight are dropped.
    """
    if not header:
        return []

    weighted: List[Tuple[str, float]] = []
    for item in header.split(","):
        parts = [part.strip() for part in item.split(";")]
        tag = parts[0]
        if not tag:
            continue
        quality = 1.0
        for param in parts[1:]:
            name, _, raw_value = param.partition("=")
            if name.strip().lower() != "q":
                continue
            try:
                quality = float(raw_value)
            except ValueError:
                quality = -1.0
        if quality <= 0 or quality > 1:
            continue
        weighted.append((tag, quality))

    weighted.sort(key=lambda pair: pair[1], reverse=True)
    return weighted


def match(preference_header: str | None, available: Sequence[str]) -> str:
    """Pick the best tag in ``available`` for an Accept-Language header.

    Each preference is tried in order of weight: an exact (or babel alias)
    match first, then any available tag sharing its primary language.
    When nothing matches, the first available tag is returned.
    """
    if not available:
        raise ValueError("no languages available for negotiation")

    by_lower = {tag.lower(): tag for tag in available}
    for raw_tag, _quality in parse_accept_language(preference_header):
        if raw_tag == WILDCARD:
            continue
        try:
            tag = canonical_tag(raw_tag)
        except InvalidLanguageTag:
            logger.debug("Ignoring unparseable language preference %r", raw_tag)
            continue

        found = negotiate_locale([tag], list(available), sep="-")
        if found and found.lower() in by_lower:
            return by_lower[found.lower()]

        language = primary_language(tag)
        for candidate in available:
            if primary_language(candidate) == language:
                return candidate

    return available[0]


__all__ = ["canonical_tag", "match", "parse_accept_language", "primary_language"]
