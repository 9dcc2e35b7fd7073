"""Exceptions raised by the translation engine."""
from __future__ import annotations


class I18nError(Exception):
    """Base class for every error raised by html_i18n."""


class ConfigurationError(I18nError):
    """The module cannot be provisioned with the given configuration."""


class InvalidLanguageTag(ConfigurationError, ValueError):
    """A language tag could not be parsed."""


class CatalogLoadError(ConfigurationError):
    """A .po catalog is missing or could not be parsed."""


class HTMLParseError(I18nError):
    """The response body could not be parsed as HTML."""


class MessageNotFound(I18nError, KeyError):
    """No translated entry exists for a msgid/msgctxt pair."""

    def __init__(self, language: str, msgid: str, msgctxt: str = "") -> None:
        super().__init__(language, msgid, msgctxt)
        self.language = language
        self.msgid = msgid
        self.msgctxt = msgctxt

    def __str__(self) -> str:
        return f"cannot find msgstr in {self.language} with msgid={self.msgid!r} and msgctxt={self.msgctxt!r}"


__all__ = [
    "CatalogLoadError",
    "ConfigurationError",
    "HTMLParseError",
    "I18nError",
    "InvalidLanguageTag",
    "MessageNotFound",
]
