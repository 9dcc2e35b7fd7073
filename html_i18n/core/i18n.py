"""Provisioning and per-request entry points of the translation middleware."""
from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass
from typing import Dict, List, Optional, Union

from html_i18n.core.config import Settings
from html_i18n.core.errors import ConfigurationError
from html_i18n.domain.catalogs import persister
from html_i18n.domain.catalogs.models import Catalog, TranslationPass
from html_i18n.domain.catalogs.store import load_catalogs
from html_i18n.domain.languages.services import match
from html_i18n.domain.markers.rewriter import translate
from html_i18n.domain.markers.schemas import MarkerConfig

logger = logging.getLogger(__name__)


@dataclass
class TranslatedPage:
    """Result of translating one response body."""

    catalog: Catalog
    html: str
    translation_pass: TranslationPass

    @property
    def language(self) -> str:
        return self.catalog.language


class I18n:
    """Catalogs for every configured language plus the locks guarding them.

    Lookups read the catalogs without locking. Saving a catalog and writing
    its unused report happen under that language's lock, so different
    languages never wait on each other.
    """

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.markers = MarkerConfig(tag=settings.HTML_TAG, attribute=settings.HTML_ATTRIBUTE)
        self.catalogs: Dict[str, Catalog] = {}
        self._locks: Dict[str, threading.Lock] = {}
        self._history: Dict[str, TranslationPass] = {}

    @property
    def languages(self) -> List[str]:
        return list(self.settings.LANGUAGES)

    @property
    def provisioned(self) -> bool:
        return bool(self.catalogs)

    def validate(self) -> None:
        """Fail fast on configuration that cannot serve any request."""
        if not self.settings.LANGUAGES:
            raise ConfigurationError(
                "no languages provided. Set I18N_LANGUAGES to the languages you support "
                "(each needs a LANGUAGE.po file in the translations directory)"
            )
        if not os.path.isdir(self.settings.TRANSLATIONS_DIR):
            raise ConfigurationError(
                f"translations directory {self.settings.TRANSLATIONS_DIR!r} does not exist or is not a directory"
            )

    def provision(self) -> None:
        """Load every declared catalog. Any failure is fatal."""
        self.validate()
        catalogs = load_catalogs(
            self.settings.TRANSLATIONS_DIR,
            self.settings.SOURCE_LANGUAGE,
            self.languages,
            markers=self.markers,
            expose_to_js=self.settings.EXPOSE_TO_JS,
        )
        missing = [language for language in self.languages if language not in catalogs]
        if missing:
            raise ConfigurationError(
                f"no translations found for languages {missing}. available languages: {sorted(catalogs)}"
            )

        self.catalogs = catalogs
        self._locks = {language: threading.Lock() for language in catalogs}
        self._history = {language: TranslationPass() for language in catalogs}
        logger.info(
            "Provisioned %d catalogs from %s (source=%s, update=%s)",
            len(catalogs),
            self.settings.TRANSLATIONS_DIR,
            self.settings.SOURCE_LANGUAGE,
            self.settings.UPDATE_TRANSLATIONS,
        )

    def negotiate(self, accept_language: Optional[str]) -> Catalog:
        if not self.provisioned:
            raise RuntimeError("I18n.provision() must be called before serving requests")
        return self.catalogs[match(accept_language, self.languages)]

    def translate_page(
        self,
        body: Union[bytes, str],
        accept_language: Optional[str],
        encoding: Optional[str] = None,
    ) -> TranslatedPage:
        catalog = self.negotiate(accept_language)
        translation_pass = TranslationPass()
        translated = translate(body, catalog, translation_pass, encoding=encoding)
        if translation_pass.missing:
            logger.debug(
                "%d missing translations [lang=%s]", len(translation_pass.missing), catalog.language
            )
        return TranslatedPage(catalog=catalog, html=translated, translation_pass=translation_pass)

    def persist(self, catalog: Catalog, translation_pass: TranslationPass) -> None:
        """Fold one pass into the catalog file and refresh the unused report.

        Write failures are logged and swallowed: by the time this runs the
        response has already been produced.
        """
        if catalog.is_source:
            return

        with self._locks[catalog.language]:
            history = self._history[catalog.language]
            history.merge(translation_pass)
            try:
                persister.save(catalog, history)
                history.missing.clear()
                persister.report_unused(catalog, history)
            except Exception:
                logger.exception("Could not persist translations [lang=%s]", catalog.language)


__all__ = ["I18n", "TranslatedPage"]
