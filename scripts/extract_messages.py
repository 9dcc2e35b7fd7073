"""Collect marked strings from HTML files and add them to the .po catalogs.

Every *.html file under the site directory is translated once per target
language. Strings without a translation are appended to LANGUAGE.po as
empty placeholders (existing translations are never overwritten), and
LANGUAGE-unused-messages.yaml lists catalog entries no page referenced.

Run from project root: python scripts/extract_messages.py [SITE_DIR]
"""
from __future__ import annotations

import sys
from pathlib import Path

from html_i18n.core.config import Settings
from html_i18n.core.i18n import I18n
from html_i18n.core.logging_config import setup_logging
from html_i18n.domain.catalogs import persister
from html_i18n.domain.catalogs.models import TranslationPass
from html_i18n.domain.markers.rewriter import translate


def main() -> None:
    settings = Settings()
    setup_logging(settings)
    site_dir = Path(sys.argv[1]) if len(sys.argv) > 1 else Path(settings.SITE_DIR)
    pages = sorted(site_dir.rglob("*.html"))
    print(f"Found {len(pages)} HTML files in {site_dir}.")

    i18n = I18n(settings)
    i18n.provision()
    for language, catalog in i18n.catalogs.items():
        if catalog.is_source:
            continue
        translation_pass = TranslationPass()
        for page in pages:
            translate(page.read_bytes(), catalog, translation_pass)
        added = len({message.key for message in translation_pass.missing})
        total = persister.save(catalog, translation_pass)
        unused = persister.report_unused(catalog, translation_pass)
        print(f"Updated {catalog.po_file_path}: {total} entries, {added} missing, {unused} unused")


if __name__ == "__main__":
    main()
