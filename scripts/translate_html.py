"""Translate one HTML file from the command line.

Uses the same settings as the middleware (I18N_* environment variables or
.env), so catalogs are looked up in I18N_TRANSLATIONS_DIR.

Run: python scripts/translate_html.py page.html --lang fr [--update] [-o out.html]
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

from html_i18n.core.config import Settings
from html_i18n.core.errors import I18nError
from html_i18n.core.i18n import I18n
from html_i18n.core.logging_config import setup_logging


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("source", type=Path, help="HTML file to translate")
    parser.add_argument("--lang", required=True, help="Accept-Language style preference, e.g. 'fr' or 'fr-CA,fr;q=0.8'")
    parser.add_argument("-o", "--output", type=Path, help="Write the result here instead of stdout")
    parser.add_argument("--update", action="store_true", help="Record missing messages in the .po file")
    args = parser.parse_args()

    settings = Settings()
    setup_logging(settings)
    i18n = I18n(settings)
    try:
        i18n.provision()
        page = i18n.translate_page(args.source.read_bytes(), args.lang)
    except I18nError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    if args.output:
        args.output.write_text(page.html, encoding="utf-8")
        print(f"Wrote {args.output} ({page.language}, {len(page.translation_pass.missing)} missing)")
    else:
        sys.stdout.write(page.html)

    if args.update:
        i18n.persist(page.catalog, page.translation_pass)
    return 0


if __name__ == "__main__":
    sys.exit(main())
