"""ASGI middleware that translates HTML responses."""
from __future__ import annotations

import codecs
import logging
from typing import Awaitable, Callable

from fastapi import Request, Response
from starlette.background import BackgroundTask
from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from html_i18n.core.errors import HTMLParseError
from html_i18n.core.i18n import I18n

logger = logging.getLogger(__name__)

DEFAULT_CHARSET = "utf-8"


def _known_charset(charset: str) -> str:
    try:
        codecs.lookup(charset)
    except LookupError:
        logger.warning("Unknown response charset %r, using %s", charset, DEFAULT_CHARSET)
        return DEFAULT_CHARSET
    return charset


def should_buffer(status_code: int, content_type: str | None) -> bool:
    """Only successful or redirect HTML responses are translated."""
    return 200 <= status_code < 400 and (content_type or "").startswith("text/html")


def charset_of(content_type: str | None) -> str:
    for param in (content_type or "").split(";")[1:]:
        name, _, value = param.partition("=")
        if name.strip().lower() == "charset" and value.strip():
            return _known_charset(value.strip().strip('"'))
    return DEFAULT_CHARSET


class I18nMiddleware(BaseHTTPMiddleware):
    """Translate buffered HTML bodies into the client's preferred language.

    The language is negotiated from the Accept-Language header against the
    provisioned catalogs and announced in the Language and Content-Language
    response headers.
    """

    def __init__(self, app: ASGIApp, i18n: I18n) -> None:
        super().__init__(app)
        self.i18n = i18n

    async def dispatch(self, request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        response = await call_next(request)

        content_type = response.headers.get("content-type")
        if not should_buffer(response.status_code, content_type):
            return response

        body = b"".join([chunk async for chunk in response.body_iterator])
        charset = charset_of(content_type)
        try:
            page = await run_in_threadpool(
                self.i18n.translate_page,
                body,
                request.headers.get("accept-language"),
                charset,
            )
        except HTMLParseError:
            logger.exception("Could not translate %s", request.url.path)
            raise

        background = None
        if self.i18n.settings.UPDATE_TRANSLATIONS:
            background = BackgroundTask(self.i18n.persist, page.catalog, page.translation_pass)

        content = page.html.encode(charset, errors="xmlcharrefreplace")
        translated = Response(content=content, status_code=response.status_code, background=background)
        translated.raw_headers = [
            (name, value) for name, value in response.raw_headers if name.lower() != b"content-length"
        ]
        translated.headers["content-length"] = str(len(content))
        translated.headers["language"] = page.language
        translated.headers["content-language"] = page.language
        translated.headers.add_vary_header("Accept-Language")
        return translated


__all__ = ["I18nMiddleware", "charset_of", "should_buffer"]
