"""Translation catalogs: loading, lookup and persistence."""

from .models import Catalog, Message, TranslationPass
from .resolver import resolve

__all__ = [
    "Catalog",
    "Message",
    "TranslationPass",
    "resolve",
]
