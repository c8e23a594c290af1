"""CLI command modules."""

from . import alerts, content, crawl, db, detect, keywords, leads, sources

__all__ = [
    "alerts",
    "content",
    "crawl",
    "db",
    "detect",
    "keywords",
    "leads",
    "sources",
]
