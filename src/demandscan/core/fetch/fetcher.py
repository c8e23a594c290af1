"""
Polite single-page fetcher.

robots.txt check -> GET -> status / content-type checks -> text
extraction -> content hash.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from demandscan.core.backends.base import Backend, FetchError, RequestSpec
from demandscan.core.extract.text import MAX_TEXT_CHARS, MIN_TEXT_CHARS, extract_visible_text
from demandscan.core.normalize.hashing import content_hash

from .robots import RobotsPolicy

if TYPE_CHECKING:
    from demandscan.persistence.models import Source

logger = logging.getLogger(__name__)

ACCEPTED_CONTENT_TYPES = ("text/html", "text/plain")

BLOCKED_BY_ROBOTS = "Blocked by robots.txt"
NO_MEANINGFUL_CONTENT = "No meaningful content extracted"


@dataclass
class FetchOutcome:
    """Result of fetching one source. Exactly one of text/error is set."""

    url: str
    text: str | None = None
    error: str | None = None
    content_hash: str | None = None
    status_code: int | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failure(cls, url: str, error: str, status_code: int | None = None) -> "FetchOutcome":
        return cls(url=url, error=error, status_code=status_code)

    @classmethod
    def success(cls, url: str, text: str, status_code: int | None = None) -> "FetchOutcome":
        return cls(url=url, text=text, content_hash=content_hash(text), status_code=status_code)


class ContentFetcher:
    """Fetches a source's page and extracts its visible text."""

    def __init__(
        self,
        backend: Backend,
        robots: RobotsPolicy,
        max_text_chars: int = MAX_TEXT_CHARS,
        min_text_chars: int = MIN_TEXT_CHARS,
    ):
        self.backend = backend
        self.robots = robots
        self.max_text_chars = max_text_chars
        self.min_text_chars = min_text_chars

    async def fetch_url(self, url: str, source_name: str | None = None) -> FetchOutcome:
        """Fetch one URL. Never raises for per-page problems."""
        if not await self.robots.is_allowed(url):
            return FetchOutcome.failure(url, BLOCKED_BY_ROBOTS)

        try:
            result = await self.backend.fetch(RequestSpec(url=url, source_name=source_name))
        except FetchError as e:
            logger.error("Error fetching %s: %s", url, e)
            return FetchOutcome.failure(url, str(e))

        if not result.ok:
            return FetchOutcome.failure(
                url,
                f"HTTP {result.status_code}: {result.reason}",
                status_code=result.status_code,
            )

        content_type = result.content_type
        if not any(accepted in content_type for accepted in ACCEPTED_CONTENT_TYPES):
            return FetchOutcome.failure(
                url,
                f"Unsupported content type: {content_type}",
                status_code=result.status_code,
            )

        text = extract_visible_text(
            result.body,
            max_chars=self.max_text_chars,
            min_chars=self.min_text_chars,
        )
        if text is None:
            return FetchOutcome.failure(url, NO_MEANINGFUL_CONTENT, status_code=result.status_code)

        return FetchOutcome.success(url, text, status_code=result.status_code)

    async def fetch(self, source: "Source") -> FetchOutcome:
        """Fetch a registered source."""
        return await self.fetch_url(source.url, source_name=source.name)
