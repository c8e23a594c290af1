"""
Crawl pass orchestrator.

Walks every active source once, serially: fetch -> skip if unchanged ->
persist -> wait.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from demandscan.core.backends.base import Backend
from demandscan.core.backends.http_backend import HttpBackend
from demandscan.core.config.models import CrawlerConfig, FetchStatus
from demandscan.core.errors import StorageError
from demandscan.core.fetch.fetcher import ContentFetcher
from demandscan.core.fetch.robots import RobotsPolicy
from demandscan.core.fetch.throttling import RateLimitConfig, RateLimiter
from demandscan.core.logging import get_contextual_logger
from demandscan.persistence.models import Source
from demandscan.persistence.repo import FetchedContentRepository, SourceRepository

CONTENT_UNCHANGED = "Content unchanged"
NO_ACTIVE_SOURCES = "No active sources to fetch"


@dataclass
class SourceResult:
    """Per-source outcome reported by the crawl operation."""

    source_id: str
    url: str
    status: FetchStatus
    error: str | None = None
    fetched_content_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "sourceId": self.source_id,
            "url": self.url,
            "status": self.status.value,
        }
        if self.error:
            data["error"] = self.error
        return data


@dataclass
class CrawlSummary:
    """Statistics for a crawl pass."""

    run_id: str
    results: list[SourceResult] = field(default_factory=list)
    started_at: datetime = field(default_factory=datetime.utcnow)
    finished_at: datetime | None = None

    def _count(self, status: FetchStatus) -> int:
        return sum(1 for r in self.results if r.status == status)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def successful(self) -> int:
        return self._count(FetchStatus.SUCCESS)

    @property
    def failed(self) -> int:
        return self._count(FetchStatus.FAILED)

    @property
    def skipped(self) -> int:
        return self._count(FetchStatus.SKIPPED)

    @property
    def duration_seconds(self) -> float | None:
        if self.finished_at:
            return (self.finished_at - self.started_at).total_seconds()
        return None

    def to_response(self) -> dict[str, Any]:
        """JSON payload of the crawl operation."""
        if not self.results:
            return {"message": NO_ACTIVE_SOURCES, "fetched": 0}

        return {
            "message": "Fetch complete",
            "total": self.total,
            "successful": self.successful,
            "failed": self.failed,
            "skipped": self.skipped,
            "results": [r.to_dict() for r in self.results],
        }


class CrawlRunner:
    """Runs one polling pass over all active sources."""

    def __init__(
        self,
        session: Session,
        config: CrawlerConfig | None = None,
        *,
        backend: Backend | None = None,
        rate_limiter: RateLimiter | None = None,
    ) -> None:
        """Initialize the crawl runner.

        Args:
            session: Database session; committed after every source
            config: Crawler settings
            backend: Fetching backend (default: HttpBackend from config)
            rate_limiter: Limiter applied after each source
        """
        self.session = session
        self.config = config or CrawlerConfig()
        self._owns_backend = backend is None
        self.backend = backend or HttpBackend(
            timeout=self.config.timeout_seconds,
            user_agent=self.config.user_agent,
        )
        self.rate_limiter = rate_limiter or RateLimiter(
            RateLimitConfig(delay_ms=self.config.rate_limit_ms)
        )
        self.fetcher = ContentFetcher(
            self.backend,
            RobotsPolicy(
                self.backend,
                agent_token=self.config.robots_agent_token,
                fail_open=self.config.robots_fail_open,
            ),
            max_text_chars=self.config.max_text_chars,
            min_text_chars=self.config.min_text_chars,
        )
        self.sources = SourceRepository(session)
        self.contents = FetchedContentRepository(session)

    def _load_sources(self) -> list[Source]:
        try:
            return list(self.sources.get_all(active_only=True))
        except SQLAlchemyError as e:
            raise StorageError("Failed to fetch sources", cause=e) from e

    async def run(self) -> CrawlSummary:
        """Execute a complete crawl pass.

        Raises:
            StorageError: If the source list cannot be loaded
        """
        summary = CrawlSummary(run_id=uuid.uuid4().hex[:8])
        log = get_contextual_logger("crawl", run=summary.run_id)

        try:
            sources = self._load_sources()
            if not sources:
                log.info(NO_ACTIVE_SOURCES)
                return summary

            log.info("Found %d active sources to fetch", len(sources))

            for source in sources:
                summary.results.append(await self._process_source(source))
                await self.rate_limiter.wait()

            log.info(
                "Fetch complete: %d success, %d failed, %d skipped",
                summary.successful,
                summary.failed,
                summary.skipped,
            )
            return summary

        finally:
            summary.finished_at = datetime.utcnow()
            if self._owns_backend:
                await self.backend.close()

    async def _process_source(self, source: Source) -> SourceResult:
        log = get_contextual_logger("crawl", source=source.name)
        log.info("Fetching: %s", source.url)

        outcome = await self.fetcher.fetch(source)

        if outcome.content_hash and self._is_unchanged(source, outcome.content_hash):
            log.info("Content unchanged for %s, skipping", source.url)
            return SourceResult(
                source_id=source.id,
                url=source.url,
                status=FetchStatus.SKIPPED,
                error=CONTENT_UNCHANGED,
            )

        status = FetchStatus.SUCCESS if outcome.ok else FetchStatus.FAILED
        result = SourceResult(source_id=source.id, url=source.url, status=status, error=outcome.error)

        try:
            row = self.contents.create(source, outcome.text, outcome.content_hash, outcome.error)
            self.session.commit()
            result.fetched_content_id = row.id
        except Exception as e:
            self.session.rollback()
            log.error("Error inserting content for %s: %s", source.url, e)
            result.status = FetchStatus.FAILED
            result.error = outcome.error or f"Failed to store content: {e}"

        if outcome.error:
            log.warning("Fetch failed for %s: %s", source.url, outcome.error)

        return result

    def _is_unchanged(self, source: Source, content_hash: str) -> bool:
        try:
            return self.contents.exists_with_hash(source.id, content_hash)
        except SQLAlchemyError as e:
            self.session.rollback()
            get_contextual_logger("crawl", source=source.name).error(
                "Hash lookup failed for %s: %s", source.url, e
            )
            return False
