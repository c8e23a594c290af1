"""
Detection pass orchestrator.

Scores every successful fetch against the keyword sets, inserts leads for
content that has none yet, then fans out notifications.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from demandscan.core.config.models import DetectionConfig, WhatsAppConfig
from demandscan.core.detect.matcher import KeywordMatcher, KeywordSets, LeadCandidate
from demandscan.core.errors import StorageError
from demandscan.core.logging import get_contextual_logger
from demandscan.core.notify.base import EmailSender, LeadSummary, RoleLookup
from demandscan.core.notify.fanout import FanoutResult, NotificationFanout
from demandscan.persistence.repo import (
    FetchedContentRepository,
    KeywordRepository,
    LeadRepository,
    NewLead,
)

NO_KEYWORDS = "No keywords configured"
NO_CONTENT = "No content to analyze"
NO_NEW_LEADS = "No new leads found"
DETECTION_COMPLETE = "Lead detection complete"


@dataclass
class DetectionSummary:
    """Outcome of a detection pass."""

    run_id: str
    message: str = DETECTION_COMPLETE
    content_analyzed: int = 0
    candidates: int = 0
    leads_found: int = 0
    lead_ids: list[str] = field(default_factory=list)
    fanout: FanoutResult = field(default_factory=FanoutResult)

    @property
    def leads_inserted(self) -> int:
        return len(self.lead_ids)

    def to_response(self) -> dict[str, Any]:
        """JSON payload of the detection operation."""
        if self.message != DETECTION_COMPLETE:
            return {"message": self.message, "leadsFound": 0}

        return {
            "message": self.message,
            "leadsFound": self.leads_found,
            "leadsInserted": self.leads_inserted,
            "whatsappLinks": [link.to_dict() for link in self.fanout.whatsapp_links],
        }


class DetectionRunner:
    """Runs one keyword-matching pass and notifies admins."""

    def __init__(
        self,
        session: Session,
        config: DetectionConfig | None = None,
        *,
        email_sender: EmailSender | None = None,
        role_lookup: RoleLookup | None = None,
        whatsapp: WhatsAppConfig | None = None,
    ) -> None:
        self.session = session
        self.config = config or DetectionConfig()
        self.keywords = KeywordRepository(session)
        self.contents = FetchedContentRepository(session)
        self.leads = LeadRepository(session)
        self.fanout = NotificationFanout(
            session,
            email_sender=email_sender,
            role_lookup=role_lookup,
            whatsapp=whatsapp,
        )

    async def run(self) -> DetectionSummary:
        """Execute a detection pass.

        Raises:
            StorageError: If keywords or content cannot be loaded, or the
                lead batch cannot be saved
        """
        summary = DetectionSummary(run_id=uuid.uuid4().hex[:8])
        log = get_contextual_logger("detect", run=summary.run_id)

        try:
            keyword_rows = list(self.keywords.get_all())
        except SQLAlchemyError as e:
            raise StorageError("Failed to fetch keywords", cause=e) from e

        if not keyword_rows:
            log.info(NO_KEYWORDS)
            summary.message = NO_KEYWORDS
            return summary

        try:
            contents = list(self.contents.list_analyzable())
        except SQLAlchemyError as e:
            raise StorageError("Failed to fetch content", cause=e) from e

        if not contents:
            log.info(NO_CONTENT)
            summary.message = NO_CONTENT
            return summary

        log.info("Analyzing %d content items with %d keywords", len(contents), len(keyword_rows))
        summary.content_analyzed = len(contents)

        matcher = KeywordMatcher(KeywordSets.from_keywords(keyword_rows), self.config)
        candidates = matcher.scan(contents)
        summary.candidates = len(candidates)

        new_candidates = self._filter_existing(candidates, log)
        summary.leads_found = len(new_candidates)
        log.info("Found %d new leads", len(new_candidates))

        if not new_candidates:
            summary.message = NO_NEW_LEADS
            return summary

        inserted = self._insert(new_candidates)
        summary.lead_ids = [lead.id for lead in inserted]

        summary.fanout = await self.fanout.dispatch([LeadSummary.from_lead(lead) for lead in inserted])
        return summary

    def _filter_existing(self, candidates: list[LeadCandidate], log) -> list[LeadCandidate]:
        """Drop candidates whose content already has a lead."""
        fresh: list[LeadCandidate] = []
        seen: set[str] = set()

        for candidate in candidates:
            if candidate.fetched_content_id in seen:
                continue
            try:
                exists = self.leads.exists_for_content(candidate.fetched_content_id)
            except SQLAlchemyError as e:
                self.session.rollback()
                log.error("Lead lookup failed for %s: %s", candidate.fetched_content_id, e)
                continue

            if not exists:
                fresh.append(candidate)
                seen.add(candidate.fetched_content_id)

        return fresh

    def _insert(self, candidates: list[LeadCandidate]):
        try:
            rows = self.leads.insert_batch(
                NewLead(
                    fetched_content_id=c.fetched_content_id,
                    source_id=c.source_id,
                    source_url=c.source_url,
                    matched_keywords=c.matched_keywords,
                    snippet=c.snippet,
                    confidence_score=c.confidence_score,
                )
                for c in candidates
            )
            self.session.commit()
            return rows
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StorageError("Failed to save leads", cause=e) from e
