"""
Repository pattern for database operations.

Provides CRUD abstractions for the pipeline's records, including the
existence checks that keep fetched content and leads deduplicated.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Sequence

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from demandscan.core.config.models import FetchStatus, KeywordCategory, LeadStatus, UserRoleName

from .models import (
    AlertSettings,
    FetchedContent,
    Keyword,
    Lead,
    Notification,
    Source,
    UserRole,
)


# =============================================================================
# Source Repository
# =============================================================================


class SourceRepository:
    """Repository for Source CRUD operations."""

    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, source_id: str) -> Source | None:
        return self.session.get(Source, source_id)

    def get_all(self, active_only: bool = False) -> Sequence[Source]:
        """Get sources, oldest first."""
        stmt = select(Source)
        if active_only:
            stmt = stmt.where(Source.active.is_(True))
        stmt = stmt.order_by(Source.created_at, Source.id)
        return self.session.execute(stmt).scalars().all()

    def create(
        self,
        name: str,
        url: str,
        source_type: str = "website",
        active: bool = True,
    ) -> Source:
        source = Source(name=name, url=url, source_type=source_type, active=active)
        self.session.add(source)
        self.session.flush()
        return source

    def set_active(self, source_id: str, active: bool) -> Source | None:
        source = self.get_by_id(source_id)
        if source is None:
            return None
        source.active = active
        self.session.flush()
        return source

    def delete(self, source_id: str) -> bool:
        source = self.get_by_id(source_id)
        if source:
            self.session.delete(source)
            self.session.flush()
            return True
        return False


# =============================================================================
# Fetched Content Repository
# =============================================================================


class FetchedContentRepository:
    """Repository for FetchedContent. Rows are insert-only."""

    def __init__(self, session: Session):
        self.session = session

    def exists_with_hash(self, source_id: str, content_hash: str) -> bool:
        """Check whether this source already produced content with this hash."""
        stmt = (
            select(FetchedContent.id)
            .where(
                FetchedContent.source_id == source_id,
                FetchedContent.content_hash == content_hash,
            )
            .limit(1)
        )
        return self.session.execute(stmt).first() is not None

    def create(
        self,
        source: Source,
        text: str | None,
        content_hash: str | None,
        error: str | None,
    ) -> FetchedContent:
        """Record one crawl attempt; status follows from the error."""
        row = FetchedContent(
            source_id=source.id,
            source_url=source.url,
            raw_text=None if error else text,
            content_hash=None if error else content_hash,
            status=FetchStatus.FAILED.value if error else FetchStatus.SUCCESS.value,
            error_message=error,
            fetched_at=datetime.utcnow(),
        )
        self.session.add(row)
        self.session.flush()
        return row

    def list_analyzable(self) -> Sequence[FetchedContent]:
        """All successful fetches that carry text, oldest first."""
        stmt = (
            select(FetchedContent)
            .where(
                FetchedContent.status == FetchStatus.SUCCESS.value,
                FetchedContent.raw_text.is_not(None),
            )
            .order_by(FetchedContent.fetched_at, FetchedContent.id)
        )
        return self.session.execute(stmt).scalars().all()

    def list_recent(self, source_id: str | None = None, limit: int = 50) -> Sequence[FetchedContent]:
        stmt = select(FetchedContent)
        if source_id is not None:
            stmt = stmt.where(FetchedContent.source_id == source_id)
        stmt = stmt.order_by(FetchedContent.fetched_at.desc()).limit(limit)
        return self.session.execute(stmt).scalars().all()

    def count(self, source_id: str | None = None) -> int:
        stmt = select(func.count(FetchedContent.id))
        if source_id is not None:
            stmt = stmt.where(FetchedContent.source_id == source_id)
        return int(self.session.execute(stmt).scalar_one())


# =============================================================================
# Keyword Repository
# =============================================================================


class KeywordRepository:
    """Repository for Keyword CRUD operations."""

    def __init__(self, session: Session):
        self.session = session

    def get_all(self, category: KeywordCategory | None = None) -> Sequence[Keyword]:
        stmt = select(Keyword)
        if category is not None:
            stmt = stmt.where(Keyword.category == category.value)
        stmt = stmt.order_by(Keyword.created_at, Keyword.id)
        return self.session.execute(stmt).scalars().all()

    def create(self, keyword: str, category: KeywordCategory) -> Keyword:
        row = Keyword(keyword=keyword.strip(), category=category.value)
        self.session.add(row)
        self.session.flush()
        return row

    def delete(self, keyword_id: str) -> bool:
        row = self.session.get(Keyword, keyword_id)
        if row:
            self.session.delete(row)
            self.session.flush()
            return True
        return False


# =============================================================================
# Lead Repository
# =============================================================================


@dataclass
class NewLead:
    """Values for a lead about to be inserted."""

    fetched_content_id: str
    source_id: str | None
    source_url: str
    matched_keywords: list[str]
    snippet: str
    confidence_score: int


class LeadRepository:
    """Repository for Lead operations."""

    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, lead_id: str) -> Lead | None:
        return self.session.get(Lead, lead_id)

    def exists_for_content(self, fetched_content_id: str) -> bool:
        """Check whether a lead already points at this content item."""
        stmt = select(Lead.id).where(Lead.fetched_content_id == fetched_content_id).limit(1)
        return self.session.execute(stmt).first() is not None

    def insert_batch(self, leads: Iterable[NewLead]) -> list[Lead]:
        """Insert leads in one flush; all start as new and not notified."""
        rows = [
            Lead(
                fetched_content_id=lead.fetched_content_id,
                source_id=lead.source_id,
                source_url=lead.source_url,
                matched_keywords=list(lead.matched_keywords),
                snippet=lead.snippet,
                confidence_score=lead.confidence_score,
                status=LeadStatus.NEW.value,
                notified=False,
            )
            for lead in leads
        ]
        self.session.add_all(rows)
        self.session.flush()
        return rows

    def mark_notified(self, lead_ids: Sequence[str]) -> int:
        if not lead_ids:
            return 0
        stmt = update(Lead).where(Lead.id.in_(lead_ids)).values(notified=True)
        result = self.session.execute(stmt)
        return int(result.rowcount or 0)

    def update_status(self, lead_id: str, status: LeadStatus) -> Lead:
        """Move a lead through the operator workflow.

        Raises:
            LookupError: If the lead does not exist
            ValueError: If the transition is not allowed
        """
        lead = self.get_by_id(lead_id)
        if lead is None:
            raise LookupError(f"Lead not found: {lead_id}")

        current = LeadStatus(lead.status)
        if not current.can_transition_to(status):
            raise ValueError(f"Cannot move lead from '{current.value}' to '{status.value}'")

        lead.status = status.value
        self.session.flush()
        return lead

    def list_leads(
        self,
        status: LeadStatus | None = None,
        limit: int = 100,
    ) -> Sequence[Lead]:
        stmt = select(Lead)
        if status is not None:
            stmt = stmt.where(Lead.status == status.value)
        stmt = stmt.order_by(Lead.created_at.desc()).limit(limit)
        return self.session.execute(stmt).scalars().all()

    def count_by_status(self) -> dict[str, int]:
        stmt = select(Lead.status, func.count(Lead.id)).group_by(Lead.status)
        return {status: count for status, count in self.session.execute(stmt).all()}


# =============================================================================
# Alert Settings Repository
# =============================================================================


class AlertSettingsRepository:
    """Repository for per-user alert preferences."""

    def __init__(self, session: Session):
        self.session = session

    def get_for_user(self, user_id: str) -> AlertSettings | None:
        stmt = select(AlertSettings).where(AlertSettings.user_id == user_id)
        return self.session.execute(stmt).scalar_one_or_none()

    def upsert(
        self,
        user_id: str,
        *,
        email_enabled: bool | None = None,
        email_address: str | None = None,
        whatsapp_enabled: bool | None = None,
        whatsapp_number: str | None = None,
        in_app_enabled: bool | None = None,
    ) -> AlertSettings:
        """Create the row lazily, then apply only the given fields."""
        settings = self.get_for_user(user_id)
        if settings is None:
            settings = AlertSettings(
                user_id=user_id,
                email_enabled=False,
                whatsapp_enabled=False,
                in_app_enabled=True,
            )
            self.session.add(settings)

        if email_enabled is not None:
            settings.email_enabled = email_enabled
        if email_address is not None:
            settings.email_address = email_address or None
        if whatsapp_enabled is not None:
            settings.whatsapp_enabled = whatsapp_enabled
        if whatsapp_number is not None:
            settings.whatsapp_number = whatsapp_number or None
        if in_app_enabled is not None:
            settings.in_app_enabled = in_app_enabled

        self.session.flush()
        return settings


# =============================================================================
# Notification Repository
# =============================================================================


class NotificationRepository:
    """Repository for in-app notifications."""

    def __init__(self, session: Session):
        self.session = session

    def create(
        self,
        user_id: str,
        title: str,
        message: str,
        lead_id: str | None = None,
        type: str = "lead",
    ) -> Notification:
        row = Notification(
            user_id=user_id,
            lead_id=lead_id,
            title=title,
            message=message,
            type=type,
        )
        self.session.add(row)
        self.session.flush()
        return row

    def list_for_user(self, user_id: str, unread_only: bool = False) -> Sequence[Notification]:
        stmt = select(Notification).where(Notification.user_id == user_id)
        if unread_only:
            stmt = stmt.where(Notification.read.is_(False))
        stmt = stmt.order_by(Notification.created_at.desc())
        return self.session.execute(stmt).scalars().all()


# =============================================================================
# Role Repository
# =============================================================================


class RoleRepository:
    """Repository for role assignments."""

    def __init__(self, session: Session):
        self.session = session

    def principals(self, role: UserRoleName) -> list[str]:
        """Distinct user ids holding a role, in assignment order."""
        stmt = (
            select(UserRole.user_id)
            .where(UserRole.role == role.value)
            .order_by(UserRole.created_at, UserRole.id)
        )
        seen: dict[str, None] = {}
        for user_id in self.session.execute(stmt).scalars():
            seen.setdefault(user_id, None)
        return list(seen)

    def assign(self, user_id: str, role: UserRoleName) -> UserRole:
        stmt = select(UserRole).where(UserRole.user_id == user_id, UserRole.role == role.value)
        existing = self.session.execute(stmt).scalar_one_or_none()
        if existing:
            return existing

        row = UserRole(user_id=user_id, role=role.value)
        self.session.add(row)
        self.session.flush()
        return row
