"""
SQLAlchemy ORM models for DemandScan.

Defines the complete database schema including:
- Sources: Monitored public URLs
- FetchedContent: One row per crawl attempt
- Keywords: Product / intent / location terms
- Leads: Detected buyer-intent signals
- AlertSettings: Per-admin notification preferences
- Notifications: In-app notification records
- UserRoles: Role assignments (admin lookup)
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def new_id() -> str:
    """Generate a primary key."""
    return str(uuid.uuid4())


# =============================================================================
# Base Class
# =============================================================================


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    type_annotation_map = {
        dict[str, Any]: JSON,
        list[str]: JSON,
    }


# =============================================================================
# Mixins
# =============================================================================


class TimestampMixin:
    """Mixin providing created_at and updated_at columns."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )


# =============================================================================
# Source Model
# =============================================================================


class Source(Base, TimestampMixin):
    """A public URL registered by an operator for polling."""

    __tablename__ = "sources"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    url: Mapped[str] = mapped_column(String(2000), nullable=False)
    source_type: Mapped[str] = mapped_column(String(20), nullable=False, default="website")
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False, index=True)

    fetched_content: Mapped[list["FetchedContent"]] = relationship(
        "FetchedContent",
        back_populates="source",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Source(id={self.id}, name='{self.name}', active={self.active})>"


# =============================================================================
# Fetched Content Model
# =============================================================================


class FetchedContent(Base):
    """Result of one crawl attempt. Never updated after insert."""

    __tablename__ = "fetched_content"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    source_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("sources.id", ondelete="CASCADE"),
        nullable=False,
    )
    source_url: Mapped[str] = mapped_column(String(2000), nullable=False)
    fetched_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        nullable=False,
        index=True,
    )
    raw_text: Mapped[str | None] = mapped_column(Text, nullable=True)
    content_hash: Mapped[str | None] = mapped_column(String(16), nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="success", index=True)
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)

    source: Mapped["Source"] = relationship("Source", back_populates="fetched_content")

    # Not unique: duplicates are prevented by a lookup before insert
    __table_args__ = (
        Index("ix_fetched_content_source_hash", "source_id", "content_hash"),
    )

    def __repr__(self) -> str:
        return f"<FetchedContent(id={self.id}, source_id={self.source_id}, status='{self.status}')>"


# =============================================================================
# Keyword Model
# =============================================================================


class Keyword(Base):
    """A literal term matched against fetched text."""

    __tablename__ = "keywords"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    keyword: Mapped[str] = mapped_column(String(200), nullable=False)
    category: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Keyword(keyword='{self.keyword}', category='{self.category}')>"


# =============================================================================
# Lead Model
# =============================================================================


class Lead(Base):
    """A detected buyer-intent signal."""

    __tablename__ = "leads"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    # Not unique: one lead per content item is enforced by a lookup before insert
    fetched_content_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("fetched_content.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    source_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("sources.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    source_url: Mapped[str] = mapped_column(String(2000), nullable=False)
    matched_keywords: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    snippet: Mapped[str] = mapped_column(Text, nullable=False)
    confidence_score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="new", index=True)
    notified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        nullable=False,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<Lead(id={self.id}, score={self.confidence_score}, status='{self.status}')>"


# =============================================================================
# Alert Settings Model
# =============================================================================


class AlertSettings(Base, TimestampMixin):
    """Notification preferences for one admin user."""

    __tablename__ = "alert_settings"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    email_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    email_address: Mapped[str | None] = mapped_column(String(320), nullable=True)
    whatsapp_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    whatsapp_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    in_app_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    def __repr__(self) -> str:
        return f"<AlertSettings(user_id='{self.user_id}')>"


# =============================================================================
# Notification Model
# =============================================================================


class Notification(Base):
    """In-app notification shown to one user."""

    __tablename__ = "notifications"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    lead_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("leads.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str] = mapped_column(String(50), nullable=False, default="lead")
    read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Notification(user_id='{self.user_id}', lead_id={self.lead_id})>"


# =============================================================================
# User Role Model
# =============================================================================


class UserRole(Base):
    """Role assignment for a principal."""

    __tablename__ = "user_roles"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    role: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<UserRole(user_id='{self.user_id}', role='{self.role}')>"
