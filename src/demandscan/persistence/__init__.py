"""Database persistence layer."""

from .db import get_engine, get_session, init_db
from .models import (
    AlertSettings,
    Base,
    FetchedContent,
    Keyword,
    Lead,
    Notification,
    Source,
    UserRole,
)
from .repo import (
    AlertSettingsRepository,
    FetchedContentRepository,
    KeywordRepository,
    LeadRepository,
    NewLead,
    NotificationRepository,
    RoleRepository,
    SourceRepository,
)

__all__ = [
    "get_engine",
    "get_session",
    "init_db",
    "Base",
    "AlertSettings",
    "FetchedContent",
    "Keyword",
    "Lead",
    "Notification",
    "Source",
    "UserRole",
    "AlertSettingsRepository",
    "FetchedContentRepository",
    "KeywordRepository",
    "LeadRepository",
    "NewLead",
    "NotificationRepository",
    "RoleRepository",
    "SourceRepository",
]
