"""
Pydantic configuration models for DemandScan.

These models provide type-safe configuration with validation for:
- Database and logging settings
- Crawler politeness (robots.txt, rate limit, user agent)
- Lead detection scoring
- Notification channels
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field, field_validator


# =============================================================================
# Enums
# =============================================================================


class SourceType(str, Enum):
    """Classification tag for a monitored source."""

    FORUM = "forum"
    LISTING = "listing"
    GROUP = "group"
    WEBSITE = "website"


class FetchStatus(str, Enum):
    """Outcome of a single crawl attempt."""

    SUCCESS = "success"
    FAILED = "failed"
    SKIPPED = "skipped"  # reported only, never persisted


class KeywordCategory(str, Enum):
    """Keyword categories. LOCATION is stored but not matched."""

    PRODUCT = "product"
    INTENT = "intent"
    LOCATION = "location"


class LeadStatus(str, Enum):
    """Operator workflow status of a lead."""

    NEW = "new"
    CONTACTED = "contacted"
    CONVERTED = "converted"
    DISMISSED = "dismissed"

    def can_transition_to(self, target: "LeadStatus") -> bool:
        """Check whether an operator may move a lead from this status to target."""
        return target in _LEAD_TRANSITIONS[self]


_LEAD_TRANSITIONS: dict[LeadStatus, frozenset[LeadStatus]] = {
    LeadStatus.NEW: frozenset({LeadStatus.CONTACTED, LeadStatus.DISMISSED}),
    LeadStatus.CONTACTED: frozenset({LeadStatus.CONVERTED, LeadStatus.DISMISSED}),
    LeadStatus.CONVERTED: frozenset(),
    LeadStatus.DISMISSED: frozenset(),
}


class UserRoleName(str, Enum):
    """Roles known to the role-assignment store."""

    ADMIN = "admin"
    USER = "user"


# =============================================================================
# Crawler Configuration
# =============================================================================


class CrawlerConfig(BaseModel):
    """Politeness and extraction settings for the crawl pass."""

    user_agent: str = Field(
        default="DemandScanBot/1.0 (respectful-bot)",
        description="User-Agent header sent with every request",
    )
    robots_agent_token: str = Field(
        default="demandscan",
        min_length=1,
        description="Token matched (substring) against robots.txt User-agent lines",
    )
    robots_fail_open: bool = Field(
        default=True,
        description="Allow crawling when robots.txt cannot be retrieved",
    )
    rate_limit_ms: int = Field(
        default=3000,
        ge=0,
        description="Fixed delay after each source, in milliseconds",
    )
    timeout_seconds: float | None = Field(
        default=30.0,
        gt=0,
        description="Per-request timeout; null disables the timeout",
    )
    max_text_chars: int = Field(
        default=100_000,
        ge=1,
        description="Hard cap on extracted text length",
    )
    min_text_chars: int = Field(
        default=50,
        ge=0,
        description="Extracted text shorter than this counts as no content",
    )

    @field_validator("robots_agent_token")
    @classmethod
    def lowercase_token(cls, v: str) -> str:
        """robots.txt lines are compared lowercased."""
        return v.strip().lower()


# =============================================================================
# Detection Configuration
# =============================================================================


class DetectionConfig(BaseModel):
    """Lead scoring settings."""

    score_per_match: int = Field(
        default=15,
        ge=1,
        description="Confidence points per matched keyword",
    )
    max_score: int = Field(
        default=100,
        ge=1,
        le=100,
        description="Confidence score cap",
    )
    snippet_context_chars: int = Field(
        default=150,
        ge=0,
        description="Characters of context on each side of the snippet keyword",
    )


# =============================================================================
# Notification Configuration
# =============================================================================


class EmailConfig(BaseModel):
    """Outbound email settings (Resend HTTP API)."""

    api_key: str | None = Field(
        default=None,
        description="Resend API key; email channel is skipped when unset",
    )
    api_url: str = Field(
        default="https://api.resend.com/emails",
        description="Resend send-email endpoint",
    )
    from_address: str = Field(
        default="Lead Alerts <alerts@demandscan.local>",
        description="Sender shown on alert emails",
    )
    timeout_seconds: float = Field(default=15.0, gt=0)

    @field_validator("api_key")
    @classmethod
    def blank_is_none(cls, v: str | None) -> str | None:
        """An env-expanded empty string means no key."""
        if v is not None and not v.strip():
            return None
        return v


class WhatsAppConfig(BaseModel):
    """WhatsApp deep-link settings."""

    base_url: str = Field(default="https://wa.me")
    max_leads_in_message: int = Field(default=3, ge=1)
    max_keywords_per_lead: int = Field(default=3, ge=1)


class NotificationsConfig(BaseModel):
    """Notification channel settings."""

    email: EmailConfig = Field(default_factory=EmailConfig)
    whatsapp: WhatsAppConfig = Field(default_factory=WhatsAppConfig)


# =============================================================================
# Database / Logging / API Configuration
# =============================================================================


class DatabaseConfig(BaseModel):
    """Database connection settings."""

    url: str = Field(
        default="sqlite:///data/demandscan.db",
        description="SQLAlchemy database URL",
    )
    echo: bool = Field(
        default=False,
        description="Echo SQL statements (debugging)",
    )


class LoggingConfig(BaseModel):
    """Logging settings."""

    level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR)",
    )
    file: Path | None = Field(
        default=Path("logs/demandscan.log"),
        description="Log file path",
    )
    json_format: bool = Field(
        default=True,
        description="Use JSON format for file logs",
    )
    rich_console: bool = Field(
        default=True,
        description="Use Rich for console output",
    )


class ApiConfig(BaseModel):
    """HTTP server settings."""

    host: str = Field(default="127.0.0.1")
    port: int = Field(default=8000, ge=1, le=65535)


# =============================================================================
# Application Configuration
# =============================================================================


class AppConfig(BaseModel):
    """Root application configuration.

    This is the main configuration object loaded from app.yaml.
    """

    data_dir: Path = Field(
        default=Path("data"),
        description="Data storage directory",
    )

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    crawler: CrawlerConfig = Field(default_factory=CrawlerConfig)
    detection: DetectionConfig = Field(default_factory=DetectionConfig)
    notifications: NotificationsConfig = Field(default_factory=NotificationsConfig)
    api: ApiConfig = Field(default_factory=ApiConfig)

    def ensure_directories(self) -> None:
        """Create required directories if they don't exist."""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        if self.logging.file:
            self.logging.file.parent.mkdir(parents=True, exist_ok=True)
