"""Configuration loading and validation."""

from .models import (
    # Enums
    SourceType,
    FetchStatus,
    KeywordCategory,
    LeadStatus,
    UserRoleName,
    # Config models
    AppConfig,
    ApiConfig,
    CrawlerConfig,
    DatabaseConfig,
    DetectionConfig,
    EmailConfig,
    LoggingConfig,
    NotificationsConfig,
    WhatsAppConfig,
)
from .loader import DEFAULT_APP_YAML, load_app_config, validate_app_config_file

__all__ = [
    # Enums
    "SourceType",
    "FetchStatus",
    "KeywordCategory",
    "LeadStatus",
    "UserRoleName",
    # Config models
    "AppConfig",
    "ApiConfig",
    "CrawlerConfig",
    "DatabaseConfig",
    "DetectionConfig",
    "EmailConfig",
    "LoggingConfig",
    "NotificationsConfig",
    "WhatsAppConfig",
    # Loaders
    "DEFAULT_APP_YAML",
    "load_app_config",
    "validate_app_config_file",
]
