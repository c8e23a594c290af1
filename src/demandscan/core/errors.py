"""
Exception hierarchy for DemandScan.
"""

from __future__ import annotations


class DemandScanError(Exception):
    """Base class for all DemandScan errors."""


class ConfigError(DemandScanError):
    """Configuration loading or validation error."""

    def __init__(self, message: str, path: object | None = None, details: str | None = None):
        self.path = path
        self.details = details
        super().__init__(message)


class StorageError(DemandScanError):
    """A read or write against the store failed."""

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause


class NotificationError(DemandScanError):
    """A notification channel failed to deliver."""

    def __init__(self, message: str, channel: str, cause: Exception | None = None):
        super().__init__(message)
        self.channel = channel
        self.cause = cause
