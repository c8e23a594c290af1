"""Fetching backends."""

from .base import Backend, BackendError, FetchError, FetchResult, RequestSpec
from .http_backend import DEFAULT_USER_AGENT, HttpBackend

__all__ = [
    "Backend",
    "BackendError",
    "FetchError",
    "FetchResult",
    "RequestSpec",
    "HttpBackend",
    "DEFAULT_USER_AGENT",
]
