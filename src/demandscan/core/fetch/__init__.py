"""Fetch utilities - robots.txt policy, throttling, page fetcher."""

from .fetcher import (
    BLOCKED_BY_ROBOTS,
    NO_MEANINGFUL_CONTENT,
    ContentFetcher,
    FetchOutcome,
)
from .robots import RobotsDecision, RobotsPolicy, evaluate_robots_txt, robots_url_for
from .throttling import RateLimitConfig, RateLimiter

__all__ = [
    "BLOCKED_BY_ROBOTS",
    "NO_MEANINGFUL_CONTENT",
    "ContentFetcher",
    "FetchOutcome",
    "RobotsDecision",
    "RobotsPolicy",
    "evaluate_robots_txt",
    "robots_url_for",
    "RateLimitConfig",
    "RateLimiter",
]
