"""Keyword matching and lead scoring."""

from .matcher import (
    KeywordMatcher,
    KeywordSets,
    LeadCandidate,
    MatchResult,
    confidence_score,
)
from .snippet import extract_snippet

__all__ = [
    "KeywordMatcher",
    "KeywordSets",
    "LeadCandidate",
    "MatchResult",
    "confidence_score",
    "extract_snippet",
]
