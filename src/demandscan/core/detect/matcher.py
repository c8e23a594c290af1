"""
Keyword matching and lead scoring.

A text qualifies as a lead only when it mentions at least one product
keyword AND at least one intent keyword. Matching is case-insensitive
substring containment; location keywords are not used.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Protocol

from demandscan.core.config.models import DetectionConfig, KeywordCategory

from .snippet import extract_snippet


class KeywordLike(Protocol):
    keyword: str
    category: str


class ContentLike(Protocol):
    id: str
    source_id: str | None
    source_url: str
    raw_text: str | None


@dataclass
class KeywordSets:
    """Lowercased product and intent keywords in load order."""

    product: list[str] = field(default_factory=list)
    intent: list[str] = field(default_factory=list)

    @classmethod
    def from_keywords(cls, keywords: Iterable[KeywordLike]) -> "KeywordSets":
        sets = cls()
        for kw in keywords:
            term = kw.keyword.strip().lower()
            if not term:
                continue
            if kw.category == KeywordCategory.PRODUCT.value:
                sets.product.append(term)
            elif kw.category == KeywordCategory.INTENT.value:
                sets.intent.append(term)
        return sets

    @property
    def empty(self) -> bool:
        return not self.product and not self.intent


@dataclass
class MatchResult:
    """Keywords found in one text."""

    products: list[str]
    intents: list[str]

    @property
    def qualifies(self) -> bool:
        return bool(self.products) and bool(self.intents)

    @property
    def all_matched(self) -> list[str]:
        return [*self.products, *self.intents]

    @property
    def match_count(self) -> int:
        return len(self.products) + len(self.intents)


@dataclass
class LeadCandidate:
    """A scored lead not yet persisted."""

    fetched_content_id: str
    source_id: str | None
    source_url: str
    matched_keywords: list[str]
    snippet: str
    confidence_score: int


def confidence_score(match_count: int, per_match: int = 15, cap: int = 100) -> int:
    """Linear score per matched keyword, capped."""
    return min(cap, per_match * match_count)


class KeywordMatcher:
    """Scans texts for product/intent keywords and builds lead candidates."""

    def __init__(self, keywords: KeywordSets, config: DetectionConfig | None = None):
        self.keywords = keywords
        self.config = config or DetectionConfig()

    def match(self, text: str) -> MatchResult:
        lowered = text.lower()
        return MatchResult(
            products=[kw for kw in self.keywords.product if kw in lowered],
            intents=[kw for kw in self.keywords.intent if kw in lowered],
        )

    def score(self, result: MatchResult) -> int:
        return confidence_score(
            result.match_count,
            per_match=self.config.score_per_match,
            cap=self.config.max_score,
        )

    def evaluate(self, content: ContentLike) -> LeadCandidate | None:
        """Build a candidate for one content item, or None if it does not qualify."""
        if not content.raw_text:
            return None

        result = self.match(content.raw_text)
        if not result.qualifies:
            return None

        return LeadCandidate(
            fetched_content_id=content.id,
            source_id=content.source_id,
            source_url=content.source_url,
            matched_keywords=result.all_matched,
            snippet=extract_snippet(
                content.raw_text,
                result.products[0],
                context_chars=self.config.snippet_context_chars,
            ),
            confidence_score=self.score(result),
        )

    def scan(self, contents: Iterable[ContentLike]) -> list[LeadCandidate]:
        """Evaluate every content item; keeps input order."""
        candidates = []
        for content in contents:
            candidate = self.evaluate(content)
            if candidate is not None:
                candidates.append(candidate)
        return candidates
