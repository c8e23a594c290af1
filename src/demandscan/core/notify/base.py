"""
Notification capabilities consumed by the fan-out.

Both are optional: a missing email sender skips the email channel, and a
failing role lookup yields no admins.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence


@dataclass
class LeadSummary:
    """The lead fields notifications need."""

    id: str
    source_url: str
    matched_keywords: list[str]
    snippet: str
    confidence_score: int | None = None

    @classmethod
    def from_lead(cls, lead) -> "LeadSummary":
        return cls(
            id=lead.id,
            source_url=lead.source_url,
            matched_keywords=list(lead.matched_keywords or []),
            snippet=lead.snippet,
            confidence_score=lead.confidence_score,
        )


def leads_label(count: int) -> str:
    """'1 New Lead' / '3 New Leads'."""
    return f"{count} New Lead{'s' if count != 1 else ''}"


class EmailSender(Protocol):
    """Outbound email capability."""

    async def send(self, to: str, subject: str, html: str) -> None:
        """Send one email.

        Raises:
            NotificationError: If delivery fails
        """
        ...


class RoleLookup(Protocol):
    """Resolves principals holding a role."""

    def principals(self, role: str) -> Sequence[str]:
        ...
