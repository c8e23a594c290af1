"""
WhatsApp deep links.

Messages are never sent from the server; the link is returned to the
caller and opened by a person.
"""

from __future__ import annotations

import re
from typing import Sequence
from urllib.parse import quote

from .base import LeadSummary, leads_label

_NON_DIGITS = re.compile(r"\D")


def build_whatsapp_message(
    leads: Sequence[LeadSummary],
    max_leads: int = 3,
    max_keywords: int = 3,
) -> str:
    """Summarize the first max_leads leads plus an overflow count."""
    header = f"{leads_label(len(leads))} Detected!\n\n"
    entries = [
        f"{i}. Keywords: {', '.join(lead.matched_keywords[:max_keywords])}\nSource: {lead.source_url}"
        for i, lead in enumerate(leads[:max_leads], start=1)
    ]
    message = header + "\n\n".join(entries)

    overflow = len(leads) - max_leads
    if overflow > 0:
        message += f"\n\n...and {overflow} more leads"

    return message


def build_whatsapp_link(number: str, message: str, base_url: str = "https://wa.me") -> str:
    """Pre-filled chat link; non-digits are stripped from the number."""
    digits = _NON_DIGITS.sub("", number)
    return f"{base_url.rstrip('/')}/{digits}?text={quote(message, safe='')}"
