"""
Email alerts sent through the Resend HTTP API.
"""

from __future__ import annotations

import html as html_lib
import logging
from typing import Sequence

import httpx

from demandscan.core.config.models import EmailConfig
from demandscan.core.errors import NotificationError

from .base import LeadSummary, leads_label

logger = logging.getLogger(__name__)


def build_email_subject(leads: Sequence[LeadSummary]) -> str:
    return f"{leads_label(len(leads))} Detected!"


def build_email_html(leads: Sequence[LeadSummary]) -> str:
    """Render one aggregated alert covering every lead of the run."""
    items = []
    for lead in leads:
        url = html_lib.escape(lead.source_url, quote=True)
        items.append(
            "<li>"
            f"<strong>Keywords:</strong> {html_lib.escape(', '.join(lead.matched_keywords))}<br/>"
            f'<strong>Source:</strong> <a href="{url}">{url}</a><br/>'
            f"<strong>Snippet:</strong> {html_lib.escape(lead.snippet)}"
            "</li>"
        )

    count = len(leads)
    noun = "lead" if count == 1 else "leads"
    return (
        "<h1>New Buyer Intent Signals Detected</h1>"
        f"<p>The demand scanner found {count} potential {noun}:</p>"
        f"<ul>{''.join(items)}</ul>"
        "<p>Log in to your admin dashboard to review these leads.</p>"
    )


class ResendEmailSender:
    """EmailSender backed by the Resend REST API."""

    def __init__(
        self,
        api_key: str,
        from_address: str,
        api_url: str = "https://api.resend.com/emails",
        timeout: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key
        self.from_address = from_address
        self.api_url = api_url
        self.timeout = timeout
        self.transport = transport

    @classmethod
    def from_config(cls, config: EmailConfig) -> "ResendEmailSender | None":
        """Build a sender, or None when no API key is configured."""
        if not config.api_key:
            return None
        return cls(
            api_key=config.api_key,
            from_address=config.from_address,
            api_url=config.api_url,
            timeout=config.timeout_seconds,
        )

    async def send(self, to: str, subject: str, html: str) -> None:
        payload = {
            "from": self.from_address,
            "to": [to],
            "subject": subject,
            "html": html,
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(self.api_url, json=payload, headers=headers)
        except httpx.HTTPError as e:
            raise NotificationError(f"Email request failed: {e}", channel="email", cause=e) from e

        if response.status_code >= 400:
            raise NotificationError(
                f"Email API returned HTTP {response.status_code}: {response.text[:200]}",
                channel="email",
            )

        logger.debug("Email accepted by provider for %s", to)
