"""
Convenience entry points used by the CLI and the HTTP app.
"""

from __future__ import annotations

from demandscan.core.config.models import AppConfig
from demandscan.core.notify.email import ResendEmailSender
from demandscan.persistence.db import get_engine, get_session

from .crawl import CrawlRunner, CrawlSummary
from .detection import DetectionRunner, DetectionSummary


def build_email_sender(config: AppConfig) -> ResendEmailSender | None:
    """Email sender for the configured provider, or None if email is off."""
    return ResendEmailSender.from_config(config.notifications.email)


async def run_crawl(config: AppConfig) -> CrawlSummary:
    """Run one crawl pass against the configured database."""
    get_engine(config.database.url, echo=config.database.echo)

    with get_session() as session:
        return await CrawlRunner(session, config.crawler).run()


async def run_detection(config: AppConfig) -> DetectionSummary:
    """Run one detection pass against the configured database."""
    get_engine(config.database.url, echo=config.database.echo)

    with get_session() as session:
        runner = DetectionRunner(
            session,
            config.detection,
            email_sender=build_email_sender(config),
            whatsapp=config.notifications.whatsapp,
        )
        return await runner.run()
