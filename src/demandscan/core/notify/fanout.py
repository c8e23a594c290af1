"""
Per-admin notification fan-out for newly inserted leads.

Each admin is processed independently with their own alert settings.
After an admin is processed the new leads are flagged as notified,
whether or not every channel delivered.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from demandscan.core.config.models import UserRoleName, WhatsAppConfig
from demandscan.core.errors import NotificationError
from demandscan.core.logging import get_logger
from demandscan.persistence.repo import (
    AlertSettingsRepository,
    LeadRepository,
    NotificationRepository,
    RoleRepository,
)

from .base import EmailSender, LeadSummary, RoleLookup
from .email import build_email_html, build_email_subject
from .whatsapp import build_whatsapp_link, build_whatsapp_message

logger = get_logger("notify")

IN_APP_TITLE = "New Lead Detected!"


@dataclass
class ResolvedAlertSettings:
    """Alert preferences with defaults applied for users without a row."""

    user_id: str
    email_enabled: bool = False
    email_address: str | None = None
    whatsapp_enabled: bool = False
    whatsapp_number: str | None = None
    in_app_enabled: bool = True

    @classmethod
    def from_row(cls, user_id: str, row) -> "ResolvedAlertSettings":
        if row is None:
            return cls(user_id=user_id)
        return cls(
            user_id=user_id,
            email_enabled=row.email_enabled,
            email_address=row.email_address,
            whatsapp_enabled=row.whatsapp_enabled,
            whatsapp_number=row.whatsapp_number,
            in_app_enabled=row.in_app_enabled,
        )


@dataclass
class WhatsAppLink:
    number: str
    link: str

    def to_dict(self) -> dict[str, str]:
        return {"number": self.number, "link": self.link}


@dataclass
class FanoutResult:
    """What the fan-out did."""

    admins: int = 0
    notifications_created: int = 0
    emails_sent: int = 0
    email_failures: int = 0
    whatsapp_links: list[WhatsAppLink] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "admins": self.admins,
            "notifications_created": self.notifications_created,
            "emails_sent": self.emails_sent,
            "email_failures": self.email_failures,
            "whatsapp_links": [link.to_dict() for link in self.whatsapp_links],
        }


class DatabaseRoleLookup:
    """RoleLookup over the user_roles table."""

    def __init__(self, session: Session):
        self.repo = RoleRepository(session)

    def principals(self, role: str) -> list[str]:
        return self.repo.principals(UserRoleName(role))


def in_app_message(lead: LeadSummary, max_keywords: int = 3) -> str:
    return f"Found buyer intent: {', '.join(lead.matched_keywords[:max_keywords])}"


class NotificationFanout:
    """Dispatches in-app, email and WhatsApp-link notifications."""

    def __init__(
        self,
        session: Session,
        *,
        email_sender: EmailSender | None = None,
        role_lookup: RoleLookup | None = None,
        whatsapp: WhatsAppConfig | None = None,
    ):
        self.session = session
        self.email_sender = email_sender
        self.role_lookup = role_lookup or DatabaseRoleLookup(session)
        self.whatsapp = whatsapp or WhatsAppConfig()

        self.settings_repo = AlertSettingsRepository(session)
        self.notification_repo = NotificationRepository(session)
        self.lead_repo = LeadRepository(session)

    def _admin_ids(self, result: FanoutResult) -> list[str]:
        try:
            return list(self.role_lookup.principals(UserRoleName.ADMIN.value))
        except (SQLAlchemyError, LookupError) as e:
            logger.error("Error fetching admins: %s", e)
            result.errors.append(f"Admin lookup failed: {e}")
            return []

    async def dispatch(self, leads: Sequence[LeadSummary]) -> FanoutResult:
        """Notify every admin about leads.

        Args:
            leads: Leads inserted by the current run

        Returns:
            FanoutResult including WhatsApp links to surface to the caller
        """
        result = FanoutResult()
        if not leads:
            return result

        lead_ids = [lead.id for lead in leads]
        admin_ids = self._admin_ids(result)
        result.admins = len(admin_ids)

        for admin_id in admin_ids:
            try:
                await self._notify_admin(admin_id, leads, result)
            except SQLAlchemyError as e:
                self.session.rollback()
                logger.error(
                    "Failed to notify %s: %s", admin_id, e, extra={"user_id": admin_id}
                )
                result.errors.append(f"Notifying {admin_id} failed: {e}")

            self._mark_notified(admin_id, lead_ids, result)

        return result

    async def _notify_admin(
        self,
        admin_id: str,
        leads: Sequence[LeadSummary],
        result: FanoutResult,
    ) -> None:
        settings = ResolvedAlertSettings.from_row(admin_id, self.settings_repo.get_for_user(admin_id))

        if settings.in_app_enabled:
            self._notify_in_app(settings, leads, result)

        if settings.email_enabled and settings.email_address and self.email_sender:
            await self._notify_email(
                self.email_sender, settings.email_address, admin_id, leads, result
            )

        if settings.whatsapp_enabled and settings.whatsapp_number:
            result.whatsapp_links.append(self._whatsapp_link(settings.whatsapp_number, leads))

    def _notify_in_app(
        self,
        settings: ResolvedAlertSettings,
        leads: Sequence[LeadSummary],
        result: FanoutResult,
    ) -> None:
        for lead in leads:
            try:
                self.notification_repo.create(
                    user_id=settings.user_id,
                    lead_id=lead.id,
                    title=IN_APP_TITLE,
                    message=in_app_message(lead),
                    type="lead",
                )
                self.session.commit()
                result.notifications_created += 1
            except SQLAlchemyError as e:
                self.session.rollback()
                logger.error(
                    "Failed to create notification for %s: %s",
                    settings.user_id,
                    e,
                    extra={"user_id": settings.user_id, "lead_id": lead.id},
                )
                result.errors.append(f"Notification insert failed: {e}")

    async def _notify_email(
        self,
        sender: EmailSender,
        address: str,
        user_id: str,
        leads: Sequence[LeadSummary],
        result: FanoutResult,
    ) -> None:
        try:
            await sender.send(
                address,
                build_email_subject(leads),
                build_email_html(leads),
            )
            result.emails_sent += 1
            logger.info("Email sent to %s", address, extra={"channel": "email"})
        except NotificationError as e:
            result.email_failures += 1
            result.errors.append(str(e))
            logger.error(
                "Failed to send email to %s: %s",
                address,
                e,
                extra={"channel": "email", "user_id": user_id},
            )
        except Exception as e:
            result.email_failures += 1
            result.errors.append(f"Email to {address} failed: {e}")
            logger.exception(
                "Unexpected error sending email to %s",
                address,
                extra={"channel": "email", "user_id": user_id},
            )

    def _whatsapp_link(self, number: str, leads: Sequence[LeadSummary]) -> WhatsAppLink:
        message = build_whatsapp_message(
            leads,
            max_leads=self.whatsapp.max_leads_in_message,
            max_keywords=self.whatsapp.max_keywords_per_lead,
        )
        return WhatsAppLink(
            number=number,
            link=build_whatsapp_link(number, message, base_url=self.whatsapp.base_url),
        )

    def _mark_notified(self, admin_id: str, lead_ids: list[str], result: FanoutResult) -> None:
        try:
            self.lead_repo.mark_notified(lead_ids)
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error("Failed to mark leads notified after %s: %s", admin_id, e)
            result.errors.append(f"Mark notified failed: {e}")
