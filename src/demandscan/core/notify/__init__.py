"""Notification channels and fan-out."""

from .base import EmailSender, LeadSummary, RoleLookup, leads_label
from .email import ResendEmailSender, build_email_html, build_email_subject
from .fanout import (
    DatabaseRoleLookup,
    FanoutResult,
    NotificationFanout,
    ResolvedAlertSettings,
    WhatsAppLink,
)
from .whatsapp import build_whatsapp_link, build_whatsapp_message

__all__ = [
    "EmailSender",
    "LeadSummary",
    "RoleLookup",
    "leads_label",
    "ResendEmailSender",
    "build_email_html",
    "build_email_subject",
    "DatabaseRoleLookup",
    "FanoutResult",
    "NotificationFanout",
    "ResolvedAlertSettings",
    "WhatsAppLink",
    "build_whatsapp_link",
    "build_whatsapp_message",
]
