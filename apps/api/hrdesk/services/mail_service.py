from __future__ import annotations

from dataclasses import dataclass
import logging
import smtplib
from email.message import EmailMessage

from email_validator import validate_email, EmailNotValidError

from ..core.config import settings
from ..db import SessionLocal
from ..models.mail_log import MailLog

logger = logging.getLogger(__name__)


@dataclass
class MailPayload:
    event_type: str
    subject: str
    body_html: str
    body_text: str
    recipient_email: str


def _is_smtp_ready() -> bool:
    return bool(settings.smtp_host and settings.smtp_from)


def _validate_email(addr: str) -> str | None:
    if not addr:
        return None
    try:
        return validate_email(addr, check_deliverability=False).normalized
    except EmailNotValidError:
        return None


def _build_message(payload: MailPayload) -> EmailMessage:
    msg = EmailMessage()
    msg["Subject"] = payload.subject
    msg["From"] = f"HR Desk <{settings.smtp_from}>"
    msg["To"] = payload.recipient_email
    msg.set_content(payload.body_text)
    msg.add_alternative(payload.body_html, subtype="html")
    return msg


def _send_message(payload: MailPayload) -> None:
    msg = _build_message(payload)
    with smtplib.SMTP(settings.smtp_host, settings.smtp_port, timeout=10) as smtp:
        if settings.smtp_user:
            smtp.starttls()
            smtp.login(settings.smtp_user, settings.smtp_password)
        smtp.send_message(msg)


def _record(payload: MailPayload, status: str, error_message: str | None = None) -> None:
    with SessionLocal() as session:
        session.add(
            MailLog(
                event_type=payload.event_type,
                recipient_email=payload.recipient_email,
                subject=payload.subject,
                body_text=payload.body_text,
                body_html=payload.body_html,
                status=status,
                error_message=error_message,
            )
        )
        session.commit()


def send_mail(payload: MailPayload) -> str:
    """Send once, best effort. Returns the recorded status; never raises."""
    normalized = _validate_email(payload.recipient_email)
    if not normalized:
        logger.info("invalid recipient, mail skipped: event=%s", payload.event_type)
        _record(payload, "skipped", "invalid recipient address")
        return "skipped"
    payload.recipient_email = normalized

    if not _is_smtp_ready():
        logger.info("SMTP not configured, mail skipped: event=%s to=%s", payload.event_type, normalized)
        _record(payload, "skipped", "SMTP not configured")
        return "skipped"

    try:
        _send_message(payload)
    except (smtplib.SMTPException, OSError) as exc:
        logger.warning("mail send failed: event=%s to=%s", payload.event_type, normalized, exc_info=True)
        _record(payload, "failed", str(exc))
        return "failed"

    logger.info("mail sent: event=%s to=%s", payload.event_type, normalized)
    _record(payload, "sent")
    return "sent"
