from __future__ import annotations

import logging
import smtplib
from email.message import EmailMessage
from typing import Iterable, Optional

from app.core.config import get_settings

logger = logging.getLogger("app.email")


class EmailDeliveryError(Exception):
    """Raised when the SMTP server rejects or cannot take a message."""


def send_email(subject: str, body: str, to: Iterable[str], html: Optional[str] = None) -> bool:
    """Send a plain-text email, with an optional HTML alternative.

    Returns False without sending when SMTP is not configured.
    """
    settings = get_settings()
    recipients = list(to)
    if not settings.smtp_host or not settings.smtp_sender:
        logger.warning("smtp_not_configured", extra={"subject": subject, "to": recipients})
        return False

    msg = EmailMessage()
    msg["Subject"] = subject
    msg["From"] = settings.smtp_sender
    msg["To"] = ", ".join(recipients)
    msg.set_content(body)
    if html:
        msg.add_alternative(html, subtype="html")

    try:
        with smtplib.SMTP(settings.smtp_host, settings.smtp_port, timeout=10) as server:
            if settings.smtp_use_tls:
                server.starttls()
            if settings.smtp_username and settings.smtp_password:
                server.login(settings.smtp_username, settings.smtp_password)
            server.send_message(msg)
    except (smtplib.SMTPException, OSError) as exc:
        raise EmailDeliveryError(f"Failed to send email: {exc}") from exc

    logger.info("email_sent", extra={"subject": subject, "to": recipients})
    return True
