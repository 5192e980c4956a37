"""Customer-facing email and SMS messages, plus the shop-owner order alert.

Most messages are best effort: a delivery failure is logged and swallowed so
the request that triggered it still succeeds. ``send_contact_message`` and
``send_password_reset`` propagate failures because their callers report
delivery to the client.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

from app.core.config import get_settings
from app.core.email import EmailDeliveryError, send_email
from app.core.sms import SmsDeliveryError, send_sms

logger = logging.getLogger("app.notifications")

SIGNATURE = "Best regards,\nRomofete Team"


def _deliver_email(event: str, subject: str, body: str, to: str) -> None:
    try:
        send_email(subject, body, [to])
    except EmailDeliveryError as exc:
        logger.error("email_dispatch_failed", extra={"event": event, "to": to, "error": str(exc)})


def _deliver_sms(event: str, phone: Optional[str], message: str) -> None:
    if not phone:
        return
    try:
        send_sms(phone, message)
    except SmsDeliveryError as exc:
        logger.error("sms_dispatch_failed", extra={"event": event, "phone": phone, "error": str(exc)})


def send_user_welcome(username: str, email: str, role: str, phone: Optional[str]) -> None:
    _deliver_sms("user_welcome", phone, "Registration successful! Welcome to Romofete.")
    body = (
        f"Dear {username},\n\n"
        "Your registration was successful! Welcome to Romofete.\n\n"
        f"Username: {username}\nEmail: {email}\nRole: {role}\n\n"
        "You can now log in and start managing your orders.\n\n"
        f"{SIGNATURE}"
    )
    _deliver_email("user_welcome", "Welcome to Romofete!", body, email)


def send_customer_verification(name: str, email: str, code: str, phone: Optional[str] = None) -> None:
    body = (
        f"Dear {name},\n\n"
        f"Your Romofete verification code is {code}.\n"
        "The code expires in 2 days.\n\n"
        f"{SIGNATURE}"
    )
    _deliver_email("customer_verification", "Verify your Romofete account", body, email)
    _deliver_sms(
        "customer_verification",
        phone,
        "Registration successful! Please check your email to verify your account.",
    )


def send_password_reset(name: str, email: str, code: str) -> None:
    body = (
        f"Dear {name},\n\n"
        f"Use the code {code} to reset your Romofete password.\n"
        "The code expires in 24 hours. If you did not ask for a reset, ignore this email.\n\n"
        f"{SIGNATURE}"
    )
    send_email("Reset your Romofete password", body, [email])


def send_password_changed(name: str, email: str) -> None:
    body = (
        f"Dear {name},\n\n"
        f"The password for {email} was changed successfully.\n"
        "If this was not you, contact us immediately.\n\n"
        f"{SIGNATURE}"
    )
    _deliver_email("password_changed", "Your Romofete password was changed", body, email)


def send_order_status_update(
    reference: str,
    previous_status: str,
    new_status: str,
    customer_name: Optional[str],
    email: Optional[str],
    phone: Optional[str],
) -> None:
    _deliver_sms(
        "order_status_update",
        phone,
        f"Your order ({reference}) status has been updated to: {new_status}.",
    )
    if not email:
        return
    body = (
        f"Dear {customer_name or 'Customer'},\n\n"
        f"Your order ({reference}) status has been updated to: {new_status.capitalize()}.\n"
        f"Previous status: {previous_status}\n\n"
        "Thank you for choosing Romofete!\n\n"
        f"{SIGNATURE}"
    )
    _deliver_email("order_status_update", f"Order Status Update - {reference}", body, email)


def send_contact_message(name: str, email: str, company: Optional[str], message: str) -> None:
    settings = get_settings()
    recipient = settings.contact_recipient or settings.smtp_sender
    if not recipient:
        raise EmailDeliveryError("Contact recipient is not configured")
    body = (
        "New contact form submission\n\n"
        f"Name: {name}\n"
        f"Email: {email}\n"
        f"Company: {company or 'N/A'}\n\n"
        f"Message:\n{message}\n"
    )
    if not send_email(f"New Contact Form Submission from {name}", body, [recipient]):
        raise EmailDeliveryError("Email delivery is not configured")
    logger.info("contact_message_sent", extra={"sender": email})


def _field_label(name: str) -> str:
    return " ".join(word.capitalize() for word in name.split("_"))


def send_personalized_order_notification(order_id: int, product_type: str, details: Dict[str, Any]) -> None:
    """Tell the shop owner about a new personalized order; skipped when no recipient is configured."""
    settings = get_settings()
    recipient = settings.contact_recipient or settings.smtp_sender
    if not recipient:
        logger.warning("personalized_order_notification_skipped", extra={"order_id": order_id})
        return
    lines = []
    for name, value in details.items():
        if value is None:
            value = "N/A"
        elif isinstance(value, (dict, list)):
            value = "\n" + json.dumps(value, indent=2)
        lines.append(f"{_field_label(name)}: {value}")
    body = (
        "New Personalized Order Received\n\n"
        f"Order ID: {order_id}\n\n"
        "Order Details:\n" + "\n".join(lines) + "\n\n"
        "---\nThis order was submitted via the Romofete personalized orders system."
    )
    _deliver_email(
        "personalized_order_created",
        f"New Personalized Order #{order_id} - {product_type}",
        body,
        recipient,
    )
