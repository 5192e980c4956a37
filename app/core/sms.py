from __future__ import annotations

import logging

import requests

from app.core.config import get_settings

logger = logging.getLogger("app.sms")


class SmsDeliveryError(Exception):
    """Raised when the SMS gateway refuses a message."""


def normalize_phone(phone: str) -> str:
    """Convert local numbers (0XXXXXXXXX) and +233 numbers to 233XXXXXXXXX."""
    phone = phone.strip().replace(" ", "")
    if phone.startswith("0"):
        phone = "233" + phone[1:]
    if phone.startswith("+"):
        phone = phone[1:]
    return phone


def send_sms(phone: str, message: str) -> bool:
    """Send one SMS through the Arkesel v2 API. Returns False when no API key is set."""
    settings = get_settings()
    if not settings.sms_api_key:
        logger.warning("sms_not_configured", extra={"phone": phone})
        return False

    payload = {
        "sender": settings.sms_sender_id,
        "message": message,
        "recipients": [normalize_phone(phone)],
    }
    try:
        response = requests.post(
            settings.sms_api_url,
            json=payload,
            headers={"api-key": settings.sms_api_key, "Content-Type": "application/json"},
            timeout=10,
        )
    except requests.RequestException as exc:
        raise SmsDeliveryError(f"Failed to send SMS: {exc}") from exc

    if response.status_code >= 400:
        raise SmsDeliveryError(f"SMS gateway returned {response.status_code}: {response.text}")

    logger.info("sms_sent", extra={"phone": payload["recipients"][0]})
    return True
