import logging
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.queries import mailing_list as queries
from app.schemas.mailing_list import ContactMessage, MailingListEntryOut
from app.services import notifications

logger = logging.getLogger("app.mailing_list")

SUBSCRIBED_MESSAGE = "Email added to mailing list successfully"


def subscribe(db: Session, email: str) -> str:
    """Add ``email`` once; repeating a subscription is not an error."""
    email = email.lower()
    if queries.get_entry_by_email(db, email):
        return SUBSCRIBED_MESSAGE
    try:
        queries.insert_entry(db, email)
        db.commit()
    except IntegrityError:
        # a concurrent request stored the same address first
        db.rollback()
        return SUBSCRIBED_MESSAGE
    logger.info("mailing_list_subscribed", extra={"email": email})
    return SUBSCRIBED_MESSAGE


def list_subscribers(db: Session) -> List[MailingListEntryOut]:
    return [
        MailingListEntryOut(id=entry.id, email=entry.email, created_at=entry.created_at)
        for entry in queries.list_entries(db)
    ]


def send_contact_message(payload: ContactMessage) -> str:
    notifications.send_contact_message(payload.name, payload.email, payload.company, payload.message)
    return "Message sent successfully"
