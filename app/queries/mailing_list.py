from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.db.models import MailingListEntry


def get_entry_by_email(db: Session, email: str) -> Optional[MailingListEntry]:
    return db.scalar(select(MailingListEntry).where(MailingListEntry.email == email))


def list_entries(db: Session) -> List[MailingListEntry]:
    stmt = select(MailingListEntry).order_by(MailingListEntry.created_at.desc(), MailingListEntry.id.desc())
    return list(db.execute(stmt).scalars())


def insert_entry(db: Session, email: str) -> MailingListEntry:
    entry = MailingListEntry(email=email)
    db.add(entry)
    db.flush()
    return entry
