from datetime import datetime
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.db.models import Customer

_active = Customer.is_deleted.is_(False)


def get_customer_by_id(db: Session, customer_id: int) -> Optional[Customer]:
    return db.scalar(select(Customer).where(Customer.id == customer_id, _active))


def get_customer_by_email(db: Session, email: str) -> Optional[Customer]:
    return db.scalar(select(Customer).where(Customer.email == email, _active))


def get_customer_by_verification_code(db: Session, code: str, now: datetime) -> Optional[Customer]:
    stmt = select(Customer).where(
        Customer.verification_code == code,
        Customer.verification_code_expires > now,
        _active,
    )
    return db.scalar(stmt)


def get_customer_by_reset_code(db: Session, code: str, now: datetime) -> Optional[Customer]:
    stmt = select(Customer).where(Customer.reset_code == code, Customer.reset_code_expires > now, _active)
    return db.scalar(stmt)


def list_customers(db: Session) -> List[Customer]:
    stmt = select(Customer).where(_active).order_by(Customer.created_at.desc(), Customer.id.desc())
    return list(db.execute(stmt).scalars())


def insert_customer(db: Session, **values) -> Customer:
    customer = Customer(**values)
    db.add(customer)
    db.flush()
    return customer
