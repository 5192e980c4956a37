from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.db.models import DeliveryOption

_active = DeliveryOption.is_deleted.is_(False)


def get_delivery_option_by_id(db: Session, option_id: int) -> Optional[DeliveryOption]:
    return db.scalar(select(DeliveryOption).where(DeliveryOption.id == option_id, _active))


def get_delivery_option_by_name(db: Session, name: str) -> Optional[DeliveryOption]:
    return db.scalar(select(DeliveryOption).where(DeliveryOption.name == name, _active))


def list_delivery_options(db: Session) -> List[DeliveryOption]:
    stmt = select(DeliveryOption).where(_active).order_by(DeliveryOption.amount.asc(), DeliveryOption.id)
    return list(db.execute(stmt).scalars())


def insert_delivery_option(db: Session, **values) -> DeliveryOption:
    option = DeliveryOption(**values)
    db.add(option)
    db.flush()
    return option
