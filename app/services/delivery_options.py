import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.errors import ConflictError, NotFoundError
from app.db.models import DeliveryOption
from app.queries import delivery_options as queries
from app.schemas.common import money
from app.schemas.delivery_options import DeliveryOptionCreate, DeliveryOptionOut, DeliveryOptionUpdate

logger = logging.getLogger("app.delivery_options")


def to_delivery_option_out(option: DeliveryOption) -> DeliveryOptionOut:
    return DeliveryOptionOut(id=option.id, name=option.name, amount=money(option.amount), created_at=option.created_at)


def require_delivery_option(db: Session, option_id: int) -> DeliveryOption:
    option = queries.get_delivery_option_by_id(db, option_id)
    if not option:
        raise NotFoundError("Delivery option not found")
    return option


def _ensure_name_available(db: Session, name: str, exclude_id: Optional[int] = None) -> None:
    existing = queries.get_delivery_option_by_name(db, name)
    if existing and existing.id != exclude_id:
        raise ConflictError("Delivery option with this name already exists")


def list_delivery_options(db: Session) -> List[DeliveryOptionOut]:
    return [to_delivery_option_out(option) for option in queries.list_delivery_options(db)]


def get_delivery_option(db: Session, option_id: int) -> DeliveryOptionOut:
    return to_delivery_option_out(require_delivery_option(db, option_id))


def create_delivery_option(db: Session, payload: DeliveryOptionCreate) -> DeliveryOptionOut:
    _ensure_name_available(db, payload.name)
    option = queries.insert_delivery_option(db, name=payload.name, amount=payload.amount)
    db.commit()
    db.refresh(option)
    logger.info("delivery_option_created", extra={"delivery_option_id": option.id})
    return to_delivery_option_out(option)


def update_delivery_option(db: Session, option_id: int, payload: DeliveryOptionUpdate) -> DeliveryOptionOut:
    option = require_delivery_option(db, option_id)
    changes = payload.changes()
    if changes.get("name"):
        _ensure_name_available(db, changes["name"], exclude_id=option.id)
    for field, value in changes.items():
        setattr(option, field, value)
    db.commit()
    db.refresh(option)
    return to_delivery_option_out(option)


def delete_delivery_option(db: Session, option_id: int) -> DeliveryOptionOut:
    option = require_delivery_option(db, option_id)
    option.mark_deleted()
    db.commit()
    logger.info("delivery_option_deleted", extra={"delivery_option_id": option_id})
    return to_delivery_option_out(option)
