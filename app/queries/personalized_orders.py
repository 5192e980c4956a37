from typing import List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.db.models import PersonalizedOrder
from app.queries.common import order_by, paginate
from app.schemas.personalized_orders import PersonalizedOrderFilters

_SORT_COLUMNS = {
    "created_at": PersonalizedOrder.created_at,
    "amount": PersonalizedOrder.amount,
    "order_status": PersonalizedOrder.order_status,
    "delivery_status": PersonalizedOrder.delivery_status,
}

_active = PersonalizedOrder.is_deleted.is_(False)


def get_personalized_order_by_id(db: Session, order_id: int) -> Optional[PersonalizedOrder]:
    return db.scalar(select(PersonalizedOrder).where(PersonalizedOrder.id == order_id, _active))


def reference_exists(db: Session, reference: str) -> bool:
    return db.scalar(select(PersonalizedOrder.id).where(PersonalizedOrder.reference == reference)) is not None


def list_personalized_orders(
    db: Session, filters: PersonalizedOrderFilters
) -> Tuple[List[PersonalizedOrder], int]:
    stmt = select(PersonalizedOrder).where(_active)
    if filters.order_status:
        stmt = stmt.where(PersonalizedOrder.order_status == filters.order_status)
    if filters.delivery_status:
        stmt = stmt.where(PersonalizedOrder.delivery_status == filters.delivery_status)
    if filters.product_type:
        stmt = stmt.where(PersonalizedOrder.product_type == filters.product_type)
    if filters.date_from:
        stmt = stmt.where(PersonalizedOrder.created_at >= filters.date_from)
    if filters.date_to:
        stmt = stmt.where(PersonalizedOrder.created_at <= filters.date_to)

    stmt = order_by(stmt, _SORT_COLUMNS[filters.sort_by], filters.sort_order, PersonalizedOrder.id.desc())
    return paginate(db, stmt, filters.page, filters.limit)


def insert_personalized_order(db: Session, **values) -> PersonalizedOrder:
    order = PersonalizedOrder(**values)
    db.add(order)
    db.flush()
    return order
