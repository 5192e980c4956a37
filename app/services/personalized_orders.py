from __future__ import annotations

import logging
import secrets
import time

from sqlalchemy.orm import Session

from app.core.errors import NotFoundError
from app.db.models import PersonalizedOrder
from app.queries import personalized_orders as queries
from app.queries.common import pagination_meta
from app.schemas.common import money
from app.schemas.personalized_orders import (
    PersonalizedOrderCreate,
    PersonalizedOrderFilters,
    PersonalizedOrderListResponse,
    PersonalizedOrderOut,
    PersonalizedOrderUpdate,
)
from app.services import notifications

logger = logging.getLogger("app.personalized_orders")


def to_personalized_order_out(order: PersonalizedOrder) -> PersonalizedOrderOut:
    return PersonalizedOrderOut(
        id=order.id,
        custom_message=order.custom_message,
        selected_colors=order.selected_colors,
        product_type=order.product_type,
        metadata=order.order_metadata,
        amount=money(order.amount),
        customer_email=order.customer_email,
        customer_phone=order.customer_phone,
        customer_name=order.customer_name,
        delivery_address=order.delivery_address,
        payment_status=order.payment_status,
        payment_reference=order.payment_reference,
        reference=order.reference,
        order_status=order.order_status,
        delivery_status=order.delivery_status,
        created_at=order.created_at,
        updated_at=order.updated_at,
    )


def generate_reference() -> str:
    return f"PO-{int(time.time() * 1000)}-{secrets.randbelow(1000):03d}"


def _unique_reference(db: Session) -> str:
    reference = generate_reference()
    while queries.reference_exists(db, reference):
        reference = generate_reference()
    return reference


def require_personalized_order(db: Session, order_id: int) -> PersonalizedOrder:
    order = queries.get_personalized_order_by_id(db, order_id)
    if not order:
        raise NotFoundError("Personalized order not found")
    return order


def create_personalized_order(db: Session, payload: PersonalizedOrderCreate) -> PersonalizedOrderOut:
    """Store the order, then alert the shop owner; payment stays pending until settled offline."""
    values = payload.model_dump(exclude={"metadata"})
    order = queries.insert_personalized_order(
        db,
        **values,
        order_metadata=payload.metadata,
        reference=_unique_reference(db),
        order_status="pending",
        delivery_status="pending",
        payment_status="pending",
    )
    db.commit()
    db.refresh(order)
    logger.info("personalized_order_created", extra={"order_id": order.id, "reference": order.reference})

    out = to_personalized_order_out(order)
    details = out.model_dump(mode="json", exclude={"id", "created_at", "updated_at"})
    notifications.send_personalized_order_notification(order.id, order.product_type, details)
    return out


def list_personalized_orders(db: Session, filters: PersonalizedOrderFilters) -> PersonalizedOrderListResponse:
    rows, total = queries.list_personalized_orders(db, filters)
    return PersonalizedOrderListResponse(
        data=[to_personalized_order_out(row) for row in rows],
        pagination=pagination_meta(filters.page, filters.limit, total),
    )


def get_personalized_order(db: Session, order_id: int) -> PersonalizedOrderOut:
    return to_personalized_order_out(require_personalized_order(db, order_id))


def update_personalized_order(
    db: Session, order_id: int, payload: PersonalizedOrderUpdate
) -> PersonalizedOrderOut:
    order = require_personalized_order(db, order_id)
    changes = payload.changes()
    for field, value in changes.items():
        setattr(order, "order_metadata" if field == "metadata" else field, value)
    db.commit()
    db.refresh(order)
    logger.info("personalized_order_updated", extra={"order_id": order_id, "fields": sorted(changes)})
    return to_personalized_order_out(order)


def delete_personalized_order(db: Session, order_id: int) -> None:
    order = require_personalized_order(db, order_id)
    order.mark_deleted()
    db.commit()
    logger.info("personalized_order_deleted", extra={"order_id": order_id})
