from __future__ import annotations

import logging
import secrets
import time
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.auth import ROLE_ADMIN, USER_TYPE_CUSTOMER, Principal
from app.core.errors import BadRequestError, ForbiddenError, NotFoundError, ValidationFailed
from app.db.models import Order, OrderItem
from app.queries import customers as customer_queries
from app.queries import delivery_options as delivery_option_queries
from app.queries import orders as queries
from app.queries import products as product_queries
from app.queries.common import pagination_meta
from app.schemas.common import money
from app.schemas.orders import (
    MY_ORDERS_MAX_LIMIT,
    ORDER_STATUSES,
    PAYMENT_STATUSES,
    OrderCreate,
    OrderCreatedOut,
    OrderFilters,
    OrderItemOut,
    OrderListResponse,
    OrderOut,
    OrderStats,
    OrderUpdate,
)
from app.services import customers as customer_service
from app.services import notifications

logger = logging.getLogger("app.orders")

GUEST_REQUIRED_FIELDS = ("customer_email", "customer_name", "customer_phone")


def to_order_item_out(item: OrderItem) -> OrderItemOut:
    return OrderItemOut(
        id=item.id,
        order_id=item.order_id,
        product_id=item.product_id,
        product_name=item.product.name if item.product else None,
        quantity=item.quantity,
        price=money(item.price),
        metadata=item.item_metadata,
        created_at=item.created_at,
    )


def to_order_out(order: Order) -> OrderOut:
    return OrderOut(
        id=order.id,
        user_id=order.user_id,
        quantity=order.quantity,
        subtotal=money(order.subtotal),
        delivery_cost=money(order.delivery_cost),
        total_price=money(order.total_price),
        delivery_option_id=order.delivery_option_id,
        delivery_option_name=order.delivery_option.name if order.delivery_option else None,
        status=order.status,
        payment_status=order.payment_status,
        payment_reference=order.payment_reference,
        reference=order.reference,
        delivery_address=order.delivery_address,
        customer_email=order.customer_email,
        customer_phone=order.customer_phone,
        customer_name=order.customer_name,
        metadata=order.order_metadata,
        created_at=order.created_at,
        updated_at=order.updated_at,
        items=[to_order_item_out(item) for item in order.items],
    )


def generate_reference() -> str:
    return f"ORD-{int(time.time() * 1000)}-{secrets.randbelow(1000):03d}"


def _unique_reference(db: Session) -> str:
    reference = generate_reference()
    while queries.reference_exists(db, reference):
        reference = generate_reference()
    return reference


def require_order(db: Session, order_id: int) -> Order:
    order = queries.get_order_by_id(db, order_id)
    if not order:
        raise NotFoundError("Order not found")
    return order


def _reload(db: Session, order_id: int) -> Order:
    db.expire_all()
    return require_order(db, order_id)


def _resolve_buyer(db: Session, payload: OrderCreate, principal: Optional[Principal]) -> Optional[int]:
    if principal and principal.user_type == USER_TYPE_CUSTOMER:
        return principal.id
    if payload.user_id:
        if not customer_queries.get_customer_by_id(db, payload.user_id):
            raise BadRequestError(f"Customer with ID {payload.user_id} not found")
        return payload.user_id
    for field in GUEST_REQUIRED_FIELDS:
        if not getattr(payload, field):
            raise ValidationFailed(f'"{field}" is required')
    return None


def create_order(db: Session, payload: OrderCreate, principal: Optional[Principal] = None) -> OrderCreatedOut:
    """Validate stock, snapshot prices, decrement stock and optionally register the guest, in one commit."""
    user_id = _resolve_buyer(db, payload, principal)

    products = product_queries.get_products_by_ids(db, [item.product_id for item in payload.items])
    subtotal = Decimal("0")
    for item in payload.items:
        product = products.get(item.product_id)
        if not product:
            raise BadRequestError(f"Product with ID {item.product_id} not found")
        if product.stock < item.quantity:
            raise BadRequestError(
                f"Insufficient stock for product {product.name}. "
                f"Available: {product.stock}, Requested: {item.quantity}"
            )
        product.stock -= item.quantity
        subtotal += Decimal(product.price) * item.quantity

    delivery_cost = Decimal("0")
    if payload.delivery_option_id:
        option = delivery_option_queries.get_delivery_option_by_id(db, payload.delivery_option_id)
        if not option:
            raise BadRequestError("Delivery option not found")
        delivery_cost = Decimal(option.amount)

    registered_customer = None
    wants_account = payload.register_customer or payload.customer_password
    if user_id is None and wants_account:
        if not payload.customer_password:
            raise ValidationFailed('"customer_password" is required to register a customer')
        existing = customer_queries.get_customer_by_email(db, payload.customer_email)
        if existing:
            user_id = existing.id
        else:
            first_name, _, last_name = payload.customer_name.partition(" ")
            registered_customer = customer_service.add_customer(
                db,
                payload.customer_email,
                payload.customer_password,
                first_name=first_name or None,
                last_name=last_name or None,
                phone=payload.customer_phone,
                address=payload.delivery_address,
            )
            user_id = registered_customer.id

    order = queries.insert_order(
        db,
        user_id=user_id,
        quantity=sum(item.quantity for item in payload.items),
        subtotal=subtotal,
        delivery_cost=delivery_cost,
        total_price=subtotal + delivery_cost,
        delivery_option_id=payload.delivery_option_id,
        status="pending",
        payment_status="pending",
        reference=_unique_reference(db),
        delivery_address=payload.delivery_address,
        customer_email=payload.customer_email,
        customer_phone=payload.customer_phone,
        customer_name=payload.customer_name,
        order_metadata=payload.metadata,
    )
    for item in payload.items:
        queries.insert_order_item(
            db,
            order_id=order.id,
            product_id=item.product_id,
            quantity=item.quantity,
            price=products[item.product_id].price,
            item_metadata=item.metadata,
        )
    db.commit()
    logger.info(
        "order_created",
        extra={"order_id": order.id, "reference": order.reference, "items": len(payload.items)},
    )

    if registered_customer is not None:
        notifications.send_customer_verification(
            customer_service.display_name(registered_customer),
            registered_customer.email,
            registered_customer.verification_code,
        )

    created = OrderCreatedOut(**to_order_out(_reload(db, order.id)).model_dump())
    if registered_customer is not None:
        created.customer_registered = True
        created.customer_id = registered_customer.id
    return created


def list_orders(db: Session, filters: OrderFilters, principal: Principal) -> OrderListResponse:
    created_by = principal.id if principal.role == ROLE_ADMIN else None
    rows, total = queries.list_orders(db, filters, created_by=created_by)
    return OrderListResponse(
        data=[to_order_out(row) for row in rows],
        pagination=pagination_meta(filters.page, filters.limit, total),
        filters_applied=filters.applied(),
    )


def my_orders(db: Session, principal: Principal, limit: int) -> List[OrderOut]:
    """Orders placed by the calling customer; other account types own no orders."""
    if principal.user_type != USER_TYPE_CUSTOMER:
        return []
    limit = min(limit, MY_ORDERS_MAX_LIMIT)
    return [to_order_out(order) for order in queries.orders_for_user(db, principal.id, limit)]


def order_stats(db: Session) -> OrderStats:
    stats = queries.order_stats(db)
    stats["total_revenue"] = money(Decimal(str(stats["total_revenue"])))
    return OrderStats(**stats)


def orders_by_status(db: Session, status: str) -> List[OrderOut]:
    if status not in ORDER_STATUSES:
        raise BadRequestError(f"Invalid status. Must be one of: {', '.join(ORDER_STATUSES)}")
    return [to_order_out(order) for order in queries.orders_by_status(db, status)]


def orders_by_payment_status(db: Session, payment_status: str) -> List[OrderOut]:
    if payment_status not in PAYMENT_STATUSES:
        raise BadRequestError(f"Invalid payment status. Must be one of: {', '.join(PAYMENT_STATUSES)}")
    return [to_order_out(order) for order in queries.orders_by_payment_status(db, payment_status)]


def get_order(db: Session, order_id: int) -> OrderOut:
    return to_order_out(require_order(db, order_id))


def get_order_by_reference(db: Session, reference: str) -> OrderOut:
    order = queries.get_order_by_reference(db, reference)
    if not order:
        raise NotFoundError("Order not found")
    return to_order_out(order)


def update_order(db: Session, order_id: int, payload: OrderUpdate) -> OrderOut:
    order = require_order(db, order_id)
    previous_status = order.status
    changes = payload.changes()
    for field, value in changes.items():
        setattr(order, field, value)
    db.commit()
    logger.info("order_updated", extra={"order_id": order_id, "fields": sorted(changes)})

    new_status = changes.get("status")
    if new_status and new_status != previous_status:
        notifications.send_order_status_update(
            order.reference,
            previous_status,
            new_status,
            order.customer_name,
            order.customer_email,
            order.customer_phone,
        )
    return to_order_out(_reload(db, order_id))


def cancel_order(db: Session, order_id: int, principal: Principal) -> OrderOut:
    order = require_order(db, order_id)
    if not principal.is_admin and order.user_id != principal.id:
        raise ForbiddenError("Access denied. You can only cancel your own orders.")
    if order.status == "cancelled":
        raise BadRequestError("Order is already cancelled")
    if order.status == "delivered":
        raise BadRequestError("Cannot cancel a delivered order")

    if order.status == "pending":
        products = product_queries.get_products_by_ids(db, [item.product_id for item in order.items])
        for item in order.items:
            product = products.get(item.product_id)
            if product:
                product.stock += item.quantity

    order.payment_status = "refunded" if order.payment_status == "completed" else "failed"
    order.status = "cancelled"
    db.commit()
    logger.info("order_cancelled", extra={"order_id": order_id})
    return to_order_out(_reload(db, order_id))
