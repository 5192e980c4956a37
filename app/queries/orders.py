from typing import Dict, List, Optional, Tuple

from sqlalchemy import Select, case, func, select
from sqlalchemy.orm import Session, selectinload

from app.db.models import Order, OrderItem, Product
from app.queries.common import order_by, paginate
from app.schemas.orders import OrderFilters

_SORT_COLUMNS = {
    "created_at": Order.created_at,
    "total_price": Order.total_price,
    "status": Order.status,
    "payment_status": Order.payment_status,
}


def active_orders() -> Select:
    return (
        select(Order)
        .options(
            selectinload(Order.items).selectinload(OrderItem.product),
            selectinload(Order.delivery_option),
        )
        .where(Order.is_deleted.is_(False))
    )


def newest_first(stmt: Select) -> Select:
    return stmt.order_by(Order.created_at.desc(), Order.id.desc())


def get_order_by_id(db: Session, order_id: int) -> Optional[Order]:
    return db.scalar(active_orders().where(Order.id == order_id))


def get_order_by_reference(db: Session, reference: str) -> Optional[Order]:
    return db.scalar(active_orders().where(Order.reference == reference))


def reference_exists(db: Session, reference: str) -> bool:
    return db.scalar(select(Order.id).where(Order.reference == reference)) is not None


def list_orders(
    db: Session, filters: OrderFilters, created_by: Optional[int] = None
) -> Tuple[List[Order], int]:
    stmt = active_orders()
    if filters.user_id:
        stmt = stmt.where(Order.user_id == filters.user_id)
    if filters.status:
        stmt = stmt.where(Order.status == filters.status)
    if filters.payment_status:
        stmt = stmt.where(Order.payment_status == filters.payment_status)
    if filters.customer_email:
        stmt = stmt.where(Order.customer_email == filters.customer_email)
    if filters.date_from:
        stmt = stmt.where(Order.created_at >= filters.date_from)
    if filters.date_to:
        stmt = stmt.where(Order.created_at <= filters.date_to)
    if created_by is not None:
        owned = (
            select(OrderItem.id)
            .join(Product, Product.id == OrderItem.product_id)
            .where(OrderItem.order_id == Order.id, Product.created_by == created_by)
        )
        stmt = stmt.where(owned.exists())

    stmt = order_by(stmt, _SORT_COLUMNS[filters.sort_by], filters.sort_order, Order.id.desc())
    return paginate(db, stmt, filters.page, filters.limit)


def orders_for_user(db: Session, user_id: int, limit: int) -> List[Order]:
    stmt = newest_first(active_orders().where(Order.user_id == user_id)).limit(limit)
    return list(db.execute(stmt).scalars())


def orders_by_status(db: Session, status: str) -> List[Order]:
    return list(db.execute(newest_first(active_orders().where(Order.status == status))).scalars())


def orders_by_payment_status(db: Session, payment_status: str) -> List[Order]:
    stmt = newest_first(active_orders().where(Order.payment_status == payment_status))
    return list(db.execute(stmt).scalars())


def order_stats(db: Session) -> Dict[str, object]:
    def count_when(condition):
        return func.coalesce(func.sum(case((condition, 1), else_=0)), 0)

    stmt = select(
        func.count(Order.id),
        count_when(Order.payment_status == "pending"),
        count_when(Order.payment_status == "completed"),
        count_when(Order.status == "pending"),
        count_when(Order.status == "processing"),
        count_when(Order.status == "delivered"),
        func.coalesce(func.sum(case((Order.payment_status == "completed", Order.total_price), else_=0)), 0),
    ).where(Order.is_deleted.is_(False))
    total, pending_payments, completed_payments, pending, processing, delivered, revenue = db.execute(stmt).one()
    return {
        "total_orders": int(total),
        "pending_payments": int(pending_payments),
        "completed_payments": int(completed_payments),
        "pending_orders": int(pending),
        "processing_orders": int(processing),
        "completed_orders": int(delivered),
        "total_revenue": revenue,
    }


def insert_order(db: Session, **values) -> Order:
    order = Order(**values)
    db.add(order)
    db.flush()
    return order


def insert_order_item(db: Session, **values) -> OrderItem:
    item = OrderItem(**values)
    db.add(item)
    return item
