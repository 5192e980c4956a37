from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from sqlalchemy.orm import Session

from app.core.errors import ConflictError, NotFoundError
from app.db.models import Bundle, BundleProduct, Product
from app.queries import bundles as queries
from app.queries import products as product_queries
from app.queries.common import pagination_meta
from app.schemas.bundles import (
    BundleCreate,
    BundleFilters,
    BundleItemIn,
    BundleOut,
    BundlePrice,
    BundleProductOut,
    BundleStats,
    BundleUpdate,
    SharedBundleProduct,
)
from app.schemas.common import money
from app.services.products import require_product, to_product_out

logger = logging.getLogger("app.bundles")

CENT = Decimal("0.01")
BundleItems = Sequence[Tuple[BundleProduct, Product]]


def round_money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def calculate_price(lines: Iterable[Tuple[Decimal, int]], discount_percentage: Optional[Decimal]) -> Dict[str, Decimal]:
    """Sum of price x quantity, less the percentage discount; every figure rounded to cents."""
    original = sum((Decimal(price) * quantity for price, quantity in lines), Decimal("0"))
    percentage = Decimal(discount_percentage or 0)
    discount = original * percentage / Decimal(100)
    return {
        "original_price": round_money(original),
        "discount_percentage": percentage,
        "discount_amount": round_money(discount),
        "final_price": round_money(original - discount),
    }


def to_bundle_product_out(bundle_product: BundleProduct, product: Product) -> BundleProductOut:
    return BundleProductOut(
        bundle_product_id=bundle_product.id,
        quantity=bundle_product.quantity,
        product_id=product.id,
        product_name=product.name,
        product_description=product.description,
        product_price=money(product.price),
        product_stock=product.stock,
        product_images=product.images,
        product_type_name=product.product_type.name if product.product_type else None,
    )


def to_bundle_out(bundle: Bundle, items: BundleItems) -> BundleOut:
    total_value = sum((Decimal(product.price) * row.quantity for row, product in items), Decimal("0"))
    return BundleOut(
        id=bundle.id,
        name=bundle.name,
        description=bundle.description,
        discount_percentage=money(bundle.discount_percentage),
        is_active=bundle.is_active,
        created_at=bundle.created_at,
        updated_at=bundle.updated_at,
        products=[to_bundle_product_out(row, product) for row, product in items],
        products_count=len(items),
        total_value=float(round_money(total_value)),
    )


def require_bundle(db: Session, bundle_id: int) -> Bundle:
    bundle = queries.get_bundle_by_id(db, bundle_id)
    if not bundle:
        raise NotFoundError("Bundle not found")
    return bundle


def _bundle_out(db: Session, bundle_id: int) -> BundleOut:
    db.expire_all()
    bundle = require_bundle(db, bundle_id)
    return to_bundle_out(bundle, queries.bundle_items(db, [bundle.id])[bundle.id])


def _attach_products(db: Session, bundle_id: int, items: List[BundleItemIn]) -> None:
    products = product_queries.get_products_by_ids(db, [item.product_id for item in items])
    seen = set()
    for item in items:
        if item.product_id not in products:
            raise NotFoundError(f"Product with ID {item.product_id} does not exist")
        if item.product_id in seen or queries.get_bundle_product(db, bundle_id, item.product_id):
            raise ConflictError("Product is already in this bundle")
        seen.add(item.product_id)
        queries.insert_bundle_product(db, bundle_id, item.product_id, item.quantity)


def create_bundle(db: Session, payload: BundleCreate) -> BundleOut:
    bundle = queries.insert_bundle(
        db,
        name=payload.name,
        description=payload.description,
        discount_percentage=payload.discount_percentage,
        is_active=payload.is_active,
    )
    _attach_products(db, bundle.id, payload.products)
    db.commit()
    logger.info("bundle_created", extra={"bundle_id": bundle.id, "products": len(payload.products)})
    return _bundle_out(db, bundle.id)


def get_bundle(db: Session, bundle_id: int) -> BundleOut:
    return _bundle_out(db, bundle_id)


def list_bundles(db: Session, filters: BundleFilters) -> Tuple[List[BundleOut], Dict[str, int]]:
    rows, total = queries.list_bundles(db, filters)
    items = queries.bundle_items(db, [row.id for row in rows])
    data = [to_bundle_out(row, items[row.id]) for row in rows]
    return data, pagination_meta(filters.page, filters.limit, total)


def update_bundle(db: Session, bundle_id: int, payload: BundleUpdate) -> BundleOut:
    bundle = require_bundle(db, bundle_id)
    for field, value in payload.changes().items():
        setattr(bundle, field, value)
    db.commit()
    logger.info("bundle_updated", extra={"bundle_id": bundle_id})
    return _bundle_out(db, bundle_id)


def delete_bundle(db: Session, bundle_id: int) -> BundleOut:
    """Soft-delete the bundle and its join rows together."""
    bundle = require_bundle(db, bundle_id)
    snapshot = to_bundle_out(bundle, queries.bundle_items(db, [bundle.id])[bundle.id])
    bundle.mark_deleted()
    removed = queries.soft_delete_bundle_products(db, bundle.id)
    db.commit()
    logger.info("bundle_deleted", extra={"bundle_id": bundle_id, "items_deleted": removed})
    return snapshot


def add_products(db: Session, bundle_id: int, items: List[BundleItemIn]) -> BundleOut:
    require_bundle(db, bundle_id)
    _attach_products(db, bundle_id, items)
    db.commit()
    logger.info("bundle_products_added", extra={"bundle_id": bundle_id, "count": len(items)})
    return _bundle_out(db, bundle_id)


def remove_product(db: Session, bundle_id: int, product_id: int) -> BundleOut:
    require_bundle(db, bundle_id)
    row = queries.get_bundle_product(db, bundle_id, product_id)
    if not row:
        raise NotFoundError("Product is not in this bundle")
    row.mark_deleted()
    db.commit()
    logger.info("bundle_product_removed", extra={"bundle_id": bundle_id, "product_id": product_id})
    return _bundle_out(db, bundle_id)


def update_product_quantity(db: Session, bundle_id: int, product_id: int, quantity: int) -> BundleOut:
    require_bundle(db, bundle_id)
    row = queries.get_bundle_product(db, bundle_id, product_id)
    if not row:
        raise NotFoundError("Product is not in this bundle")
    row.quantity = quantity
    db.commit()
    return _bundle_out(db, bundle_id)


def bundle_price(db: Session, bundle_id: int) -> BundlePrice:
    bundle = require_bundle(db, bundle_id)
    items = queries.bundle_items(db, [bundle.id])[bundle.id]
    price = calculate_price(((product.price, row.quantity) for row, product in items), bundle.discount_percentage)
    return BundlePrice(
        bundle_id=bundle.id,
        original_price=float(price["original_price"]),
        discount_percentage=float(price["discount_percentage"]),
        discount_amount=float(price["discount_amount"]),
        final_price=float(price["final_price"]),
        products_count=len(items),
    )


def bundle_stats(db: Session) -> BundleStats:
    bundles = queries.all_bundles(db)
    items = queries.bundle_items(db, [bundle.id for bundle in bundles])
    summaries = [to_bundle_out(bundle, items[bundle.id]) for bundle in bundles]
    total = len(summaries)
    active = sum(1 for summary in summaries if summary.is_active)
    product_total = sum(summary.products_count for summary in summaries)
    return BundleStats(
        total_bundles=total,
        active_bundles=active,
        inactive_bundles=total - active,
        average_products_per_bundle=round(product_total / total, 2) if total else 0,
        total_bundle_value=round(sum(summary.total_value for summary in summaries), 2),
    )


def products_in_same_bundles(db: Session, product_id: int, limit: int) -> List[SharedBundleProduct]:
    require_product(db, product_id)
    return [
        SharedBundleProduct(**to_product_out(product).model_dump(), shared_bundles_count=count)
        for product, count in product_queries.co_bundled_products(db, product_id, limit)
    ]
