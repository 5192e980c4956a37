from __future__ import annotations

import logging
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.auth import Principal
from app.core.config import get_settings
from app.core.errors import BadRequestError, ConflictError, NotFoundError
from app.db.models import Product
from app.queries import product_types as product_type_queries
from app.queries import products as queries
from app.queries import sub_categories as sub_category_queries
from app.queries.common import pagination_meta
from app.schemas.common import money
from app.schemas.products import (
    AvailabilityResponse,
    BulkStockItem,
    BulkStockResult,
    ProductCreate,
    ProductFilters,
    ProductListResponse,
    ProductOut,
    ProductStats,
    ProductUpdate,
    SimilarProductsQuery,
    StockUpdateFailure,
    StockUpdateSuccess,
)

logger = logging.getLogger("app.products")


def stock_status(stock: int, low_stock_threshold: int) -> str:
    if stock <= 0:
        return "out_of_stock"
    if stock <= low_stock_threshold:
        return "low_stock"
    return "in_stock"


def to_product_out(product: Product, low_stock_threshold: Optional[int] = None) -> ProductOut:
    if low_stock_threshold is None:
        low_stock_threshold = get_settings().low_stock_threshold
    return ProductOut(
        id=product.id,
        name=product.name,
        description=product.description,
        price=money(product.price),
        stock=product.stock,
        product_type_id=product.product_type_id,
        product_type_name=product.product_type.name if product.product_type else None,
        sub_category_id=product.sub_category_id,
        images=product.images,
        extra_properties=product.extra_properties,
        created_by=product.created_by,
        created_at=product.created_at,
        in_stock=product.stock > 0,
        stock_status=stock_status(product.stock, low_stock_threshold),
    )


def require_product(db: Session, product_id: int) -> Product:
    product = queries.get_product_by_id(db, product_id)
    if not product:
        raise NotFoundError("Product not found")
    return product


def _ensure_name_available(db: Session, name: str, exclude_id: Optional[int] = None) -> None:
    existing = queries.get_product_by_name(db, name)
    if existing and existing.id != exclude_id:
        raise ConflictError("Product with this name already exists")


def _ensure_product_type(db: Session, product_type_id: int) -> None:
    if not product_type_queries.get_product_type_by_id(db, product_type_id):
        raise NotFoundError("Product type not found")


def _ensure_sub_category(db: Session, sub_category_id: Optional[int]) -> None:
    if sub_category_id is not None and not sub_category_queries.get_sub_category_by_id(db, sub_category_id):
        raise NotFoundError("Sub-category not found")


def _reload(db: Session, product_id: int) -> ProductOut:
    db.expire_all()
    return to_product_out(require_product(db, product_id))


def list_products(db: Session, filters: ProductFilters) -> ProductListResponse:
    rows, total = queries.list_products(db, filters)
    return ProductListResponse(
        products=[to_product_out(row) for row in rows],
        pagination=pagination_meta(filters.page, filters.limit, total),
        filters_applied=filters.applied(),
    )


def search_products(db: Session, term: Optional[str], filters: ProductFilters) -> ProductListResponse:
    if not term or not term.strip():
        raise BadRequestError("Search query is required")
    return list_products(db, filters.model_copy(update={"search": term.strip()}))


def get_product(db: Session, product_id: int) -> ProductOut:
    return to_product_out(require_product(db, product_id))


def create_product(db: Session, payload: ProductCreate, principal: Optional[Principal] = None) -> ProductOut:
    _ensure_product_type(db, payload.product_type_id)
    _ensure_sub_category(db, payload.sub_category_id)
    _ensure_name_available(db, payload.name)
    product = queries.insert_product(
        db,
        **payload.model_dump(),
        created_by=principal.id if principal and principal.is_admin else None,
    )
    db.commit()
    logger.info("product_created", extra={"product_id": product.id, "product_type_id": product.product_type_id})
    return _reload(db, product.id)


def update_product(db: Session, product_id: int, payload: ProductUpdate) -> ProductOut:
    product = require_product(db, product_id)
    changes = payload.changes()
    if changes.get("name"):
        _ensure_name_available(db, changes["name"], exclude_id=product.id)
    if changes.get("product_type_id"):
        _ensure_product_type(db, changes["product_type_id"])
    if changes.get("sub_category_id"):
        _ensure_sub_category(db, changes["sub_category_id"])
    for field, value in changes.items():
        setattr(product, field, value)
    db.commit()
    logger.info("product_updated", extra={"product_id": product_id, "fields": sorted(changes)})
    return _reload(db, product_id)


def delete_product(db: Session, product_id: int) -> ProductOut:
    product = require_product(db, product_id)
    product.mark_deleted()
    db.commit()
    logger.info("product_deleted", extra={"product_id": product_id})
    return to_product_out(product)


def featured_products(db: Session, limit: int) -> List[ProductOut]:
    return [to_product_out(product) for product in queries.featured_products(db, limit)]


def products_by_type(db: Session, product_type_id: int, limit: int) -> List[ProductOut]:
    return [to_product_out(product) for product in queries.products_by_type(db, product_type_id, limit)]


def low_stock_products(db: Session, threshold: int) -> List[ProductOut]:
    return [to_product_out(product) for product in queries.low_stock_products(db, threshold)]


def product_stats(db: Session) -> ProductStats:
    threshold = get_settings().low_stock_threshold
    return ProductStats(**queries.stock_counts(db, threshold), low_stock_threshold=threshold)


def apply_stock_change(product: Product, quantity: int, operation: str) -> None:
    if operation == "increase":
        product.stock = product.stock + quantity
    else:
        product.stock = max(0, product.stock - quantity)


def update_stock(db: Session, product_id: int, quantity: int, operation: str) -> ProductOut:
    product = require_product(db, product_id)
    apply_stock_change(product, quantity, operation)
    db.commit()
    logger.info("product_stock_updated", extra={"product_id": product_id, "operation": operation, "quantity": quantity})
    return to_product_out(product)


def bulk_update_stock(db: Session, updates: List[BulkStockItem]) -> BulkStockResult:
    successes: List[StockUpdateSuccess] = []
    failures: List[StockUpdateFailure] = []
    for item in updates:
        product = queries.get_product_by_id(db, item.product_id)
        if not product:
            failures.append(StockUpdateFailure(product_id=item.product_id, error="Product not found"))
            continue
        apply_stock_change(product, item.quantity, item.operation)
        db.flush()
        successes.append(StockUpdateSuccess(product_id=item.product_id, product=to_product_out(product)))
    db.commit()
    logger.info("product_stock_bulk_updated", extra={"succeeded": len(successes), "failed": len(failures)})
    return BulkStockResult(
        successful_updates=successes,
        failed_updates=failures,
        total_processed=len(updates),
        successful_count=len(successes),
        failed_count=len(failures),
    )


def check_availability(db: Session, product_id: int, quantity: int) -> AvailabilityResponse:
    if quantity < 1:
        raise BadRequestError("Invalid quantity")
    product = queries.get_product_by_id(db, product_id)
    if not product:
        return AvailabilityResponse(available=False, reason="Product not found")
    if product.stock < quantity:
        return AvailabilityResponse(available=False, reason="Insufficient stock", available_stock=product.stock)
    return AvailabilityResponse(available=True, available_stock=product.stock)


def similar_products(db: Session, product_id: int, query: SimilarProductsQuery) -> List[ProductOut]:
    """Bundle neighbours first, then same-type products closest in price."""
    product = require_product(db, product_id)
    selected: List[Product] = []
    seen = {product.id}

    for candidate, _shared in queries.co_bundled_products(db, product.id, query.limit):
        if query.min_price is not None and candidate.price < Decimal(str(query.min_price)):
            continue
        if query.max_price is not None and candidate.price > Decimal(str(query.max_price)):
            continue
        selected.append(candidate)
        seen.add(candidate.id)

    if len(selected) < query.limit:
        fallback = queries.same_type_products(db, product, seen, query.min_price, query.max_price)
        fallback.sort(key=lambda candidate: abs(Decimal(candidate.price) - Decimal(product.price)))
        selected.extend(fallback[: query.limit - len(selected)])

    return [to_product_out(candidate) for candidate in selected[: query.limit]]
