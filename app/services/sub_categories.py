from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.orm import Session

from app.core.errors import ConflictError, NotFoundError
from app.db.models import SubCategory
from app.queries import sub_categories as queries
from app.queries.common import pagination_meta
from app.schemas.sub_categories import (
    SubCategoryCreate,
    SubCategoryFilters,
    SubCategoryListResponse,
    SubCategoryOut,
    SubCategoryUpdate,
)
from app.services.product_types import require_product_type

logger = logging.getLogger("app.sub_categories")


def to_sub_category_out(sub_category: SubCategory) -> SubCategoryOut:
    return SubCategoryOut(
        id=sub_category.id,
        name=sub_category.name,
        product_type_id=sub_category.product_type_id,
        created_at=sub_category.created_at,
    )


def _ensure_name_available(db: Session, name: str, product_type_id: int, exclude_id: Optional[int] = None) -> None:
    existing = queries.get_sub_category_by_name(db, name, product_type_id)
    if existing and existing.id != exclude_id:
        raise ConflictError("Sub-category with this name already exists for this product type")


def require_sub_category(db: Session, sub_category_id: int) -> SubCategory:
    sub_category = queries.get_sub_category_by_id(db, sub_category_id)
    if not sub_category:
        raise NotFoundError("Sub-category not found")
    return sub_category


def list_sub_categories(db: Session, filters: SubCategoryFilters) -> SubCategoryListResponse:
    rows, total = queries.list_sub_categories(db, filters)
    return SubCategoryListResponse(
        data=[to_sub_category_out(row) for row in rows],
        pagination=pagination_meta(filters.page, filters.limit, total),
    )


def get_sub_category(db: Session, sub_category_id: int) -> SubCategoryOut:
    return to_sub_category_out(require_sub_category(db, sub_category_id))


def create_sub_category(db: Session, payload: SubCategoryCreate) -> SubCategoryOut:
    require_product_type(db, payload.product_type_id)
    _ensure_name_available(db, payload.name, payload.product_type_id)
    sub_category = queries.insert_sub_category(db, name=payload.name, product_type_id=payload.product_type_id)
    db.commit()
    db.refresh(sub_category)
    logger.info(
        "sub_category_created",
        extra={"sub_category_id": sub_category.id, "product_type_id": sub_category.product_type_id},
    )
    return to_sub_category_out(sub_category)


def update_sub_category(db: Session, sub_category_id: int, payload: SubCategoryUpdate) -> SubCategoryOut:
    """Apply a partial update; the name must stay unique within the resulting product type."""
    sub_category = require_sub_category(db, sub_category_id)
    changes = payload.changes()
    if "product_type_id" in changes:
        require_product_type(db, changes["product_type_id"])
    product_type_id = changes.get("product_type_id", sub_category.product_type_id)
    name = changes.get("name", sub_category.name)
    if name != sub_category.name or product_type_id != sub_category.product_type_id:
        _ensure_name_available(db, name, product_type_id, exclude_id=sub_category.id)
    for field, value in changes.items():
        setattr(sub_category, field, value)
    db.commit()
    db.refresh(sub_category)
    logger.info("sub_category_updated", extra={"sub_category_id": sub_category.id, "fields": sorted(changes)})
    return to_sub_category_out(sub_category)


def delete_sub_category(db: Session, sub_category_id: int) -> SubCategoryOut:
    """Soft-delete the sub-category and unlink the products that referenced it."""
    sub_category = require_sub_category(db, sub_category_id)
    sub_category.mark_deleted()
    detached = queries.detach_products(db, sub_category.id)
    db.commit()
    logger.info("sub_category_deleted", extra={"sub_category_id": sub_category_id, "products_detached": detached})
    return to_sub_category_out(sub_category)
