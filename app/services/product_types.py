from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.orm import Session

from app.core.errors import ConflictError, NotFoundError
from app.db.models import ProductType
from app.queries import product_types as queries
from app.queries import sub_categories as sub_category_queries
from app.queries.common import pagination_meta
from app.schemas.product_types import (
    ProductTypeCreate,
    ProductTypeFilters,
    ProductTypeListResponse,
    ProductTypeOut,
    ProductTypeUpdate,
)

logger = logging.getLogger("app.product_types")


def to_product_type_out(product_type: ProductType) -> ProductTypeOut:
    return ProductTypeOut(
        id=product_type.id,
        name=product_type.name,
        allowed_types=product_type.allowed_types,
        created_at=product_type.created_at,
    )


def _ensure_name_available(db: Session, name: str, exclude_id: Optional[int] = None) -> None:
    existing = queries.get_product_type_by_name(db, name)
    if existing and existing.id != exclude_id:
        raise ConflictError("Product type with this name already exists")


def require_product_type(db: Session, product_type_id: int) -> ProductType:
    product_type = queries.get_product_type_by_id(db, product_type_id)
    if not product_type:
        raise NotFoundError("Product type not found")
    return product_type


def list_product_types(db: Session, filters: ProductTypeFilters) -> ProductTypeListResponse:
    rows, total = queries.list_product_types(db, filters)
    return ProductTypeListResponse(
        data=[to_product_type_out(row) for row in rows],
        pagination=pagination_meta(filters.page, filters.limit, total),
    )


def get_product_type(db: Session, product_type_id: int) -> ProductTypeOut:
    return to_product_type_out(require_product_type(db, product_type_id))


def create_product_type(db: Session, payload: ProductTypeCreate) -> ProductTypeOut:
    _ensure_name_available(db, payload.name)
    product_type = queries.insert_product_type(db, name=payload.name, allowed_types=payload.allowed_types)
    db.commit()
    db.refresh(product_type)
    logger.info("product_type_created", extra={"product_type_id": product_type.id})
    return to_product_type_out(product_type)


def update_product_type(db: Session, product_type_id: int, payload: ProductTypeUpdate) -> ProductTypeOut:
    product_type = require_product_type(db, product_type_id)
    changes = payload.changes()
    if changes.get("name"):
        _ensure_name_available(db, changes["name"], exclude_id=product_type.id)
    for field, value in changes.items():
        setattr(product_type, field, value)
    db.commit()
    db.refresh(product_type)
    logger.info("product_type_updated", extra={"product_type_id": product_type.id})
    return to_product_type_out(product_type)


def delete_product_type(db: Session, product_type_id: int) -> ProductTypeOut:
    """Soft-delete the type with its products and sub-categories in one commit."""
    product_type = require_product_type(db, product_type_id)
    product_type.mark_deleted()
    removed = queries.soft_delete_products_of_type(db, product_type.id)
    sub_categories = sub_category_queries.soft_delete_sub_categories_of_type(db, product_type.id)
    db.commit()
    logger.info(
        "product_type_deleted",
        extra={
            "product_type_id": product_type_id,
            "products_deleted": removed,
            "sub_categories_deleted": len(sub_categories),
        },
    )
    return to_product_type_out(product_type)
