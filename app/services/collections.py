from __future__ import annotations

import logging
from decimal import Decimal
from typing import Dict, List, Sequence, Tuple

from sqlalchemy.orm import Session

from app.core.errors import ConflictError, NotFoundError
from app.db.models import Collection, CollectionProduct, Product
from app.queries import collections as queries
from app.queries import products as product_queries
from app.queries.common import pagination_meta
from app.schemas.collections import (
    CollectionCreate,
    CollectionFilters,
    CollectionItemIn,
    CollectionOut,
    CollectionProductOut,
    CollectionUpdate,
)
from app.services.bundles import round_money
from app.services.product_types import require_product_type
from app.services.products import to_product_out

logger = logging.getLogger("app.collections")

CollectionItems = Sequence[Tuple[CollectionProduct, Product]]


def to_collection_out(collection: Collection, items: CollectionItems) -> CollectionOut:
    total_value = sum((Decimal(product.price) for _row, product in items), Decimal("0"))
    return CollectionOut(
        id=collection.id,
        name=collection.name,
        description=collection.description,
        image=collection.image,
        product_type_id=collection.product_type_id,
        product_type_name=collection.product_type.name if collection.product_type else None,
        is_active=collection.is_active,
        created_at=collection.created_at,
        updated_at=collection.updated_at,
        products=[
            CollectionProductOut(
                **to_product_out(product).model_dump(),
                collection_product_id=row.id,
                position=row.position,
            )
            for row, product in items
        ],
        products_count=len(items),
        total_value=float(round_money(total_value)),
    )


def require_collection(db: Session, collection_id: int) -> Collection:
    collection = queries.get_collection_by_id(db, collection_id)
    if not collection:
        raise NotFoundError("Collection not found")
    return collection


def _collection_out(db: Session, collection_id: int) -> CollectionOut:
    db.expire_all()
    collection = require_collection(db, collection_id)
    return to_collection_out(collection, queries.collection_items(db, [collection.id])[collection.id])


def _attach_products(db: Session, collection_id: int, items: List[CollectionItemIn]) -> None:
    products = product_queries.get_products_by_ids(db, [item.product_id for item in items])
    seen = set()
    for item in items:
        if item.product_id not in products:
            raise NotFoundError(f"Product with ID {item.product_id} does not exist")
        if item.product_id in seen or queries.get_collection_product(db, collection_id, item.product_id):
            raise ConflictError("Product is already in this collection")
        seen.add(item.product_id)
        queries.insert_collection_product(db, collection_id, item.product_id, item.position)


def create_collection(db: Session, payload: CollectionCreate) -> CollectionOut:
    if payload.product_type_id is not None:
        require_product_type(db, payload.product_type_id)
    collection = queries.insert_collection(
        db,
        name=payload.name,
        description=payload.description,
        image=payload.image,
        product_type_id=payload.product_type_id,
        is_active=payload.is_active,
    )
    if payload.products:
        _attach_products(db, collection.id, payload.products)
    db.commit()
    logger.info("collection_created", extra={"collection_id": collection.id})
    return _collection_out(db, collection.id)


def get_collection(db: Session, collection_id: int) -> CollectionOut:
    return _collection_out(db, collection_id)


def list_collections(db: Session, filters: CollectionFilters) -> Tuple[List[CollectionOut], Dict[str, int]]:
    rows, total = queries.list_collections(db, filters)
    items = queries.collection_items(db, [row.id for row in rows])
    data = [to_collection_out(row, items[row.id]) for row in rows]
    return data, pagination_meta(filters.page, filters.limit, total)


def update_collection(db: Session, collection_id: int, payload: CollectionUpdate) -> CollectionOut:
    """Apply field changes; a products list replaces the whole membership."""
    collection = require_collection(db, collection_id)
    changes = payload.changes()
    products = changes.pop("products", None)
    if changes.get("product_type_id") is not None:
        require_product_type(db, changes["product_type_id"])
    for field, value in changes.items():
        setattr(collection, field, value)
    if products is not None:
        queries.soft_delete_collection_products(db, collection.id)
        db.flush()
        _attach_products(db, collection.id, payload.products)
    db.commit()
    logger.info("collection_updated", extra={"collection_id": collection_id})
    return _collection_out(db, collection_id)


def delete_collection(db: Session, collection_id: int) -> CollectionOut:
    collection = require_collection(db, collection_id)
    snapshot = to_collection_out(collection, queries.collection_items(db, [collection.id])[collection.id])
    collection.mark_deleted()
    removed = queries.soft_delete_collection_products(db, collection.id)
    db.commit()
    logger.info("collection_deleted", extra={"collection_id": collection_id, "items_deleted": removed})
    return snapshot


def add_products(db: Session, collection_id: int, items: List[CollectionItemIn]) -> CollectionOut:
    require_collection(db, collection_id)
    _attach_products(db, collection_id, items)
    db.commit()
    logger.info("collection_products_added", extra={"collection_id": collection_id, "count": len(items)})
    return _collection_out(db, collection_id)


def _require_member(db: Session, collection_id: int, product_id: int) -> CollectionProduct:
    require_collection(db, collection_id)
    row = queries.get_collection_product(db, collection_id, product_id)
    if not row:
        raise NotFoundError("Product is not in this collection")
    return row


def update_product_position(db: Session, collection_id: int, product_id: int, position: int) -> CollectionOut:
    row = _require_member(db, collection_id, product_id)
    row.position = position
    db.commit()
    return _collection_out(db, collection_id)


def remove_product(db: Session, collection_id: int, product_id: int) -> CollectionOut:
    row = _require_member(db, collection_id, product_id)
    row.mark_deleted()
    db.commit()
    logger.info("collection_product_removed", extra={"collection_id": collection_id, "product_id": product_id})
    return _collection_out(db, collection_id)
