from collections import defaultdict
from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy import String, cast, or_, select, update
from sqlalchemy.orm import Session, aliased, selectinload

from app.db.models import Collection, CollectionProduct, Product, ProductType, utcnow
from app.queries.common import like_pattern, order_by, paginate
from app.queries.products import occasion_clause
from app.schemas.collections import CollectionFilters

_active = Collection.is_deleted.is_(False)
_SORT_COLUMNS = {
    "name": Collection.name,
    "created_at": Collection.created_at,
    "updated_at": Collection.updated_at,
}


def get_collection_by_id(db: Session, collection_id: int) -> Optional[Collection]:
    return db.scalar(select(Collection).where(Collection.id == collection_id, _active))


def _occasion_filter(occasion: str):
    collection_type = aliased(ProductType)
    pattern = like_pattern(occasion)
    by_own_type = (
        select(collection_type.id)
        .where(collection_type.id == Collection.product_type_id)
        .where(or_(collection_type.name.ilike(pattern), cast(collection_type.allowed_types, String).ilike(pattern)))
    )
    by_products = (
        select(CollectionProduct.id)
        .join(Product, Product.id == CollectionProduct.product_id)
        .join(ProductType, ProductType.id == Product.product_type_id)
        .where(
            CollectionProduct.collection_id == Collection.id,
            CollectionProduct.is_deleted.is_(False),
            Product.is_deleted.is_(False),
            occasion_clause(occasion),
        )
    )
    return or_(by_own_type.exists(), by_products.exists())


def list_collections(db: Session, filters: CollectionFilters) -> Tuple[List[Collection], int]:
    stmt = select(Collection).where(_active)
    if filters.is_active is not None:
        stmt = stmt.where(Collection.is_active.is_(filters.is_active))
    if filters.search:
        pattern = like_pattern(filters.search)
        stmt = stmt.where(or_(Collection.name.ilike(pattern), Collection.description.ilike(pattern)))
    if filters.occasion:
        stmt = stmt.where(_occasion_filter(filters.occasion))
    stmt = order_by(stmt, _SORT_COLUMNS[filters.sort_by], filters.sort_order, Collection.id.desc())
    return paginate(db, stmt, filters.page, filters.limit)


def collection_items(
    db: Session, collection_ids: Sequence[int]
) -> Dict[int, List[Tuple[CollectionProduct, Product]]]:
    """Active join rows with their active products, by position then newest first."""
    grouped: Dict[int, List[Tuple[CollectionProduct, Product]]] = defaultdict(list)
    if not collection_ids:
        return grouped
    stmt = (
        select(CollectionProduct, Product)
        .join(Product, Product.id == CollectionProduct.product_id)
        .options(selectinload(Product.product_type))
        .where(
            CollectionProduct.collection_id.in_(list(collection_ids)),
            CollectionProduct.is_deleted.is_(False),
            Product.is_deleted.is_(False),
        )
        .order_by(CollectionProduct.position.asc(), CollectionProduct.created_at.desc(), CollectionProduct.id.desc())
    )
    for row, product in db.execute(stmt).all():
        grouped[row.collection_id].append((row, product))
    return grouped


def get_collection_product(db: Session, collection_id: int, product_id: int) -> Optional[CollectionProduct]:
    stmt = select(CollectionProduct).where(
        CollectionProduct.collection_id == collection_id,
        CollectionProduct.product_id == product_id,
        CollectionProduct.is_deleted.is_(False),
    )
    return db.scalar(stmt)


def insert_collection(db: Session, **values) -> Collection:
    collection = Collection(**values)
    db.add(collection)
    db.flush()
    return collection


def insert_collection_product(db: Session, collection_id: int, product_id: int, position: int) -> CollectionProduct:
    row = CollectionProduct(collection_id=collection_id, product_id=product_id, position=position)
    db.add(row)
    db.flush()
    return row


def soft_delete_collection_products(db: Session, collection_id: int) -> int:
    result = db.execute(
        update(CollectionProduct)
        .where(CollectionProduct.collection_id == collection_id, CollectionProduct.is_deleted.is_(False))
        .values(is_deleted=True, deleted_at=utcnow())
        .execution_options(synchronize_session="fetch")
    )
    return result.rowcount
