from collections import defaultdict
from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy import or_, select, update
from sqlalchemy.orm import Session, selectinload

from app.db.models import Bundle, BundleProduct, Product, utcnow
from app.queries.common import like_pattern, order_by, paginate
from app.schemas.bundles import BundleFilters

_active = Bundle.is_deleted.is_(False)
_SORT_COLUMNS = {
    "name": Bundle.name,
    "created_at": Bundle.created_at,
    "discount_percentage": Bundle.discount_percentage,
}


def get_bundle_by_id(db: Session, bundle_id: int) -> Optional[Bundle]:
    return db.scalar(select(Bundle).where(Bundle.id == bundle_id, _active))


def list_bundles(db: Session, filters: BundleFilters) -> Tuple[List[Bundle], int]:
    stmt = select(Bundle).where(_active)
    if filters.is_active is not None:
        stmt = stmt.where(Bundle.is_active.is_(filters.is_active))
    if filters.search:
        pattern = like_pattern(filters.search)
        stmt = stmt.where(or_(Bundle.name.ilike(pattern), Bundle.description.ilike(pattern)))
    stmt = order_by(stmt, _SORT_COLUMNS[filters.sort_by], filters.sort_order, Bundle.id.desc())
    return paginate(db, stmt, filters.page, filters.limit)


def all_bundles(db: Session) -> List[Bundle]:
    return list(db.execute(select(Bundle).where(_active).order_by(Bundle.id)).scalars())


def bundle_items(db: Session, bundle_ids: Sequence[int]) -> Dict[int, List[Tuple[BundleProduct, Product]]]:
    """Active join rows with their active products, grouped by bundle."""
    grouped: Dict[int, List[Tuple[BundleProduct, Product]]] = defaultdict(list)
    if not bundle_ids:
        return grouped
    stmt = (
        select(BundleProduct, Product)
        .join(Product, Product.id == BundleProduct.product_id)
        .options(selectinload(Product.product_type))
        .where(
            BundleProduct.bundle_id.in_(list(bundle_ids)),
            BundleProduct.is_deleted.is_(False),
            Product.is_deleted.is_(False),
        )
        .order_by(BundleProduct.id)
    )
    for bundle_product, product in db.execute(stmt).all():
        grouped[bundle_product.bundle_id].append((bundle_product, product))
    return grouped


def get_bundle_product(db: Session, bundle_id: int, product_id: int) -> Optional[BundleProduct]:
    stmt = select(BundleProduct).where(
        BundleProduct.bundle_id == bundle_id,
        BundleProduct.product_id == product_id,
        BundleProduct.is_deleted.is_(False),
    )
    return db.scalar(stmt)


def insert_bundle(db: Session, **values) -> Bundle:
    bundle = Bundle(**values)
    db.add(bundle)
    db.flush()
    return bundle


def insert_bundle_product(db: Session, bundle_id: int, product_id: int, quantity: int) -> BundleProduct:
    row = BundleProduct(bundle_id=bundle_id, product_id=product_id, quantity=quantity)
    db.add(row)
    db.flush()
    return row


def soft_delete_bundle_products(db: Session, bundle_id: int) -> int:
    result = db.execute(
        update(BundleProduct)
        .where(BundleProduct.bundle_id == bundle_id, BundleProduct.is_deleted.is_(False))
        .values(is_deleted=True, deleted_at=utcnow())
        .execution_options(synchronize_session="fetch")
    )
    return result.rowcount
