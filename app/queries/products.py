from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy import Select, String, and_, case, cast, func, or_, select
from sqlalchemy.orm import Session, contains_eager

from app.db.models import Bundle, BundleProduct, Product, ProductType
from app.queries.common import like_pattern, order_by, paginate
from app.schemas.products import ProductFilters

_SORT_COLUMNS = {
    "name": Product.name,
    "price": Product.price,
    "created_at": Product.created_at,
    "stock": Product.stock,
    "product_type_name": ProductType.name,
}


def active_products() -> Select:
    """Non-deleted products joined to their type so type fields are loaded."""
    return (
        select(Product)
        .join(ProductType, Product.product_type_id == ProductType.id)
        .options(contains_eager(Product.product_type))
        .where(Product.is_deleted.is_(False))
    )


def occasion_clause(occasion: str):
    pattern = like_pattern(occasion)
    return or_(
        ProductType.name.ilike(pattern),
        cast(ProductType.allowed_types, String).ilike(pattern),
        Product.extra_properties["occasion"].as_string().ilike(pattern),
    )


def get_product_by_id(db: Session, product_id: int) -> Optional[Product]:
    return db.scalar(active_products().where(Product.id == product_id))


def get_product_by_name(db: Session, name: str) -> Optional[Product]:
    return db.scalar(active_products().where(Product.name == name))


def get_products_by_ids(db: Session, product_ids: Sequence[int]) -> Dict[int, Product]:
    if not product_ids:
        return {}
    rows = db.execute(active_products().where(Product.id.in_(set(product_ids)))).scalars()
    return {product.id: product for product in rows}


def list_products(db: Session, filters: ProductFilters) -> Tuple[List[Product], int]:
    stmt = active_products()
    if filters.product_type_id:
        stmt = stmt.where(Product.product_type_id == filters.product_type_id)
    if filters.sub_category_id:
        stmt = stmt.where(Product.sub_category_id == filters.sub_category_id)
    if filters.min_price is not None:
        stmt = stmt.where(Product.price >= filters.min_price)
    if filters.max_price is not None:
        stmt = stmt.where(Product.price <= filters.max_price)
    if filters.in_stock is True:
        stmt = stmt.where(Product.stock > 0)
    elif filters.in_stock is False:
        stmt = stmt.where(Product.stock == 0)
    if filters.search:
        pattern = like_pattern(filters.search)
        stmt = stmt.where(
            or_(Product.name.ilike(pattern), Product.description.ilike(pattern), ProductType.name.ilike(pattern))
        )
    if filters.occasion:
        stmt = stmt.where(occasion_clause(filters.occasion))

    stmt = order_by(stmt, _SORT_COLUMNS[filters.sort_by], filters.sort_order, Product.id.desc())
    return paginate(db, stmt, filters.page, filters.limit)


def featured_products(db: Session, limit: int) -> List[Product]:
    stmt = (
        active_products()
        .where(Product.stock > 0)
        .order_by(Product.created_at.desc(), Product.id.desc())
        .limit(limit)
    )
    return list(db.execute(stmt).scalars())


def products_by_type(db: Session, product_type_id: int, limit: int) -> List[Product]:
    stmt = (
        active_products()
        .where(Product.product_type_id == product_type_id)
        .order_by(Product.created_at.desc(), Product.id.desc())
        .limit(limit)
    )
    return list(db.execute(stmt).scalars())


def low_stock_products(db: Session, threshold: int) -> List[Product]:
    stmt = (
        active_products()
        .where(Product.stock > 0, Product.stock <= threshold)
        .order_by(Product.stock.asc(), Product.id)
    )
    return list(db.execute(stmt).scalars())


def stock_counts(db: Session, threshold: int) -> Dict[str, int]:
    stmt = select(
        func.count(Product.id),
        func.coalesce(func.sum(case((Product.stock > 0, 1), else_=0)), 0),
        func.coalesce(func.sum(case((Product.stock == 0, 1), else_=0)), 0),
        func.coalesce(func.sum(case((and_(Product.stock > 0, Product.stock <= threshold), 1), else_=0)), 0),
    ).where(Product.is_deleted.is_(False))
    total, in_stock, out_of_stock, low_stock = db.execute(stmt).one()
    return {
        "total_products": int(total),
        "in_stock_count": int(in_stock),
        "out_of_stock_count": int(out_of_stock),
        "low_stock_count": int(low_stock),
    }


def co_bundled_products(db: Session, product_id: int, limit: int) -> List[Tuple[Product, int]]:
    """Products sharing active bundles with ``product_id``, most shared bundles first."""
    source = select(BundleProduct.bundle_id).where(
        BundleProduct.product_id == product_id, BundleProduct.is_deleted.is_(False)
    )
    shared = func.count(func.distinct(BundleProduct.bundle_id)).label("shared_bundles_count")
    stmt = (
        select(Product, shared)
        .join(BundleProduct, BundleProduct.product_id == Product.id)
        .join(Bundle, Bundle.id == BundleProduct.bundle_id)
        .where(
            BundleProduct.bundle_id.in_(source),
            BundleProduct.is_deleted.is_(False),
            Bundle.is_deleted.is_(False),
            Product.is_deleted.is_(False),
            Product.id != product_id,
        )
        .group_by(Product.id)
        .order_by(shared.desc(), Product.id)
        .limit(limit)
    )
    return [(product, int(count)) for product, count in db.execute(stmt).all()]


def same_type_products(
    db: Session,
    product: Product,
    exclude_ids: Sequence[int],
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
) -> List[Product]:
    stmt = active_products().where(
        Product.product_type_id == product.product_type_id,
        Product.stock > 0,
        Product.id.not_in(list(exclude_ids)),
    )
    if min_price is not None:
        stmt = stmt.where(Product.price >= min_price)
    if max_price is not None:
        stmt = stmt.where(Product.price <= max_price)
    return list(db.execute(stmt.order_by(Product.created_at.desc(), Product.id.desc())).scalars())


def insert_product(db: Session, **values) -> Product:
    product = Product(**values)
    db.add(product)
    db.flush()
    return product
