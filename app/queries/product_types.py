from typing import List, Optional, Tuple

from sqlalchemy import String, cast, or_, select, update
from sqlalchemy.orm import Session

from app.db.models import Product, ProductType, utcnow
from app.queries.common import like_pattern, order_by, paginate
from app.schemas.product_types import ProductTypeFilters

_active = ProductType.is_deleted.is_(False)


def get_product_type_by_id(db: Session, product_type_id: int) -> Optional[ProductType]:
    return db.scalar(select(ProductType).where(ProductType.id == product_type_id, _active))


def get_product_type_by_name(db: Session, name: str) -> Optional[ProductType]:
    return db.scalar(select(ProductType).where(ProductType.name == name, _active))


def _products_of_type():
    return select(Product.id).where(Product.product_type_id == ProductType.id, Product.is_deleted.is_(False))


def list_product_types(db: Session, filters: ProductTypeFilters) -> Tuple[List[ProductType], int]:
    stmt = select(ProductType).where(_active)

    if filters.search:
        stmt = stmt.where(ProductType.name.ilike(like_pattern(filters.search)))

    if filters.occasion:
        pattern = like_pattern(filters.occasion)
        with_occasion = _products_of_type().where(Product.extra_properties["occasion"].as_string().ilike(pattern))
        stmt = stmt.where(
            or_(
                ProductType.name.ilike(pattern),
                cast(ProductType.allowed_types, String).ilike(pattern),
                with_occasion.exists(),
            )
        )

    if filters.min_price is not None or filters.max_price is not None:
        in_range = _products_of_type()
        if filters.min_price is not None:
            in_range = in_range.where(Product.price >= filters.min_price)
        if filters.max_price is not None:
            in_range = in_range.where(Product.price <= filters.max_price)
        stmt = stmt.where(in_range.exists())

    sort_column = ProductType.name if filters.sort_by == "name" else ProductType.created_at
    stmt = order_by(stmt, sort_column, filters.sort_order, ProductType.id.desc())
    return paginate(db, stmt, filters.page, filters.limit)


def insert_product_type(db: Session, **values) -> ProductType:
    product_type = ProductType(**values)
    db.add(product_type)
    db.flush()
    return product_type


def soft_delete_products_of_type(db: Session, product_type_id: int) -> int:
    result = db.execute(
        update(Product)
        .where(Product.product_type_id == product_type_id, Product.is_deleted.is_(False))
        .values(is_deleted=True, deleted_at=utcnow())
        .execution_options(synchronize_session="fetch")
    )
    return result.rowcount
