from typing import List, Optional, Tuple

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from app.db.models import Product, SubCategory, utcnow
from app.queries.common import like_pattern, order_by, paginate
from app.schemas.sub_categories import SubCategoryFilters

_active = SubCategory.is_deleted.is_(False)


def get_sub_category_by_id(db: Session, sub_category_id: int) -> Optional[SubCategory]:
    return db.scalar(select(SubCategory).where(SubCategory.id == sub_category_id, _active))


def get_sub_category_by_name(db: Session, name: str, product_type_id: int) -> Optional[SubCategory]:
    return db.scalar(
        select(SubCategory).where(
            SubCategory.name == name, SubCategory.product_type_id == product_type_id, _active
        )
    )


def list_sub_categories(db: Session, filters: SubCategoryFilters) -> Tuple[List[SubCategory], int]:
    stmt = select(SubCategory).where(_active)
    if filters.search:
        stmt = stmt.where(SubCategory.name.ilike(like_pattern(filters.search)))
    if filters.product_type_id:
        stmt = stmt.where(SubCategory.product_type_id == filters.product_type_id)

    sort_column = SubCategory.name if filters.sort_by == "name" else SubCategory.created_at
    stmt = order_by(stmt, sort_column, filters.sort_order, SubCategory.id.desc())
    return paginate(db, stmt, filters.page, filters.limit)


def insert_sub_category(db: Session, **values) -> SubCategory:
    sub_category = SubCategory(**values)
    db.add(sub_category)
    db.flush()
    return sub_category


def detach_products(db: Session, sub_category_id: int) -> int:
    """Clear the sub-category link on every product that points at it."""
    result = db.execute(
        update(Product)
        .where(Product.sub_category_id == sub_category_id)
        .values(sub_category_id=None)
        .execution_options(synchronize_session="fetch")
    )
    return result.rowcount


def soft_delete_sub_categories_of_type(db: Session, product_type_id: int) -> List[int]:
    ids = list(
        db.scalars(select(SubCategory.id).where(SubCategory.product_type_id == product_type_id, _active))
    )
    if ids:
        db.execute(
            update(SubCategory)
            .where(SubCategory.id.in_(ids))
            .values(is_deleted=True, deleted_at=utcnow())
            .execution_options(synchronize_session="fetch")
        )
    return ids
