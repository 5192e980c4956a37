from __future__ import annotations

import math
from typing import Any, Dict, List, Tuple

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session


def paginate(db: Session, stmt: Select, page: int, limit: int) -> Tuple[List[Any], int]:
    """Return one page of ``stmt`` plus the unpaginated row count."""
    total = db.scalar(select(func.count()).select_from(stmt.order_by(None).subquery())) or 0
    rows = db.execute(stmt.offset((page - 1) * limit).limit(limit)).scalars().all()
    return list(rows), int(total)


def pagination_meta(page: int, limit: int, total: int) -> Dict[str, int]:
    return {"page": page, "limit": limit, "total": total, "pages": math.ceil(total / limit) if limit else 0}


def order_by(stmt: Select, column: Any, sort_order: str, *tiebreakers: Any) -> Select:
    primary = column.asc() if sort_order == "asc" else column.desc()
    return stmt.order_by(primary, *tiebreakers)


def like_pattern(term: str) -> str:
    return f"%{term}%"
