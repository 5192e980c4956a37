from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from app.schemas.common import ListQuery, Pagination, RequestModel, UpdateModel


class SubCategoryCreate(RequestModel):
    name: str = Field(min_length=1, max_length=100)
    product_type_id: int = Field(gt=0)


class SubCategoryUpdate(UpdateModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    product_type_id: Optional[int] = Field(default=None, gt=0)


class SubCategoryFilters(ListQuery):
    search: Optional[str] = Field(default=None, max_length=100)
    product_type_id: Optional[int] = Field(default=None, gt=0)
    sort_by: Literal["name", "created_at"] = "created_at"


class SubCategoryOut(BaseModel):
    id: int
    name: str
    product_type_id: int
    created_at: Optional[datetime] = None


class SubCategoryListResponse(BaseModel):
    data: List[SubCategoryOut]
    pagination: Pagination


class SubCategoryDeletedResponse(BaseModel):
    message: str
    subCategory: SubCategoryOut
