from __future__ import annotations

from datetime import datetime
from typing import Annotated, List, Literal, Optional

from pydantic import BaseModel, Field

from app.schemas.common import ListQuery, Pagination, RequestModel, UpdateModel

AllowedTypes = Annotated[List[Annotated[str, Field(max_length=100)]], Field(max_length=50)]


class ProductTypeCreate(RequestModel):
    name: str = Field(min_length=1, max_length=100)
    allowed_types: Optional[AllowedTypes] = None


class ProductTypeUpdate(UpdateModel):
    nullable_fields = frozenset({"allowed_types"})

    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    allowed_types: Optional[AllowedTypes] = None


class ProductTypeFilters(ListQuery):
    search: Optional[str] = Field(default=None, max_length=100)
    occasion: Optional[str] = Field(default=None, max_length=100)
    min_price: Optional[float] = Field(default=None, ge=0, alias="minPrice")
    max_price: Optional[float] = Field(default=None, ge=0, alias="maxPrice")
    sort_by: Literal["name", "created_at"] = "created_at"


class ProductTypeOut(BaseModel):
    id: int
    name: str
    allowed_types: Optional[List[str]] = None
    created_at: Optional[datetime] = None


class ProductTypeListResponse(BaseModel):
    data: List[ProductTypeOut]
    pagination: Pagination


class ProductTypeDeletedResponse(BaseModel):
    message: str
    productType: ProductTypeOut
