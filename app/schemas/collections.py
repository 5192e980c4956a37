from __future__ import annotations

from datetime import datetime
from typing import Annotated, List, Literal, Optional

from pydantic import BaseModel, Field

from app.schemas.common import ListQuery, RequestModel, UpdateModel
from app.schemas.products import ProductOut

CollectionImages = List[Annotated[str, Field(max_length=500)]]


class CollectionItemIn(RequestModel):
    product_id: int = Field(gt=0)
    position: int = Field(default=0, ge=0)


class CollectionCreate(RequestModel):
    name: str = Field(min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=2000)
    image: Optional[CollectionImages] = None
    product_type_id: Optional[int] = Field(default=None, gt=0)
    is_active: bool = True
    products: Optional[List[CollectionItemIn]] = Field(default=None, min_length=1)


class CollectionUpdate(UpdateModel):
    nullable_fields = frozenset({"description", "image", "product_type_id"})

    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=2000)
    image: Optional[CollectionImages] = None
    product_type_id: Optional[int] = Field(default=None, gt=0)
    is_active: Optional[bool] = None
    products: Optional[List[CollectionItemIn]] = None


class CollectionBulkAdd(RequestModel):
    products: List[CollectionItemIn] = Field(min_length=1, max_length=50)


class CollectionPositionUpdate(RequestModel):
    position: int = Field(ge=0)


class CollectionFilters(ListQuery):
    is_active: Optional[bool] = None
    search: Optional[str] = Field(default=None, min_length=1, max_length=100)
    occasion: Optional[str] = Field(default=None, min_length=1, max_length=100)
    sort_by: Literal["name", "created_at", "updated_at"] = "created_at"


class CollectionProductOut(ProductOut):
    collection_product_id: int
    position: int


class CollectionOut(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    image: Optional[List[str]] = None
    product_type_id: Optional[int] = None
    product_type_name: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    products: List[CollectionProductOut] = Field(default_factory=list)
    products_count: int = 0
    total_value: float = 0.0
