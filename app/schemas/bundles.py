from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.common import ListQuery, RequestModel, UpdateModel
from app.schemas.products import ProductOut


class BundleItemIn(RequestModel):
    product_id: int = Field(gt=0)
    quantity: int = Field(default=1, gt=0)


class BundleCreate(RequestModel):
    name: str = Field(min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=2000)
    discount_percentage: Optional[Decimal] = Field(default=None, ge=0, le=100, decimal_places=2)
    is_active: bool = True
    products: List[BundleItemIn] = Field(min_length=1)


class BundleUpdate(UpdateModel):
    nullable_fields = frozenset({"description", "discount_percentage"})

    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=2000)
    discount_percentage: Optional[Decimal] = Field(default=None, ge=0, le=100, decimal_places=2)
    is_active: Optional[bool] = None


class BundleBulkAdd(RequestModel):
    products: List[BundleItemIn] = Field(min_length=1, max_length=50)


class BundleQuantityUpdate(RequestModel):
    quantity: int = Field(gt=0)


class BundleFilters(ListQuery):
    is_active: Optional[bool] = None
    search: Optional[str] = Field(default=None, min_length=1, max_length=100)
    sort_by: Literal["name", "created_at", "discount_percentage"] = "created_at"


class SimilarQuery(BaseModel):
    model_config = ConfigDict(extra="ignore")

    limit: int = Field(default=10, ge=1, le=50)


class BundleProductOut(BaseModel):
    bundle_product_id: int
    quantity: int
    product_id: int
    product_name: str
    product_description: Optional[str] = None
    product_price: str
    product_stock: int
    product_images: Optional[List[str]] = None
    product_type_name: Optional[str] = None


class BundleOut(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    discount_percentage: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    products: List[BundleProductOut] = Field(default_factory=list)
    products_count: int = 0
    total_value: float = 0.0


class BundlePrice(BaseModel):
    bundle_id: int
    original_price: float
    discount_percentage: float
    discount_amount: float
    final_price: float
    products_count: int


class BundleStats(BaseModel):
    total_bundles: int
    active_bundles: int
    inactive_bundles: int
    average_products_per_bundle: float
    total_bundle_value: float


class SharedBundleProduct(ProductOut):
    shared_bundles_count: int
