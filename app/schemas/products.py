from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.common import ListQuery, Pagination, RequestModel, UpdateModel

ImageUrl = Annotated[str, Field(max_length=2048, pattern=r"^https?://\S+$")]
ProductImages = Annotated[List[ImageUrl], Field(max_length=10)]
Price = Annotated[Decimal, Field(gt=0, max_digits=10, decimal_places=2)]


class ProductCreate(RequestModel):
    name: str = Field(min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=2000)
    price: Price
    stock: int = Field(default=0, ge=0)
    product_type_id: int = Field(gt=0)
    sub_category_id: Optional[int] = Field(default=None, gt=0)
    images: Optional[ProductImages] = None
    extra_properties: Optional[Dict[str, Any]] = None


class ProductUpdate(UpdateModel):
    nullable_fields = frozenset({"description", "sub_category_id", "images", "extra_properties"})

    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=2000)
    price: Optional[Price] = None
    stock: Optional[int] = Field(default=None, ge=0)
    product_type_id: Optional[int] = Field(default=None, gt=0)
    sub_category_id: Optional[int] = Field(default=None, gt=0)
    images: Optional[ProductImages] = None
    extra_properties: Optional[Dict[str, Any]] = None


class ProductFilters(ListQuery):
    product_type_id: Optional[int] = Field(default=None, gt=0)
    sub_category_id: Optional[int] = Field(default=None, gt=0)
    min_price: Optional[float] = Field(default=None, ge=0, alias="minPrice")
    max_price: Optional[float] = Field(default=None, ge=0, alias="maxPrice")
    in_stock: Optional[bool] = None
    search: Optional[str] = Field(default=None, max_length=200)
    occasion: Optional[str] = Field(default=None, max_length=100)
    sort_by: Literal["name", "price", "created_at", "stock", "product_type_name"] = "created_at"

    def applied(self) -> Dict[str, Any]:
        return self.model_dump(
            exclude_none=True, by_alias=True, exclude={"page", "limit", "sort_by", "sort_order"}
        )


class ProductSearchQuery(ProductFilters):
    q: Optional[str] = Field(default=None, max_length=200)


class FeaturedQuery(BaseModel):
    model_config = ConfigDict(extra="ignore")

    limit: int = Field(default=10, ge=1, le=50)


class ProductsByTypeQuery(BaseModel):
    model_config = ConfigDict(extra="ignore")

    limit: int = Field(default=20, ge=1, le=100)


class LowStockQuery(BaseModel):
    model_config = ConfigDict(extra="ignore")

    threshold: int = Field(default=10, ge=1)


class SimilarProductsQuery(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    limit: int = Field(default=10, ge=1, le=50)
    min_price: Optional[float] = Field(default=None, ge=0, alias="minPrice")
    max_price: Optional[float] = Field(default=None, ge=0, alias="maxPrice")


class StockUpdate(RequestModel):
    quantity: int = Field(gt=0)
    operation: Literal["increase", "decrease"]


class BulkStockItem(StockUpdate):
    product_id: int = Field(gt=0)


class BulkStockUpdate(RequestModel):
    updates: List[BulkStockItem] = Field(min_length=1, max_length=50)


class ProductOut(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    price: str
    stock: int
    product_type_id: int
    product_type_name: Optional[str] = None
    sub_category_id: Optional[int] = None
    images: Optional[List[str]] = None
    extra_properties: Optional[Dict[str, Any]] = None
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None
    in_stock: bool
    stock_status: Literal["in_stock", "low_stock", "out_of_stock"]


class ProductListResponse(BaseModel):
    products: List[ProductOut]
    pagination: Pagination
    filters_applied: Dict[str, Any]


class ProductDeletedResponse(BaseModel):
    message: str
    product: ProductOut


class AvailabilityResponse(BaseModel):
    available: bool
    reason: Optional[str] = None
    available_stock: Optional[int] = None


class ProductStats(BaseModel):
    total_products: int
    in_stock_count: int
    out_of_stock_count: int
    low_stock_count: int
    low_stock_threshold: int


class StockUpdateSuccess(BaseModel):
    product_id: int
    success: bool = True
    product: ProductOut


class StockUpdateFailure(BaseModel):
    product_id: int
    success: bool = False
    error: str


class BulkStockResult(BaseModel):
    successful_updates: List[StockUpdateSuccess]
    failed_updates: List[StockUpdateFailure]
    total_processed: int
    successful_count: int
    failed_count: int
