from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from app.schemas.common import ListQuery, Pagination, RequestModel, UpdateModel

ORDER_STATUSES = ("pending", "processing", "shipped", "delivered", "cancelled")
PAYMENT_STATUSES = ("pending", "processing", "completed", "failed", "refunded")

OrderStatus = Literal["pending", "processing", "shipped", "delivered", "cancelled"]
PaymentStatus = Literal["pending", "processing", "completed", "failed", "refunded"]


class OrderItemCreate(RequestModel):
    product_id: int = Field(gt=0)
    quantity: int = Field(gt=0)
    metadata: Optional[Dict[str, Any]] = None


class OrderCreate(RequestModel):
    user_id: Optional[int] = Field(default=None, gt=0)
    items: List[OrderItemCreate] = Field(min_length=1)
    delivery_option_id: Optional[int] = Field(default=None, gt=0)
    delivery_address: Optional[str] = Field(default=None, max_length=500)
    customer_email: Optional[Annotated[EmailStr, Field(max_length=120)]] = None
    customer_phone: Optional[str] = Field(default=None, max_length=20)
    customer_name: Optional[str] = Field(default=None, max_length=160)
    customer_password: Optional[str] = Field(default=None, min_length=8, max_length=120)
    register_customer: bool = False
    metadata: Optional[Dict[str, Any]] = None


class OrderUpdate(UpdateModel):
    nullable_fields = frozenset({"payment_reference", "delivery_address"})

    status: Optional[OrderStatus] = None
    payment_status: Optional[PaymentStatus] = None
    payment_reference: Optional[str] = Field(default=None, max_length=100)
    delivery_address: Optional[str] = Field(default=None, max_length=500)


class OrderFilters(ListQuery):
    user_id: Optional[int] = Field(default=None, gt=0)
    status: Optional[OrderStatus] = None
    payment_status: Optional[PaymentStatus] = None
    customer_email: Optional[EmailStr] = None
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None
    sort_by: Literal["created_at", "total_price", "status", "payment_status"] = "created_at"

    def applied(self) -> Dict[str, Any]:
        return self.model_dump(
            mode="json", exclude_none=True, exclude={"page", "limit", "sort_by", "sort_order"}
        )


MY_ORDERS_MAX_LIMIT = 50


class OrderLimitQuery(BaseModel):
    model_config = ConfigDict(extra="ignore")

    limit: int = Field(default=10, ge=1)


class OrderItemOut(BaseModel):
    id: int
    order_id: int
    product_id: int
    product_name: Optional[str] = None
    quantity: int
    price: str
    metadata: Optional[Dict[str, Any]] = None
    created_at: Optional[datetime] = None


class OrderOut(BaseModel):
    id: int
    user_id: Optional[int] = None
    quantity: int
    subtotal: str
    delivery_cost: str
    total_price: str
    delivery_option_id: Optional[int] = None
    delivery_option_name: Optional[str] = None
    status: str
    payment_status: str
    payment_reference: Optional[str] = None
    reference: str
    delivery_address: Optional[str] = None
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    customer_name: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    items: List[OrderItemOut] = Field(default_factory=list)


class OrderCreatedOut(OrderOut):
    customer_registered: Optional[bool] = None
    customer_id: Optional[int] = None


class OrderListResponse(BaseModel):
    data: List[OrderOut]
    pagination: Pagination
    filters_applied: Dict[str, Any]


class OrderStats(BaseModel):
    total_orders: int
    pending_payments: int
    completed_payments: int
    pending_orders: int
    processing_orders: int
    completed_orders: int
    total_revenue: str
