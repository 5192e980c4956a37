from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any, Dict, List, Literal, Optional

from pydantic import BaseModel, EmailStr, Field

from app.schemas.common import ListQuery, Pagination, RequestModel, UpdateModel
from app.schemas.orders import OrderStatus

DeliveryStatus = Literal["pending", "in_transit", "delivered", "failed"]
Amount = Annotated[Decimal, Field(gt=0, max_digits=10, decimal_places=2)]
Colors = List[Annotated[str, Field(min_length=1, max_length=50)]]


class PersonalizedOrderCreate(RequestModel):
    custom_message: str = Field(min_length=1, max_length=5000)
    selected_colors: Optional[Colors] = None
    product_type: str = Field(min_length=1, max_length=100)
    metadata: Optional[Dict[str, Any]] = None
    amount: Amount
    customer_email: Annotated[EmailStr, Field(max_length=120)]
    customer_phone: Optional[str] = Field(default=None, max_length=20)
    customer_name: Optional[str] = Field(default=None, max_length=200)
    delivery_address: Optional[str] = Field(default=None, max_length=500)


class PersonalizedOrderUpdate(UpdateModel):
    nullable_fields = frozenset({"selected_colors", "metadata"})

    custom_message: Optional[str] = Field(default=None, min_length=1, max_length=5000)
    selected_colors: Optional[Colors] = None
    product_type: Optional[str] = Field(default=None, min_length=1, max_length=100)
    metadata: Optional[Dict[str, Any]] = None
    amount: Optional[Amount] = None
    order_status: Optional[OrderStatus] = None
    delivery_status: Optional[DeliveryStatus] = None


class PersonalizedOrderFilters(ListQuery):
    order_status: Optional[OrderStatus] = None
    delivery_status: Optional[DeliveryStatus] = None
    product_type: Optional[str] = Field(default=None, max_length=100)
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None
    sort_by: Literal["created_at", "amount", "order_status", "delivery_status"] = "created_at"


class PersonalizedOrderOut(BaseModel):
    id: int
    custom_message: str
    selected_colors: Optional[List[str]] = None
    product_type: str
    metadata: Optional[Dict[str, Any]] = None
    amount: str
    customer_email: str
    customer_phone: Optional[str] = None
    customer_name: Optional[str] = None
    delivery_address: Optional[str] = None
    payment_status: str
    payment_reference: Optional[str] = None
    reference: str
    order_status: str
    delivery_status: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PersonalizedOrderListResponse(BaseModel):
    data: List[PersonalizedOrderOut]
    pagination: Pagination
