from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Optional

from pydantic import BaseModel, Field

from app.schemas.common import RequestModel, UpdateModel

Amount = Annotated[Decimal, Field(gt=0, max_digits=10, decimal_places=2)]


class DeliveryOptionCreate(RequestModel):
    name: str = Field(min_length=1, max_length=100)
    amount: Amount


class DeliveryOptionUpdate(UpdateModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    amount: Optional[Amount] = None


class DeliveryOptionOut(BaseModel):
    id: int
    name: str
    amount: str
    created_at: Optional[datetime] = None


class DeliveryOptionDeletedResponse(BaseModel):
    message: str
    deliveryOption: DeliveryOptionOut
