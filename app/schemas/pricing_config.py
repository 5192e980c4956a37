from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Optional

from pydantic import BaseModel, Field, model_validator

from app.schemas.common import RequestModel, UpdateModel

Price = Annotated[Decimal, Field(ge=0, max_digits=10, decimal_places=2)]


class PricingConfigCreate(RequestModel):
    min_price: Price = Decimal("0")
    max_price: Optional[Price] = None
    product_type_id: Optional[int] = Field(default=None, gt=0)

    @model_validator(mode="after")
    def check_range(self):
        if self.max_price is not None and self.max_price < self.min_price:
            raise ValueError("max_price must be greater than or equal to min_price")
        return self


class PricingConfigUpdate(UpdateModel):
    nullable_fields = frozenset({"max_price", "product_type_id"})

    min_price: Optional[Price] = None
    max_price: Optional[Price] = None
    product_type_id: Optional[int] = Field(default=None, gt=0)


class PricingConfigOut(BaseModel):
    id: int
    min_price: str
    max_price: Optional[str] = None
    product_type_id: Optional[int] = None
    created_at: Optional[datetime] = None


class PricingConfigDeletedResponse(BaseModel):
    message: str
    pricingConfig: PricingConfigOut
