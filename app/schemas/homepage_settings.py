from __future__ import annotations

from datetime import datetime
from typing import Annotated, List, Optional

from pydantic import BaseModel, Field

from app.schemas.common import RequestModel, UpdateModel
from app.schemas.products import ProductOut

SectionImage = Annotated[str, Field(max_length=500, pattern=r"^https?://")]
ProductId = Annotated[int, Field(gt=0)]


class HomepageSettingCreate(RequestModel):
    section_name: str = Field(min_length=1, max_length=100)
    section_title: str = Field(min_length=1, max_length=255)
    section_description: Optional[str] = Field(default=None, max_length=2000)
    section_position: int = Field(ge=0)
    is_active: bool = True
    section_images: List[SectionImage] = Field(default_factory=list)
    product_ids: List[ProductId] = Field(default_factory=list)


class HomepageSettingUpdate(UpdateModel):
    nullable_fields = frozenset({"section_description", "section_images", "product_ids"})

    section_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    section_title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    section_description: Optional[str] = Field(default=None, max_length=2000)
    section_position: Optional[int] = Field(default=None, ge=0)
    is_active: Optional[bool] = None
    section_images: Optional[List[SectionImage]] = None
    product_ids: Optional[List[ProductId]] = None


class HomepageSettingOut(BaseModel):
    id: int
    section_name: str
    section_title: str
    section_description: Optional[str] = None
    section_position: int
    is_active: bool
    section_images: List[str] = Field(default_factory=list)
    product_ids: List[int] = Field(default_factory=list)
    products: List[ProductOut] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class HomepageSettingResponse(BaseModel):
    data: HomepageSettingOut


class HomepageSettingListResponse(BaseModel):
    data: List[HomepageSettingOut]


class HomepageSettingDeletedResponse(BaseModel):
    message: str
    id: int
