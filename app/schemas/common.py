from __future__ import annotations

from decimal import Decimal
from typing import ClassVar, FrozenSet, Generic, Literal, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator

DataT = TypeVar("DataT")


class RequestModel(BaseModel):
    """Request bodies reject unknown keys."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)


class UpdateModel(RequestModel):
    """Partial update body. Explicit nulls are accepted only for ``nullable_fields``."""

    nullable_fields: ClassVar[FrozenSet[str]] = frozenset()

    @model_validator(mode="after")
    def check_fields(self):
        if not self.model_fields_set:
            raise ValueError("At least one field must be provided for update")
        for name in sorted(self.model_fields_set - self.nullable_fields):
            if getattr(self, name) is None:
                raise ValueError(f'"{name}" must not be null')
        return self

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class ListQuery(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=20, ge=1, le=100)
    sort_order: Literal["asc", "desc"] = "desc"


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class MessageResponse(BaseModel):
    message: str


def money(value: Optional[Decimal]) -> Optional[str]:
    """Render a decimal column with two places, as stored."""
    if value is None:
        return None
    return f"{Decimal(value):.2f}"


class Envelope(BaseModel, Generic[DataT]):
    success: bool = True
    message: str
    data: DataT


class PaginatedEnvelope(Envelope[DataT], Generic[DataT]):
    pagination: Pagination
