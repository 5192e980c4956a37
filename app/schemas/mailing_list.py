from __future__ import annotations

from datetime import datetime
from typing import Annotated, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from app.schemas.common import RequestModel

ContactEmail = Annotated[EmailStr, Field(max_length=120)]


class MailingListSubscribe(RequestModel):
    email: ContactEmail


class MailingListEntryOut(BaseModel):
    id: int
    email: str
    created_at: Optional[datetime] = None


class ContactMessage(RequestModel):
    name: str = Field(min_length=1, max_length=120)
    email: ContactEmail
    company: Optional[str] = Field(default=None, max_length=120)
    message: str = Field(min_length=1, max_length=1000)

    @field_validator("company")
    @classmethod
    def blank_company(cls, value: Optional[str]) -> Optional[str]:
        return value or None
