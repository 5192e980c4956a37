from __future__ import annotations

from datetime import datetime
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from app.schemas.common import RequestModel, UpdateModel

CustomerEmail = Annotated[EmailStr, Field(max_length=120)]
CustomerPassword = Annotated[str, Field(min_length=8, max_length=120)]
VerificationCode = Annotated[str, Field(pattern=r"^\d{6}$")]


class CustomerProfile(RequestModel):
    first_name: Optional[str] = Field(default=None, max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)
    phone: Optional[str] = Field(default=None, max_length=20)
    address: Optional[str] = Field(default=None, max_length=500)
    city: Optional[str] = Field(default=None, max_length=100)
    state: Optional[str] = Field(default=None, max_length=100)
    zip_code: Optional[str] = Field(default=None, max_length=20)
    country: Optional[str] = Field(default=None, max_length=100)


class CustomerRegister(CustomerProfile):
    email: CustomerEmail
    password: CustomerPassword


class CustomerUpdate(CustomerProfile, UpdateModel):
    nullable_fields = frozenset(
        {"first_name", "last_name", "phone", "address", "city", "state", "zip_code", "country"}
    )

    email: Optional[CustomerEmail] = None
    password: Optional[CustomerPassword] = None
    is_active: Optional[bool] = None


class CustomerLogin(BaseModel):
    model_config = ConfigDict(extra="ignore")

    email: Optional[str] = None
    password: Optional[str] = None


class VerifyEmailRequest(RequestModel):
    code: VerificationCode


class EmailRequest(RequestModel):
    email: CustomerEmail


class ResetPasswordRequest(RequestModel):
    code: VerificationCode
    password: CustomerPassword


class CustomerOut(BaseModel):
    id: int
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None
    email: str
    is_active: bool
    email_verified: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CustomerLoginResponse(BaseModel):
    customer: CustomerOut
    token: str


class CustomerDeletedResponse(BaseModel):
    message: str
    customer: CustomerOut
