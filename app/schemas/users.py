from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from app.schemas.common import RequestModel


class UserCreate(RequestModel):
    username: str = Field(min_length=1, max_length=80)
    email: Annotated[EmailStr, Field(max_length=120)]
    password: str = Field(min_length=8, max_length=120)
    role: Literal["admin", "superAdmin"]
    phone: Optional[str] = Field(default=None, max_length=20)


class UserLogin(BaseModel):
    model_config = ConfigDict(extra="ignore")

    username: Optional[str] = None
    password: Optional[str] = None


class UserOut(BaseModel):
    id: int
    username: str
    email: str
    role: str
    phone: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UserListItem(BaseModel):
    id: int
    username: str
    email: str
    role: str
    isActive: bool


class UserLoginResponse(BaseModel):
    user: UserOut
    token: str


class UserDeletedResponse(BaseModel):
    message: str
    user: UserOut

