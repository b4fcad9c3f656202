from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field, field_validator

from complaint_desk.models.enums import RoleEnum
from complaint_desk.schemas.common import CamelModel, strip_required


class UserRegister(CamelModel):
    name: str = Field(..., max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    role: RoleEnum = RoleEnum.USER
    department_id: Optional[int] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        return strip_required(value)


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserSummary(CamelModel):
    """Embedded in complaints and comments"""
    id: int
    name: str
    email: Optional[str] = None


class UserRead(CamelModel):
    id: int
    name: str
    email: str
    role: RoleEnum
    department_id: Optional[int] = None
    created_at: datetime


class LoginResponse(CamelModel):
    user: UserRead
    token: str
    token_type: str = "bearer"
