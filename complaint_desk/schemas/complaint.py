from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator, model_validator

from complaint_desk.models.enums import ComplaintStatusEnum, PriorityEnum
from complaint_desk.schemas.common import CamelModel, strip_required
from complaint_desk.schemas.department import CategoryRead
from complaint_desk.schemas.user import UserSummary


class ComplaintCreate(CamelModel):
    title: str = Field(..., max_length=255)
    description: str = Field(..., max_length=5000)
    category_id: int
    priority: PriorityEnum = PriorityEnum.MEDIUM

    @field_validator("title", "description")
    @classmethod
    def strip_text(cls, value):
        return strip_required(value)


# Fields that may be patched but never cleared
NON_NULLABLE_UPDATE_FIELDS = ("title", "description", "category_id", "priority", "status")


class ComplaintUpdate(CamelModel):
    """Partial update; only fields present in the request body are applied"""
    title: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = Field(None, max_length=5000)
    category_id: Optional[int] = None
    priority: Optional[PriorityEnum] = None
    status: Optional[ComplaintStatusEnum] = None
    assigned_to_id: Optional[int] = None

    @field_validator("title", "description")
    @classmethod
    def strip_text(cls, value):
        return strip_required(value)

    @model_validator(mode="after")
    def reject_nulls(self):
        for name in NON_NULLABLE_UPDATE_FIELDS:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


class ComplaintFilters(CamelModel):
    """Client-supplied list filters; narrowed further by the caller's scope"""
    status: Optional[ComplaintStatusEnum] = None
    priority: Optional[PriorityEnum] = None
    category_id: Optional[int] = None
    reporter_id: Optional[int] = None
    assigned_to_id: Optional[int] = None
    search: Optional[str] = None
    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1, le=100)


class CommentCreate(CamelModel):
    message: str = Field(..., max_length=2000)

    @field_validator("message")
    @classmethod
    def strip_text(cls, value):
        return strip_required(value)


class CommentRead(CamelModel):
    id: int
    complaint_id: int
    user_id: int
    message: str
    created_at: datetime
    author: UserSummary


class AttachmentRead(CamelModel):
    id: int
    complaint_id: int
    original_name: str
    stored_path: str
    size_bytes: int
    mime_type: Optional[str] = None
    created_at: datetime


class ComplaintRead(CamelModel):
    id: int
    title: str
    description: str
    category_id: int
    reporter_id: int
    assigned_to_id: Optional[int] = None
    status: ComplaintStatusEnum
    priority: PriorityEnum
    created_at: datetime
    updated_at: datetime
    resolved_at: Optional[datetime] = None

    category: CategoryRead
    reporter: UserSummary
    assigned_to: Optional[UserSummary] = None


class ComplaintDetail(ComplaintRead):
    comments: List[CommentRead] = []
    attachments: List[AttachmentRead] = []


class ComplaintPage(CamelModel):
    items: List[ComplaintRead]
    total: int
    page: int
    limit: int
