from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from prodfind.schemas.user import SafeUserResponse


class CommentCreate(BaseModel):
    product_id: UUID
    content: str = Field(..., min_length=1, max_length=5000)
    parent_id: UUID | None = None


class CommentUpdate(BaseModel):
    content: str = Field(..., min_length=1, max_length=5000)


class CommentDelete(BaseModel):
    reason: str | None = Field(default=None, min_length=1, max_length=1000)


class CommentResponse(BaseModel):
    id: UUID
    product_id: UUID
    author_id: UUID
    parent_id: UUID | None
    content: str
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None
    deleted_by: UUID | None
    deletion_reason: str | None

    model_config = {"from_attributes": True}


class CommentTreeResponse(CommentResponse):
    author: SafeUserResponse | None
    replies: list[CommentTreeResponse] = Field(default_factory=list)
