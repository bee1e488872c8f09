from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from prodfind.models.user import UserRole


class UserCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    image: str | None = Field(default=None, max_length=2048)
    role: UserRole = UserRole.USER
    email_verified: bool = False


class SafeUserResponse(BaseModel):
    """Public projection of a user; never includes email or role."""

    id: UUID
    name: str
    image: str | None
    created_at: datetime

    model_config = {"from_attributes": True}


class CurrentUserResponse(SafeUserResponse):
    email: str
    email_verified: bool
    role: str


class SessionResponse(BaseModel):
    session_id: UUID | None = None
    expires_at: datetime | None = None
    user: CurrentUserResponse | None = None
