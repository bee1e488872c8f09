"""User model.

Rows are provisioned by the external auth provider (credentials, social login,
two-factor, passkeys); this service reads them and only ever exposes the safe
columns.
"""

from enum import Enum

from sqlalchemy import Boolean, Column, DateTime, String, func

from prodfind.core.database import Base
from prodfind.models.shared import UUIDType, generate_uuid


class UserRole(str, Enum):
    USER = "user"
    ADMIN = "admin"


class User(Base):
    __tablename__ = "users"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    email_verified = Column(Boolean, nullable=False, default=False)
    image = Column(String(2048), nullable=True)
    role = Column(String(20), nullable=False, default=UserRole.USER.value)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value
