"""Shared model utilities used across all models."""

import uuid
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import CheckConstraint, Column, DateTime, String, Text, TypeDecorator
from sqlalchemy.engine import Dialect


class UUIDType(TypeDecorator[uuid.UUID]):
    """Platform-independent UUID type.

    Uses String(36) for SQLite, native UUID for PostgreSQL.
    """

    impl = String(36)
    cache_ok = True

    def process_bind_param(self, value: Any, dialect: Dialect) -> str | None:
        if value is None:
            return value
        if isinstance(value, uuid.UUID):
            return str(value)
        return str(uuid.UUID(value))

    def process_result_value(self, value: Any, dialect: Dialect) -> uuid.UUID | None:
        if value is None:
            return value
        if isinstance(value, uuid.UUID):
            return value
        return uuid.UUID(value)


def generate_uuid() -> uuid.UUID:
    """Generate a new UUID."""
    return uuid.uuid4()


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(UTC)


class SoftDeleteMixin:
    """Moderation removal marker shared by products and comments.

    ``deleted_at``, ``deleted_by`` and ``deletion_reason`` are set and
    cleared together; see :func:`soft_delete_check`.
    """

    deleted_at = Column(DateTime(timezone=True), nullable=True)
    deleted_by = Column(UUIDType, nullable=True)
    deletion_reason = Column(Text, nullable=True)

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None


def soft_delete_check(table_name: str) -> CheckConstraint:
    return CheckConstraint(
        "(deleted_at IS NULL AND deleted_by IS NULL AND deletion_reason IS NULL)"
        " OR "
        "(deleted_at IS NOT NULL AND deleted_by IS NOT NULL AND deletion_reason IS NOT NULL)",
        name=f"ck_{table_name}_soft_delete_fields",
    )
