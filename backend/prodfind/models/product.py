"""Product model for published listings."""

from enum import Enum

from sqlalchemy import JSON, Column, DateTime, ForeignKey, String, Text, func

from prodfind.core.database import Base
from prodfind.models.shared import (
    SoftDeleteMixin,
    UUIDType,
    generate_uuid,
    soft_delete_check,
    utc_now,
)


class ProductVisibility(str, Enum):
    PUBLIC = "public"
    PRIVATE = "private"
    UNLISTED = "unlisted"


class Product(SoftDeleteMixin, Base):
    """A product listing.

    Visibility and moderation removal are independent: a removed product is
    hidden from everyone regardless of its visibility tier.
    """

    __tablename__ = "products"
    __table_args__ = (soft_delete_check("products"),)

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    author_id = Column(
        UUIDType, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    short_description = Column(String(500), nullable=True)
    price = Column(String(50), nullable=False)
    images = Column(JSON, nullable=False, default=list)
    icon = Column(String(2048), nullable=True)
    links = Column(JSON, nullable=False, default=list)
    category = Column(JSON, nullable=False, default=list)
    license = Column(String(100), nullable=True)
    visibility = Column(
        String(20), nullable=False, default=ProductVisibility.PUBLIC.value, index=True
    )
    created_at = Column(DateTime(timezone=True), default=utc_now, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), default=utc_now, server_default=func.now(), onupdate=utc_now
    )
