from sqlalchemy import Column, DateTime, ForeignKey, Text, func

from prodfind.core.database import Base
from prodfind.models.shared import (
    SoftDeleteMixin,
    UUIDType,
    generate_uuid,
    soft_delete_check,
    utc_now,
)


class Comment(SoftDeleteMixin, Base):
    """Comment on a product; ``parent_id`` links a reply to its top-level comment."""

    __tablename__ = "comments"
    __table_args__ = (soft_delete_check("comments"),)

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    product_id = Column(
        UUIDType, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True
    )
    author_id = Column(UUIDType, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    parent_id = Column(
        UUIDType, ForeignKey("comments.id", ondelete="CASCADE"), nullable=True, index=True
    )
    content = Column(Text, nullable=False)
    created_at = Column(
        DateTime(timezone=True), default=utc_now, server_default=func.now(), index=True
    )
    updated_at = Column(
        DateTime(timezone=True), default=utc_now, server_default=func.now(), onupdate=utc_now
    )
