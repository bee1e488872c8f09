"""Notification model for the in-app notification feed."""

from enum import Enum

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Integer, String, func

from prodfind.core.database import Base
from prodfind.models.shared import UUIDType, generate_uuid, utc_now


class NotificationAction(str, Enum):
    PRODUCT_REMOVED = "product_removed"
    PRODUCT_RESTORED = "product_restored"
    APPEAL_REJECTED = "appeal_rejected"
    BOOKMARK = "bookmark"
    RECOMMENDATION = "recommendation"
    COMMENT = "comment"
    REPLY = "reply"


class Notification(Base):
    """Notification delivered to ``user_id`` about the product ``target``.

    Rows are never deleted. After creation only ``read`` changes, plus the
    metadata of ``product_removed`` rows, which carries the appeal state.
    """

    __tablename__ = "notifications"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    user_id = Column(
        UUIDType, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    action = Column(String(50), nullable=False, index=True)
    # No FK: notifications outlive hard-deleted products.
    target = Column(UUIDType, nullable=False, index=True)
    actor_id = Column(UUIDType, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    read = Column(Boolean, nullable=False, default=False, index=True)
    notification_metadata = Column("metadata", JSON, nullable=True)
    # Bumped on every metadata write; appeal updates compare against it.
    metadata_version = Column(Integer, nullable=False, default=0, server_default="0")
    created_at = Column(DateTime(timezone=True), default=utc_now, server_default=func.now())
