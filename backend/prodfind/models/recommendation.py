from sqlalchemy import Column, DateTime, ForeignKey, UniqueConstraint, func

from prodfind.core.database import Base
from prodfind.models.shared import UUIDType, generate_uuid, utc_now


class Recommendation(Base):
    """A user's public endorsement of a product; counted on every listing."""

    __tablename__ = "recommendations"
    __table_args__ = (
        UniqueConstraint("product_id", "user_id", name="uq_recommendations_product_user"),
    )

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    product_id = Column(
        UUIDType, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id = Column(
        UUIDType, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_at = Column(DateTime(timezone=True), default=utc_now, server_default=func.now())
