from uuid import UUID

from pydantic import BaseModel, Field

from prodfind.core.config import settings
from prodfind.schemas.notification import NotificationResponse, ProductRemovedMetadata
from prodfind.schemas.product import ProductResponse
from prodfind.schemas.user import SafeUserResponse


class RemoveProductRequest(BaseModel):
    reason: str = Field(default=settings.DEFAULT_REMOVAL_REASON, min_length=1, max_length=1000)


class RejectAppealRequest(BaseModel):
    rejection_reason: str | None = Field(default=None, max_length=1000)


class AppealedProductResponse(BaseModel):
    notification: NotificationResponse
    user: SafeUserResponse | None
    product: ProductResponse | None
    metadata: ProductRemovedMetadata
    has_appeal: bool


class ModerationResult(BaseModel):
    success: bool = True
    product_id: UUID
    notification_id: UUID
