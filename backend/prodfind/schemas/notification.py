"""Pydantic schemas for notifications and their per-action metadata.

Metadata is a tagged union keyed by ``Notification.action``:

* ``product_removed``: :class:`ProductRemovedMetadata` (also carries appeal state)
* ``product_restored`` / ``appeal_rejected``: :class:`ProductStatusMetadata`
* ``comment`` / ``reply``: :class:`ActivityMetadata`
* ``bookmark`` / ``recommendation``: no metadata
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field

from prodfind.models.notification import NotificationAction
from prodfind.schemas.product import ProductSummary
from prodfind.schemas.user import SafeUserResponse

APPEAL_MESSAGE_MIN_LENGTH = 10


class ProductRemovedMetadata(BaseModel):
    product_name: str
    reason: str
    can_appeal: bool = True
    appealed: bool | None = None
    appeal_message: str | None = None
    appeal_date: datetime | None = None
    appeal_rejected: bool | None = None
    rejection_reason: str | None = None
    rejected_by: UUID | None = None
    rejected_at: datetime | None = None

    @property
    def has_appeal(self) -> bool:
        return bool(self.appealed)


class ProductStatusMetadata(BaseModel):
    product_name: str
    message: str


class ActivityMetadata(BaseModel):
    type: str
    title: str
    message: str


NotificationMetadata = ProductRemovedMetadata | ProductStatusMetadata | ActivityMetadata

METADATA_MODELS: dict[NotificationAction, type[BaseModel] | None] = {
    NotificationAction.PRODUCT_REMOVED: ProductRemovedMetadata,
    NotificationAction.PRODUCT_RESTORED: ProductStatusMetadata,
    NotificationAction.APPEAL_REJECTED: ProductStatusMetadata,
    NotificationAction.COMMENT: ActivityMetadata,
    NotificationAction.REPLY: ActivityMetadata,
    NotificationAction.BOOKMARK: None,
    NotificationAction.RECOMMENDATION: None,
}


def build_notification_metadata(
    action: NotificationAction, metadata: BaseModel | None
) -> dict[str, Any] | None:
    """Serialize metadata for storage, enforcing the model registered for ``action``.

    Raises:
        TypeError: If ``metadata`` does not match the action's model.
    """
    expected = METADATA_MODELS[action]
    if expected is None:
        if metadata is not None:
            raise TypeError(f"Action '{action.value}' does not take metadata")
        return None
    if not isinstance(metadata, expected):
        raise TypeError(
            f"Action '{action.value}' requires {expected.__name__}, "
            f"got {type(metadata).__name__}"
        )
    return metadata.model_dump(mode="json", exclude_none=True)


def parse_notification_metadata(
    action: str, raw: dict[str, Any] | None
) -> NotificationMetadata | None:
    """Validate stored metadata against the model for ``action``.

    Raises:
        pydantic.ValidationError: If the stored payload does not match its action.
    """
    model = METADATA_MODELS[NotificationAction(action)]
    if model is None:
        return None
    return model.model_validate(raw or {})  # type: ignore[return-value]


class NotificationResponse(BaseModel):
    id: UUID
    user_id: UUID
    action: NotificationAction
    target: UUID
    actor_id: UUID | None
    read: bool
    created_at: datetime
    metadata: dict[str, Any] | None = Field(
        default=None, validation_alias="notification_metadata"
    )
    actor: SafeUserResponse | None = None
    product: ProductSummary | None = None

    model_config = {"from_attributes": True, "populate_by_name": True}


class NotificationCountResponse(BaseModel):
    unread_count: int


class MarkAllReadResponse(BaseModel):
    marked_count: int


class AppealRequest(BaseModel):
    appeal_message: str = Field(..., min_length=APPEAL_MESSAGE_MIN_LENGTH, max_length=5000)


class AppealResponse(BaseModel):
    success: bool = True
    message: str = "Appeal submitted successfully"
