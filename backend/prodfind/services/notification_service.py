"""Service for creating and reading in-app notifications."""

from __future__ import annotations

import logging
from uuid import UUID

from pydantic import BaseModel
from sqlalchemy.orm import Session

from prodfind.core.errors import NotFoundError
from prodfind.models.notification import Notification, NotificationAction
from prodfind.models.product import Product
from prodfind.models.user import User
from prodfind.repositories.notification_repository import NotificationRepository
from prodfind.schemas.notification import (
    ActivityMetadata,
    NotificationResponse,
    ProductRemovedMetadata,
    ProductStatusMetadata,
    build_notification_metadata,
)
from prodfind.schemas.product import ProductSummary
from prodfind.schemas.user import SafeUserResponse

logger = logging.getLogger(__name__)

RESTORED_MESSAGE = "Your appeal was approved and your product has been restored"
APPEAL_REJECTED_MESSAGE = "Your appeal was reviewed and rejected"


def to_notification_response(
    notification: Notification,
    actor: User | None = None,
    product: Product | None = None,
) -> NotificationResponse:
    response = NotificationResponse.model_validate(notification)
    return response.model_copy(
        update={
            "actor": SafeUserResponse.model_validate(actor) if actor else None,
            "product": ProductSummary.model_validate(product) if product else None,
        }
    )


class NotificationService:
    """Fans out notifications to the party affected by another user's action.

    Social notifications (bookmark, recommendation, comment, reply) are
    suppressed when the actor is the recipient. Moderation notifications are
    always delivered.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = NotificationRepository(db)

    def notify(
        self,
        *,
        user_id: UUID,
        action: NotificationAction,
        target: UUID,
        actor_id: UUID | None = None,
        metadata: BaseModel | None = None,
        commit: bool = True,
    ) -> Notification:
        """Create a notification, validating ``metadata`` against ``action``."""
        return self.repo.create(
            user_id=user_id,
            action=action,
            target=target,
            actor_id=actor_id,
            metadata=build_notification_metadata(action, metadata),
            commit=commit,
        )

    def _notify_unless_self(
        self,
        *,
        recipient_id: UUID,
        actor_id: UUID,
        action: NotificationAction,
        target: UUID,
        metadata: BaseModel | None = None,
    ) -> Notification | None:
        if recipient_id == actor_id:
            return None
        return self.notify(
            user_id=recipient_id,
            action=action,
            target=target,
            actor_id=actor_id,
            metadata=metadata,
        )

    def notify_bookmark(self, *, product: Product, actor_id: UUID) -> Notification | None:
        return self._notify_unless_self(
            recipient_id=product.author_id,  # type: ignore[arg-type]
            actor_id=actor_id,
            action=NotificationAction.BOOKMARK,
            target=product.id,  # type: ignore[arg-type]
        )

    def notify_recommendation(self, *, product: Product, actor_id: UUID) -> Notification | None:
        return self._notify_unless_self(
            recipient_id=product.author_id,  # type: ignore[arg-type]
            actor_id=actor_id,
            action=NotificationAction.RECOMMENDATION,
            target=product.id,  # type: ignore[arg-type]
        )

    def notify_comment(self, *, product: Product, actor: User) -> Notification | None:
        return self._notify_unless_self(
            recipient_id=product.author_id,  # type: ignore[arg-type]
            actor_id=actor.id,  # type: ignore[arg-type]
            action=NotificationAction.COMMENT,
            target=product.id,  # type: ignore[arg-type]
            metadata=ActivityMetadata(
                type="comment",
                title="New comment on your product",
                message=f"{actor.name or 'Someone'} commented on your product",
            ),
        )

    def notify_reply(
        self, *, parent_author_id: UUID, product_id: UUID, actor: User
    ) -> Notification | None:
        return self._notify_unless_self(
            recipient_id=parent_author_id,
            actor_id=actor.id,  # type: ignore[arg-type]
            action=NotificationAction.REPLY,
            target=product_id,
            metadata=ActivityMetadata(
                type="reply",
                title="New reply to your comment",
                message=f"{actor.name or 'Someone'} replied to your comment",
            ),
        )

    def notify_product_removed(
        self, *, product: Product, admin_id: UUID, reason: str, commit: bool = True
    ) -> Notification:
        return self.notify(
            user_id=product.author_id,  # type: ignore[arg-type]
            action=NotificationAction.PRODUCT_REMOVED,
            target=product.id,  # type: ignore[arg-type]
            actor_id=admin_id,
            metadata=ProductRemovedMetadata(
                product_name=str(product.name), reason=reason, can_appeal=True
            ),
            commit=commit,
        )

    def notify_product_restored(
        self, *, product: Product, admin_id: UUID, commit: bool = True
    ) -> Notification:
        return self.notify(
            user_id=product.author_id,  # type: ignore[arg-type]
            action=NotificationAction.PRODUCT_RESTORED,
            target=product.id,  # type: ignore[arg-type]
            actor_id=admin_id,
            metadata=ProductStatusMetadata(
                product_name=str(product.name), message=RESTORED_MESSAGE
            ),
            commit=commit,
        )

    def notify_appeal_rejected(
        self,
        *,
        user_id: UUID,
        product_id: UUID,
        product_name: str,
        admin_id: UUID,
        commit: bool = True,
    ) -> Notification:
        return self.notify(
            user_id=user_id,
            action=NotificationAction.APPEAL_REJECTED,
            target=product_id,
            actor_id=admin_id,
            metadata=ProductStatusMetadata(
                product_name=product_name, message=APPEAL_REJECTED_MESSAGE
            ),
            commit=commit,
        )

    def list_for_user(
        self,
        user_id: UUID,
        skip: int = 0,
        limit: int = 50,
        action: NotificationAction | None = None,
        read: bool | None = None,
        order_by: str | None = None,
    ) -> list[NotificationResponse]:
        rows = self.repo.get_all(
            user_id, skip=skip, limit=limit, action=action, read=read, order_by=order_by
        )
        return [to_notification_response(n, actor, product) for n, actor, product in rows]

    def count_unread(self, user_id: UUID) -> int:
        return self.repo.count_unread(user_id)

    def mark_as_read(self, notification_id: UUID, user_id: UUID) -> Notification:
        """Mark one of the user's notifications as read.

        Raises:
            NotFoundError: If the notification does not exist or belongs to someone else.
        """
        notification = self.repo.get_by_id(notification_id)
        if notification is None or notification.user_id != user_id:
            raise NotFoundError("Notification not found")
        return self.repo.mark_as_read(notification)

    def mark_all_as_read(self, user_id: UUID) -> int:
        count = self.repo.mark_all_as_read(user_id)
        logger.debug("Marked %d notifications read for user %s", count, user_id)
        return count
