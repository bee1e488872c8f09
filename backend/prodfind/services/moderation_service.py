"""Product moderation and appeal workflow.

Lifecycle of a product under moderation::

    Active --remove--> Removed --appeal--> AppealPending --reject--> AppealRejected
                          ^                     |
                          +------ restore ------+--> Active

Appeal state lives in the metadata of the ``product_removed`` notification
sent to the author; no separate appeal table exists. Restore only requires the
product to be removed, so an admin may restore regardless of appeal outcome.
"""

from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy.orm import Session

from prodfind.core.errors import ConflictError, ForbiddenError, InvalidRequestError, NotFoundError
from prodfind.models.notification import Notification, NotificationAction
from prodfind.models.shared import utc_now
from prodfind.models.user import User
from prodfind.repositories.notification_repository import NotificationRepository
from prodfind.repositories.product_repository import ProductRepository
from prodfind.schemas.moderation import AppealedProductResponse
from prodfind.schemas.notification import (
    APPEAL_MESSAGE_MIN_LENGTH,
    ProductRemovedMetadata,
    build_notification_metadata,
    parse_notification_metadata,
)
from prodfind.schemas.product import ProductResponse
from prodfind.schemas.user import SafeUserResponse
from prodfind.services.notification_service import NotificationService, to_notification_response

logger = logging.getLogger(__name__)

DEFAULT_REJECTION_REASON = "Appeal was reviewed and rejected"


def _require_admin(actor: User) -> None:
    if not actor.is_admin:
        raise ForbiddenError("Admin access required")


def _removal_metadata(notification: Notification) -> ProductRemovedMetadata:
    """Re-validate the stored removal metadata; a malformed payload propagates."""
    metadata = parse_notification_metadata(
        str(notification.action), notification.notification_metadata  # type: ignore[arg-type]
    )
    assert isinstance(metadata, ProductRemovedMetadata)
    return metadata


class ModerationService:
    def __init__(self, db: Session):
        self.db = db
        self.product_repo = ProductRepository(db)
        self.notification_repo = NotificationRepository(db)
        self.notifications = NotificationService(db)

    def remove_product(self, product_id: UUID, actor: User, reason: str) -> Notification:
        """Soft delete a product and notify its author.

        Raises:
            ForbiddenError: If ``actor`` is not an admin.
            NotFoundError: If the product does not exist.
            ConflictError: If the product is already removed.
        """
        _require_admin(actor)
        product = self.product_repo.get_by_id(product_id, include_deleted=True)
        if product is None:
            raise NotFoundError("Product not found")
        if product.is_deleted:
            raise ConflictError("Product is already removed")

        if not self.product_repo.soft_delete(
            product_id, deleted_by=actor.id, reason=reason, commit=False  # type: ignore[arg-type]
        ):
            self.db.rollback()
            raise ConflictError("Product is already removed")

        notification = self.notifications.notify_product_removed(
            product=product, admin_id=actor.id, reason=reason  # type: ignore[arg-type]
        )
        logger.info("Product %s removed by admin %s: %s", product_id, actor.id, reason)
        return notification

    def submit_appeal(
        self, notification_id: UUID, actor: User, appeal_message: str
    ) -> Notification:
        """Record the author's appeal on their ``product_removed`` notification.

        At most one appeal per removal.

        Raises:
            InvalidRequestError: If the message is shorter than the minimum length.
            NotFoundError: If the notification is not the actor's removal notice.
            ConflictError: If the removal cannot be appealed or was already appealed.
        """
        if len(appeal_message) < APPEAL_MESSAGE_MIN_LENGTH:
            raise InvalidRequestError(
                f"Appeal message must be at least {APPEAL_MESSAGE_MIN_LENGTH} characters"
            )

        notification = self.notification_repo.get_for_update(notification_id)
        if (
            notification is None
            or notification.user_id != actor.id
            or notification.action != NotificationAction.PRODUCT_REMOVED.value
        ):
            raise NotFoundError("Notification not found or cannot be appealed")

        version = int(notification.metadata_version)  # type: ignore[arg-type]
        metadata = _removal_metadata(notification)
        if not metadata.can_appeal:
            raise ConflictError("This product removal cannot be appealed")
        if metadata.appealed:
            raise ConflictError("This product removal has already been appealed")

        appealed = metadata.model_copy(
            update={
                "appealed": True,
                "appeal_message": appeal_message,
                "appeal_date": utc_now(),
            }
        )
        if not self.notification_repo.replace_metadata(
            notification,
            build_notification_metadata(NotificationAction.PRODUCT_REMOVED, appealed),  # type: ignore[arg-type]
            expected_version=version,
        ):
            self.db.rollback()
            raise ConflictError("This product removal has already been appealed")
        logger.info("Appeal submitted on notification %s by %s", notification_id, actor.id)
        return notification

    def restore_product(self, product_id: UUID, actor: User) -> Notification:
        """Clear a product's removal and notify its author.

        Raises:
            ForbiddenError: If ``actor`` is not an admin.
            NotFoundError: If the product does not exist.
            ConflictError: If the product is not currently removed.
        """
        _require_admin(actor)
        product = self.product_repo.get_by_id(product_id, include_deleted=True)
        if product is None:
            raise NotFoundError("Product not found")
        if not product.is_deleted:
            raise ConflictError("Product is not deleted")

        if not self.product_repo.restore(product_id, commit=False):
            self.db.rollback()
            raise ConflictError("Product is not deleted")

        notification = self.notifications.notify_product_restored(
            product=product, admin_id=actor.id  # type: ignore[arg-type]
        )
        logger.info("Product %s restored by admin %s", product_id, actor.id)
        return notification

    def reject_appeal(
        self,
        notification_id: UUID,
        actor: User,
        rejection_reason: str | None = None,
    ) -> Notification:
        """Reject the appeal recorded on a ``product_removed`` notification.

        The product stays removed and cannot be appealed again.

        Raises:
            ForbiddenError: If ``actor`` is not an admin.
            NotFoundError: If the notification does not exist or is not a removal notice.
            ConflictError: If no appeal is pending on it.
        """
        _require_admin(actor)
        notification = self.notification_repo.get_for_update(notification_id)
        if (
            notification is None
            or notification.action != NotificationAction.PRODUCT_REMOVED.value
        ):
            raise NotFoundError("Notification not found")

        version = int(notification.metadata_version)  # type: ignore[arg-type]
        metadata = _removal_metadata(notification)
        if not metadata.appealed:
            raise ConflictError("No appeal has been submitted for this removal")
        if metadata.appeal_rejected:
            raise ConflictError("Appeal has already been rejected")

        rejected = metadata.model_copy(
            update={
                "appeal_rejected": True,
                "rejection_reason": rejection_reason or DEFAULT_REJECTION_REASON,
                "rejected_by": actor.id,
                "rejected_at": utc_now(),
            }
        )
        if not self.notification_repo.replace_metadata(
            notification,
            build_notification_metadata(NotificationAction.PRODUCT_REMOVED, rejected),  # type: ignore[arg-type]
            expected_version=version,
            commit=False,
        ):
            self.db.rollback()
            raise ConflictError("Appeal has already been rejected")
        rejection = self.notifications.notify_appeal_rejected(
            user_id=notification.user_id,  # type: ignore[arg-type]
            product_id=notification.target,  # type: ignore[arg-type]
            product_name=metadata.product_name,
            admin_id=actor.id,  # type: ignore[arg-type]
        )
        logger.info("Appeal on notification %s rejected by admin %s", notification_id, actor.id)
        return rejection

    def list_appealed_products(self, actor: User) -> list[AppealedProductResponse]:
        """Removal notices whose author has appealed, newest first.

        Every removal notice's metadata is re-validated; one malformed payload
        fails the whole listing.
        """
        _require_admin(actor)
        results: list[AppealedProductResponse] = []
        for notification, user, product in self.notification_repo.list_by_action(
            NotificationAction.PRODUCT_REMOVED
        ):
            metadata = _removal_metadata(notification)
            if not metadata.has_appeal:
                continue
            product_response = None
            if product is not None:
                product_response = ProductResponse.model_validate(product).model_copy(
                    update={
                        "recommendation_count": self.product_repo.count_recommendations(
                            product.id  # type: ignore[arg-type]
                        )
                    }
                )
            results.append(
                AppealedProductResponse(
                    notification=to_notification_response(notification, product=product),
                    user=SafeUserResponse.model_validate(user) if user else None,
                    product=product_response,
                    metadata=metadata,
                    has_appeal=True,
                )
            )
        return results
