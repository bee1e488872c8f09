"""Repository for Notification CRUD operations."""

from __future__ import annotations

from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session, aliased

from prodfind.core.sorting import apply_order_by
from prodfind.models.notification import Notification, NotificationAction
from prodfind.models.product import Product
from prodfind.models.user import User

SORTABLE_FIELDS = ("created_at", "action", "read")


class NotificationRepository:
    def __init__(self, db: Session):
        self.db = db

    def create(
        self,
        *,
        user_id: UUID,
        action: NotificationAction,
        target: UUID,
        actor_id: UUID | None = None,
        metadata: dict[str, Any] | None = None,
        commit: bool = True,
    ) -> Notification:
        notification = Notification(
            user_id=user_id,
            action=action.value,
            target=target,
            actor_id=actor_id,
            read=False,
            notification_metadata=metadata,
        )
        self.db.add(notification)
        if commit:
            self.db.commit()
            self.db.refresh(notification)
        else:
            self.db.flush()
        return notification

    def get_by_id(self, notification_id: UUID) -> Notification | None:
        return (
            self.db.query(Notification)
            .filter(Notification.id == notification_id)
            .first()
        )

    def get_for_update(self, notification_id: UUID) -> Notification | None:
        """Load a notification holding a row lock until the transaction ends.

        SQLite ignores ``FOR UPDATE``. Metadata writes still go through the
        versioned check in ``replace_metadata``, which holds on every backend.
        """
        return (
            self.db.query(Notification)
            .filter(Notification.id == notification_id)
            .with_for_update()
            .populate_existing()
            .first()
        )

    def get_all(
        self,
        user_id: UUID,
        skip: int = 0,
        limit: int = 50,
        action: NotificationAction | None = None,
        read: bool | None = None,
        order_by: str | None = None,
    ) -> list[tuple[Notification, User | None, Product | None]]:
        """Notifications for a recipient, each with its actor and target product."""
        query = (
            self.db.query(Notification, User, Product)
            .outerjoin(User, Notification.actor_id == User.id)
            .outerjoin(Product, Notification.target == Product.id)
            .filter(Notification.user_id == user_id)
        )
        if action is not None:
            query = query.filter(Notification.action == action.value)
        if read is not None:
            query = query.filter(Notification.read == read)
        query = apply_order_by(query, Notification, order_by, SORTABLE_FIELDS)
        return [(n, actor, product) for n, actor, product in query.offset(skip).limit(limit).all()]

    def list_by_action(
        self, action: NotificationAction
    ) -> list[tuple[Notification, User | None, Product | None]]:
        """All notifications with ``action``, newest first, with recipient and product."""
        recipient = aliased(User)
        rows = (
            self.db.query(Notification, recipient, Product)
            .outerjoin(recipient, Notification.user_id == recipient.id)
            .outerjoin(Product, Notification.target == Product.id)
            .filter(Notification.action == action.value)
            .order_by(Notification.created_at.desc(), Notification.id)
            .all()
        )
        return [(n, user, product) for n, user, product in rows]

    def count_unread(self, user_id: UUID) -> int:
        return (
            self.db.query(Notification)
            .filter(
                Notification.user_id == user_id,
                Notification.read == False,  # noqa: E712
            )
            .count()
        )

    def mark_as_read(self, notification: Notification) -> Notification:
        notification.read = True  # type: ignore[assignment]
        self.db.commit()
        self.db.refresh(notification)
        return notification

    def mark_all_as_read(self, user_id: UUID) -> int:
        count = (
            self.db.query(Notification)
            .filter(
                Notification.user_id == user_id,
                Notification.read == False,  # noqa: E712
            )
            .update({"read": True}, synchronize_session=False)
        )
        self.db.commit()
        return count

    def replace_metadata(
        self,
        notification: Notification,
        metadata: dict[str, Any],
        *,
        expected_version: int | None = None,
        commit: bool = True,
    ) -> bool:
        """Store new metadata unless the row changed since ``expected_version``.

        ``expected_version`` defaults to the version currently loaded on
        ``notification``. Returns False, writing nothing, when another writer
        got there first.
        """
        if expected_version is None:
            expected_version = int(notification.metadata_version)  # type: ignore[arg-type]
        updated = (
            self.db.query(Notification)
            .filter(
                Notification.id == notification.id,
                Notification.metadata_version == expected_version,
            )
            .update(
                {
                    Notification.notification_metadata: metadata,
                    Notification.metadata_version: expected_version + 1,
                },
                synchronize_session=False,
            )
        )
        if not updated:
            return False
        if commit:
            self.db.commit()
        self.db.refresh(notification)
        return True
