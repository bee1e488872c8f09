"""Threaded comments on products.

Threads are one level deep: a reply's parent must be a top-level comment on
the same product.
"""

from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy.orm import Session

from prodfind.core.errors import ForbiddenError, InvalidRequestError, NotFoundError
from prodfind.models.comment import Comment
from prodfind.models.user import User
from prodfind.repositories.comment_repository import CommentRepository
from prodfind.repositories.product_repository import ProductRepository
from prodfind.schemas.comment import CommentCreate, CommentTreeResponse
from prodfind.schemas.user import SafeUserResponse
from prodfind.services.notification_service import NotificationService

logger = logging.getLogger(__name__)

AUTHOR_DELETION_REASON = "Deleted by author"
MODERATOR_DELETION_REASON = "Removed by moderator"


def _tree_node(comment: Comment, author: User | None) -> CommentTreeResponse:
    return CommentTreeResponse.model_validate(
        {
            **{
                column.name: getattr(comment, column.name)
                for column in Comment.__table__.columns
            },
            "author": SafeUserResponse.model_validate(author) if author else None,
            "replies": [],
        }
    )


class CommentService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = CommentRepository(db)
        self.product_repo = ProductRepository(db)
        self.notifications = NotificationService(db)

    def list_for_product(self, product_id: UUID) -> list[CommentTreeResponse]:
        """Top-level comments newest first, each with its replies oldest first."""
        roots = [_tree_node(c, a) for c, a in self.repo.list_top_level(product_id)]
        by_id = {node.id: node for node in roots}
        for reply, author in self.repo.list_replies(list(by_id)):
            parent = by_id.get(reply.parent_id)  # type: ignore[arg-type]
            if parent is not None:
                parent.replies.append(_tree_node(reply, author))
        return roots

    def create_comment(self, data: CommentCreate, actor: User) -> Comment:
        """Post a comment or a reply and notify the affected author.

        Raises:
            NotFoundError: If the product (or the parent comment) does not exist.
            InvalidRequestError: If the parent belongs to another product or is
                itself a reply.
        """
        product = self.product_repo.get_by_id(data.product_id)
        if product is None:
            raise NotFoundError("Product not found")

        parent = None
        if data.parent_id is not None:
            parent = self.repo.get_by_id(data.parent_id)
            if parent is None:
                raise NotFoundError("Parent comment not found")
            if parent.product_id != data.product_id:
                raise InvalidRequestError("Parent comment belongs to a different product")
            if parent.parent_id is not None:
                raise InvalidRequestError("Replies cannot be nested")

        comment = self.repo.create(data, author_id=actor.id)  # type: ignore[arg-type]
        if parent is None:
            self.notifications.notify_comment(product=product, actor=actor)
        else:
            self.notifications.notify_reply(
                parent_author_id=parent.author_id,  # type: ignore[arg-type]
                product_id=product.id,  # type: ignore[arg-type]
                actor=actor,
            )
        return comment

    def _get_editable(self, comment_id: UUID, actor: User) -> Comment:
        comment = self.repo.get_by_id(comment_id)
        if comment is None:
            raise NotFoundError("Comment not found")
        if comment.author_id != actor.id and not actor.is_admin:
            raise ForbiddenError("Not the comment author")
        return comment

    def update_comment(self, comment_id: UUID, content: str, actor: User) -> Comment:
        comment = self._get_editable(comment_id, actor)
        return self.repo.update_content(comment, content)

    def delete_comment(
        self, comment_id: UUID, actor: User, reason: str | None = None
    ) -> Comment:
        """Soft delete a comment; the author or an admin may do this.

        Without a ``reason`` the stored one depends on who deleted it.
        """
        comment = self._get_editable(comment_id, actor)
        if not reason:
            reason = (
                AUTHOR_DELETION_REASON
                if comment.author_id == actor.id
                else MODERATOR_DELETION_REASON
            )
        comment = self.repo.soft_delete(comment, deleted_by=actor.id, reason=reason)  # type: ignore[arg-type]
        logger.info("Comment %s deleted by %s", comment_id, actor.id)
        return comment
