from __future__ import annotations

from collections.abc import Sequence
from uuid import UUID

from sqlalchemy.orm import Session

from prodfind.models.comment import Comment
from prodfind.models.shared import utc_now
from prodfind.models.user import User
from prodfind.schemas.comment import CommentCreate


class CommentRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, comment_id: UUID, include_deleted: bool = False) -> Comment | None:
        query = self.db.query(Comment).filter(Comment.id == comment_id)
        if not include_deleted:
            query = query.filter(Comment.deleted_at.is_(None))
        return query.first()

    def list_top_level(self, product_id: UUID) -> list[tuple[Comment, User | None]]:
        """Visible top-level comments on a product with their authors, newest first."""
        rows = (
            self.db.query(Comment, User)
            .outerjoin(User, Comment.author_id == User.id)
            .filter(
                Comment.product_id == product_id,
                Comment.parent_id.is_(None),
                Comment.deleted_at.is_(None),
            )
            .order_by(Comment.created_at.desc(), Comment.id)
            .all()
        )
        return [(comment, author) for comment, author in rows]

    def list_replies(self, parent_ids: Sequence[UUID]) -> list[tuple[Comment, User | None]]:
        """Visible replies to any of ``parent_ids`` with their authors, oldest first."""
        if not parent_ids:
            return []
        rows = (
            self.db.query(Comment, User)
            .outerjoin(User, Comment.author_id == User.id)
            .filter(Comment.parent_id.in_(list(parent_ids)), Comment.deleted_at.is_(None))
            .order_by(Comment.created_at.asc(), Comment.id)
            .all()
        )
        return [(comment, author) for comment, author in rows]

    def create(self, data: CommentCreate, author_id: UUID) -> Comment:
        comment = Comment(
            product_id=data.product_id,
            parent_id=data.parent_id,
            content=data.content,
            author_id=author_id,
        )
        self.db.add(comment)
        self.db.commit()
        self.db.refresh(comment)
        return comment

    def update_content(self, comment: Comment, content: str) -> Comment:
        comment.content = content  # type: ignore[assignment]
        comment.updated_at = utc_now()  # type: ignore[assignment]
        self.db.commit()
        self.db.refresh(comment)
        return comment

    def soft_delete(self, comment: Comment, *, deleted_by: UUID, reason: str) -> Comment:
        comment.deleted_at = utc_now()  # type: ignore[assignment]
        comment.deleted_by = deleted_by  # type: ignore[assignment]
        comment.deletion_reason = reason  # type: ignore[assignment]
        self.db.commit()
        self.db.refresh(comment)
        return comment
