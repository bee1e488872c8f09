"""Comment API endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from prodfind.core.auth import require_user
from prodfind.core.bot_detection import reject_bots
from prodfind.core.database import get_db
from prodfind.models.comment import Comment
from prodfind.models.user import User
from prodfind.schemas.comment import (
    CommentCreate,
    CommentDelete,
    CommentResponse,
    CommentTreeResponse,
    CommentUpdate,
)
from prodfind.services.comment_service import CommentService

router = APIRouter()

UNAUTHORIZED = {401: {"description": "Unauthorized – missing or invalid session"}}


@router.get(
    "/",
    response_model=list[CommentTreeResponse],
    summary="List comments on a product",
)
async def list_comments(
    product_id: UUID = Query(...),
    db: Session = Depends(get_db),
) -> list[CommentTreeResponse]:
    """Top-level comments newest first, each with its replies oldest first."""
    return CommentService(db).list_for_product(product_id)


@router.post(
    "/",
    response_model=CommentResponse,
    status_code=201,
    summary="Create comment",
    responses={
        **UNAUTHORIZED,
        404: {"description": "Product or parent comment not found"},
        422: {"description": "Validation error or nested reply"},
    },
    dependencies=[Depends(reject_bots)],
)
async def create_comment(
    data: CommentCreate,
    db: Session = Depends(get_db),
    user: User = Depends(require_user),
) -> Comment:
    return CommentService(db).create_comment(data, user)


@router.patch(
    "/{comment_id}",
    response_model=CommentResponse,
    summary="Update comment",
    responses={
        **UNAUTHORIZED,
        403: {"description": "Not the comment author"},
        404: {"description": "Comment not found"},
    },
    dependencies=[Depends(reject_bots)],
)
async def update_comment(
    comment_id: UUID,
    data: CommentUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(require_user),
) -> Comment:
    return CommentService(db).update_comment(comment_id, data.content, user)


@router.delete(
    "/{comment_id}",
    response_model=CommentResponse,
    summary="Delete comment",
    responses={
        **UNAUTHORIZED,
        403: {"description": "Not the comment author"},
        404: {"description": "Comment not found"},
    },
    dependencies=[Depends(reject_bots)],
)
async def delete_comment(
    comment_id: UUID,
    data: CommentDelete | None = None,
    db: Session = Depends(get_db),
    user: User = Depends(require_user),
) -> Comment:
    """Soft delete a comment; its replies are hidden with it.

    The optional body carries a reason, mostly used by moderators.
    """
    reason = data.reason if data else None
    return CommentService(db).delete_comment(comment_id, user, reason)
