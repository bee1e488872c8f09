"""Notification API endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from prodfind.core.auth import require_user
from prodfind.core.database import get_db
from prodfind.models.notification import NotificationAction
from prodfind.models.user import User
from prodfind.schemas.notification import (
    AppealRequest,
    AppealResponse,
    MarkAllReadResponse,
    NotificationCountResponse,
    NotificationResponse,
)
from prodfind.services.moderation_service import ModerationService
from prodfind.services.notification_service import NotificationService, to_notification_response

router = APIRouter()

UNAUTHORIZED = {401: {"description": "Unauthorized – missing or invalid session"}}


@router.get(
    "/",
    response_model=list[NotificationResponse],
    summary="List notifications",
    responses=UNAUTHORIZED,
)
async def list_notifications(
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=200),
    action: NotificationAction | None = None,
    read: bool | None = None,
    order_by: str | None = Query(default=None),
    db: Session = Depends(get_db),
    user: User = Depends(require_user),
) -> list[NotificationResponse]:
    """List the caller's notifications with their actor and product, newest first."""
    return NotificationService(db).list_for_user(
        user.id,  # type: ignore[arg-type]
        skip=skip,
        limit=limit,
        action=action,
        read=read,
        order_by=order_by,
    )


@router.get(
    "/unread_count",
    response_model=NotificationCountResponse,
    summary="Get unread notification count",
    responses=UNAUTHORIZED,
)
async def get_unread_count(
    db: Session = Depends(get_db),
    user: User = Depends(require_user),
) -> NotificationCountResponse:
    count = NotificationService(db).count_unread(user.id)  # type: ignore[arg-type]
    return NotificationCountResponse(unread_count=count)


@router.post(
    "/read_all",
    response_model=MarkAllReadResponse,
    summary="Mark all notifications as read",
    responses=UNAUTHORIZED,
)
async def mark_all_as_read(
    db: Session = Depends(get_db),
    user: User = Depends(require_user),
) -> MarkAllReadResponse:
    count = NotificationService(db).mark_all_as_read(user.id)  # type: ignore[arg-type]
    return MarkAllReadResponse(marked_count=count)


@router.post(
    "/{notification_id}/read",
    response_model=NotificationResponse,
    summary="Mark a notification as read",
    responses={**UNAUTHORIZED, 404: {"description": "Notification not found"}},
)
async def mark_as_read(
    notification_id: UUID,
    db: Session = Depends(get_db),
    user: User = Depends(require_user),
) -> NotificationResponse:
    notification = NotificationService(db).mark_as_read(notification_id, user.id)  # type: ignore[arg-type]
    return to_notification_response(notification)


@router.post(
    "/{notification_id}/appeal",
    response_model=AppealResponse,
    summary="Appeal a product removal",
    responses={
        **UNAUTHORIZED,
        404: {"description": "Notification not found or cannot be appealed"},
        409: {"description": "Removal cannot be appealed or was already appealed"},
        422: {"description": "Appeal message too short"},
    },
)
async def appeal_product_removal(
    notification_id: UUID,
    data: AppealRequest,
    db: Session = Depends(get_db),
    user: User = Depends(require_user),
) -> AppealResponse:
    """Submit the author's single appeal against a product removal."""
    ModerationService(db).submit_appeal(notification_id, user, data.appeal_message)
    return AppealResponse()
