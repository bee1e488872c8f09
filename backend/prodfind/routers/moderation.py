"""Admin moderation endpoints: product removal, restore and appeal review."""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from prodfind.core.auth import require_user
from prodfind.core.database import get_db
from prodfind.models.user import User
from prodfind.schemas.moderation import (
    AppealedProductResponse,
    ModerationResult,
    RejectAppealRequest,
    RemoveProductRequest,
)
from prodfind.services.moderation_service import ModerationService

router = APIRouter()

ADMIN_RESPONSES = {
    401: {"description": "Unauthorized – missing or invalid session"},
    403: {"description": "Admin access required"},
}


@router.post(
    "/products/{product_id}/remove",
    response_model=ModerationResult,
    summary="Remove product",
    responses={
        **ADMIN_RESPONSES,
        404: {"description": "Product not found"},
        409: {"description": "Product is already removed"},
    },
)
async def remove_product(
    product_id: UUID,
    data: RemoveProductRequest | None = None,
    db: Session = Depends(get_db),
    user: User = Depends(require_user),
) -> ModerationResult:
    """Soft delete a product and notify its author, who may appeal."""
    notification = ModerationService(db).remove_product(
        product_id, user, (data or RemoveProductRequest()).reason
    )
    return ModerationResult(product_id=product_id, notification_id=notification.id)  # type: ignore[arg-type]


@router.post(
    "/products/{product_id}/restore",
    response_model=ModerationResult,
    summary="Restore product",
    responses={
        **ADMIN_RESPONSES,
        404: {"description": "Product not found"},
        409: {"description": "Product is not deleted"},
    },
)
async def restore_product(
    product_id: UUID,
    db: Session = Depends(get_db),
    user: User = Depends(require_user),
) -> ModerationResult:
    notification = ModerationService(db).restore_product(product_id, user)
    return ModerationResult(product_id=product_id, notification_id=notification.id)  # type: ignore[arg-type]


@router.post(
    "/appeals/{notification_id}/reject",
    response_model=ModerationResult,
    summary="Reject appeal",
    responses={
        **ADMIN_RESPONSES,
        404: {"description": "Notification not found"},
        409: {"description": "No pending appeal on this removal"},
    },
)
async def reject_appeal(
    notification_id: UUID,
    data: RejectAppealRequest | None = None,
    db: Session = Depends(get_db),
    user: User = Depends(require_user),
) -> ModerationResult:
    """Reject an appeal; the product stays removed."""
    rejection = ModerationService(db).reject_appeal(
        notification_id, user, rejection_reason=data.rejection_reason if data else None
    )
    return ModerationResult(
        product_id=rejection.target,  # type: ignore[arg-type]
        notification_id=rejection.id,  # type: ignore[arg-type]
    )


@router.get(
    "/appeals",
    response_model=list[AppealedProductResponse],
    summary="List appealed product removals",
    responses=ADMIN_RESPONSES,
)
async def list_appeals(
    db: Session = Depends(get_db),
    user: User = Depends(require_user),
) -> list[AppealedProductResponse]:
    return ModerationService(db).list_appealed_products(user)
