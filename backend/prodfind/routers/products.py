"""Product API endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from prodfind.core.auth import SessionContext, get_session_context, require_user
from prodfind.core.bot_detection import reject_bots
from prodfind.core.database import get_db
from prodfind.models.user import User
from prodfind.schemas.common import (
    BookmarkStatusResponse,
    RecommendationStatusResponse,
    SuccessResponse,
)
from prodfind.schemas.product import (
    ProductCreate,
    ProductDetailResponse,
    ProductResponse,
    ProductUpdate,
)
from prodfind.services.product_service import ProductService

router = APIRouter()

UNAUTHORIZED = {401: {"description": "Unauthorized – missing or invalid session"}}


@router.get(
    "/",
    response_model=list[ProductResponse],
    summary="List products",
)
async def list_products(
    user_id: UUID | None = Query(default=None),
    db: Session = Depends(get_db),
    context: SessionContext = Depends(get_session_context),
) -> list[ProductResponse]:
    """List products ordered by recommendation count.

    With ``user_id`` every non-removed product of that author is listed,
    whatever its visibility.
    """
    return ProductService(db).list_products(viewer=context.user, author_id=user_id)


@router.post(
    "/",
    response_model=ProductResponse,
    status_code=201,
    summary="Create product",
    responses={**UNAUTHORIZED, 422: {"description": "Validation error"}},
    dependencies=[Depends(reject_bots)],
)
async def create_product(
    data: ProductCreate,
    db: Session = Depends(get_db),
    user: User = Depends(require_user),
) -> ProductResponse:
    return ProductService(db).create_product(data, user)


@router.get(
    "/bookmarked",
    response_model=list[ProductResponse],
    summary="List bookmarked products",
    responses=UNAUTHORIZED,
)
async def list_bookmarked_products(
    db: Session = Depends(get_db),
    user: User = Depends(require_user),
) -> list[ProductResponse]:
    return ProductService(db).bookmarked_products(user)


@router.get(
    "/recommended",
    response_model=list[ProductResponse],
    summary="List recommended products",
    responses=UNAUTHORIZED,
)
async def list_recommended_products(
    db: Session = Depends(get_db),
    user: User = Depends(require_user),
) -> list[ProductResponse]:
    return ProductService(db).recommended_products(user)


@router.get(
    "/{product_id}",
    response_model=ProductDetailResponse,
    summary="Get product",
    responses={404: {"description": "Product not found"}},
)
async def get_product(
    product_id: UUID,
    db: Session = Depends(get_db),
    context: SessionContext = Depends(get_session_context),
) -> ProductDetailResponse:
    """Get a product with its author and recommendation count."""
    return ProductService(db).get_product(product_id, viewer=context.user)


@router.patch(
    "/{product_id}",
    response_model=ProductResponse,
    summary="Update product",
    responses={
        **UNAUTHORIZED,
        403: {"description": "Not the product owner"},
        404: {"description": "Product not found"},
    },
    dependencies=[Depends(reject_bots)],
)
async def update_product(
    product_id: UUID,
    data: ProductUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(require_user),
) -> ProductResponse:
    return ProductService(db).update_product(product_id, data, user)


@router.delete(
    "/{product_id}",
    status_code=204,
    summary="Delete product",
    responses={
        **UNAUTHORIZED,
        403: {"description": "Not the product owner"},
        404: {"description": "Product not found"},
    },
)
async def delete_product(
    product_id: UUID,
    db: Session = Depends(get_db),
    user: User = Depends(require_user),
) -> None:
    """Permanently delete a product with its comments, bookmarks and recommendations."""
    ProductService(db).delete_product(product_id, user)


@router.post(
    "/{product_id}/bookmark",
    response_model=SuccessResponse,
    summary="Bookmark product",
    responses={**UNAUTHORIZED, 404: {"description": "Product not found"}},
)
async def add_bookmark(
    product_id: UUID,
    db: Session = Depends(get_db),
    user: User = Depends(require_user),
) -> SuccessResponse:
    created = ProductService(db).add_bookmark(product_id, user)
    return SuccessResponse(message=None if created else "Already bookmarked")


@router.delete(
    "/{product_id}/bookmark",
    response_model=SuccessResponse,
    summary="Remove bookmark",
    responses=UNAUTHORIZED,
)
async def remove_bookmark(
    product_id: UUID,
    db: Session = Depends(get_db),
    user: User = Depends(require_user),
) -> SuccessResponse:
    ProductService(db).remove_bookmark(product_id, user)
    return SuccessResponse()


@router.get(
    "/{product_id}/bookmark",
    response_model=BookmarkStatusResponse,
    summary="Get bookmark status",
)
async def get_bookmark_status(
    product_id: UUID,
    db: Session = Depends(get_db),
    context: SessionContext = Depends(get_session_context),
) -> BookmarkStatusResponse:
    """Whether the caller has bookmarked the product; always false when signed out."""
    return BookmarkStatusResponse(
        is_bookmarked=ProductService(db).is_bookmarked(product_id, context.user)
    )


@router.post(
    "/{product_id}/recommendation",
    response_model=SuccessResponse,
    summary="Recommend product",
    responses={**UNAUTHORIZED, 404: {"description": "Product not found"}},
)
async def add_recommendation(
    product_id: UUID,
    db: Session = Depends(get_db),
    user: User = Depends(require_user),
) -> SuccessResponse:
    created = ProductService(db).add_recommendation(product_id, user)
    return SuccessResponse(message=None if created else "Already recommended")


@router.delete(
    "/{product_id}/recommendation",
    response_model=SuccessResponse,
    summary="Remove recommendation",
    responses=UNAUTHORIZED,
)
async def remove_recommendation(
    product_id: UUID,
    db: Session = Depends(get_db),
    user: User = Depends(require_user),
) -> SuccessResponse:
    ProductService(db).remove_recommendation(product_id, user)
    return SuccessResponse()


@router.get(
    "/{product_id}/recommendation",
    response_model=RecommendationStatusResponse,
    summary="Get recommendation status",
)
async def get_recommendation_status(
    product_id: UUID,
    db: Session = Depends(get_db),
    context: SessionContext = Depends(get_session_context),
) -> RecommendationStatusResponse:
    return RecommendationStatusResponse(
        is_recommended=ProductService(db).is_recommended(product_id, context.user)
    )
