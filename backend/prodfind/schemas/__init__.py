from prodfind.schemas.comment import (
    CommentCreate,
    CommentDelete,
    CommentResponse,
    CommentTreeResponse,
    CommentUpdate,
)
from prodfind.schemas.common import (
    BookmarkStatusResponse,
    RecommendationStatusResponse,
    SuccessResponse,
)
from prodfind.schemas.moderation import (
    AppealedProductResponse,
    ModerationResult,
    RejectAppealRequest,
    RemoveProductRequest,
)
from prodfind.schemas.notification import (
    ActivityMetadata,
    AppealRequest,
    AppealResponse,
    MarkAllReadResponse,
    NotificationCountResponse,
    NotificationResponse,
    ProductRemovedMetadata,
    ProductStatusMetadata,
)
from prodfind.schemas.product import (
    ProductCreate,
    ProductDetailResponse,
    ProductImage,
    ProductLink,
    ProductResponse,
    ProductSummary,
    ProductUpdate,
)
from prodfind.schemas.user import (
    CurrentUserResponse,
    SafeUserResponse,
    SessionResponse,
    UserCreate,
)

__all__ = [
    "ActivityMetadata",
    "AppealRequest",
    "AppealResponse",
    "AppealedProductResponse",
    "BookmarkStatusResponse",
    "CommentCreate",
    "CommentDelete",
    "CommentResponse",
    "CommentTreeResponse",
    "CommentUpdate",
    "CurrentUserResponse",
    "MarkAllReadResponse",
    "ModerationResult",
    "NotificationCountResponse",
    "NotificationResponse",
    "ProductCreate",
    "ProductDetailResponse",
    "ProductImage",
    "ProductLink",
    "ProductRemovedMetadata",
    "ProductResponse",
    "ProductStatusMetadata",
    "ProductSummary",
    "ProductUpdate",
    "RecommendationStatusResponse",
    "RejectAppealRequest",
    "RemoveProductRequest",
    "SafeUserResponse",
    "SessionResponse",
    "SuccessResponse",
    "UserCreate",
]
