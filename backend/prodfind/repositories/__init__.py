from prodfind.repositories.bookmark_repository import BookmarkRepository
from prodfind.repositories.comment_repository import CommentRepository
from prodfind.repositories.notification_repository import NotificationRepository
from prodfind.repositories.product_repository import ProductRepository
from prodfind.repositories.recommendation_repository import RecommendationRepository
from prodfind.repositories.session_repository import SessionRepository
from prodfind.repositories.user_repository import UserRepository

__all__ = [
    "BookmarkRepository",
    "CommentRepository",
    "NotificationRepository",
    "ProductRepository",
    "RecommendationRepository",
    "SessionRepository",
    "UserRepository",
]
