from prodfind.models.bookmark import Bookmark
from prodfind.models.comment import Comment
from prodfind.models.notification import Notification, NotificationAction
from prodfind.models.product import Product, ProductVisibility
from prodfind.models.recommendation import Recommendation
from prodfind.models.session import UserSession
from prodfind.models.user import User, UserRole

__all__ = [
    "Bookmark",
    "Comment",
    "Notification",
    "NotificationAction",
    "Product",
    "ProductVisibility",
    "Recommendation",
    "User",
    "UserRole",
    "UserSession",
]
