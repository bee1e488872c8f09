"""Product listing, ownership-checked mutations and per-user relations."""

from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy.orm import Session

from prodfind.core.errors import ForbiddenError, NotFoundError
from prodfind.models.product import Product, ProductVisibility
from prodfind.models.user import User
from prodfind.repositories.bookmark_repository import BookmarkRepository
from prodfind.repositories.product_relation_repository import ProductRelationRepository
from prodfind.repositories.product_repository import ProductRepository
from prodfind.repositories.recommendation_repository import RecommendationRepository
from prodfind.repositories.user_repository import UserRepository
from prodfind.schemas.product import (
    ProductCreate,
    ProductDetailResponse,
    ProductResponse,
    ProductUpdate,
)
from prodfind.schemas.user import SafeUserResponse
from prodfind.services.notification_service import NotificationService

logger = logging.getLogger(__name__)


def to_product_response(product: Product, recommendation_count: int) -> ProductResponse:
    return ProductResponse.model_validate(product).model_copy(
        update={"recommendation_count": recommendation_count}
    )


class ProductService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = ProductRepository(db)
        self.user_repo = UserRepository(db)
        self.bookmarks = BookmarkRepository(db)
        self.recommendations = RecommendationRepository(db)
        self.notifications = NotificationService(db)

    def list_products(
        self, viewer: User | None = None, author_id: UUID | None = None
    ) -> list[ProductResponse]:
        """List products, most recommended first.

        ``author_id`` (profile view) returns all of that author's non-removed
        products regardless of visibility or viewer.
        """
        rows = self.repo.list_with_counts(
            viewer_id=viewer.id if viewer else None,  # type: ignore[arg-type]
            author_id=author_id,
        )
        return [to_product_response(product, count) for product, count in rows]

    def _get_visible(self, product_id: UUID, viewer: User | None) -> Product:
        """Fetch a product the viewer may see.

        Missing, removed, and other people's private products are all reported
        as not found.
        """
        product = self.repo.get_by_id(product_id)
        if product is None:
            raise NotFoundError("Product not found")
        if product.visibility == ProductVisibility.PRIVATE.value and (
            viewer is None or product.author_id != viewer.id
        ):
            raise NotFoundError("Product not found")
        return product

    def get_product(self, product_id: UUID, viewer: User | None = None) -> ProductDetailResponse:
        product = self._get_visible(product_id, viewer)
        author = self.user_repo.get_by_id(product.author_id)  # type: ignore[arg-type]
        base = to_product_response(product, self.repo.count_recommendations(product_id))
        return ProductDetailResponse(
            **base.model_dump(),
            author=SafeUserResponse.model_validate(author) if author else None,
        )

    def create_product(self, data: ProductCreate, actor: User) -> ProductResponse:
        product = self.repo.create(data, author_id=actor.id)  # type: ignore[arg-type]
        logger.info("Product %s created by %s", product.id, actor.id)
        return to_product_response(product, 0)

    def _get_owned(self, product_id: UUID, actor: User) -> Product:
        product = self.repo.get_by_id(product_id, include_deleted=True)
        if product is None:
            raise NotFoundError("Product not found")
        if product.author_id != actor.id:
            raise ForbiddenError("Not the product owner")
        return product

    def update_product(
        self, product_id: UUID, data: ProductUpdate, actor: User
    ) -> ProductResponse:
        """Apply a partial update.

        Raises:
            NotFoundError: If the product does not exist.
            ForbiddenError: If ``actor`` is not the product's author.
        """
        product = self.repo.update(self._get_owned(product_id, actor), data)
        return to_product_response(product, self.repo.count_recommendations(product_id))

    def delete_product(self, product_id: UUID, actor: User) -> None:
        """Hard delete an owned product.

        Raises:
            NotFoundError: If the product does not exist.
            ForbiddenError: If ``actor`` is not the product's author.
        """
        product = self._get_owned(product_id, actor)
        self.repo.delete(product)
        logger.info("Product %s deleted by owner %s", product_id, actor.id)

    def _toggle_on(
        self, relations: ProductRelationRepository, product_id: UUID, actor: User
    ) -> tuple[Product, bool]:
        product = self._get_visible(product_id, actor)
        created = relations.add(product_id, actor.id)  # type: ignore[arg-type]
        return product, created

    def add_bookmark(self, product_id: UUID, actor: User) -> bool:
        """Bookmark a product; the author is notified unless it is the actor.

        Returns False (and sends nothing) if the bookmark already existed.
        """
        product, created = self._toggle_on(self.bookmarks, product_id, actor)
        if created:
            self.notifications.notify_bookmark(product=product, actor_id=actor.id)  # type: ignore[arg-type]
        return created

    def remove_bookmark(self, product_id: UUID, actor: User) -> None:
        self.bookmarks.remove(product_id, actor.id)  # type: ignore[arg-type]

    def is_bookmarked(self, product_id: UUID, viewer: User | None) -> bool:
        if viewer is None:
            return False
        return self.bookmarks.exists(product_id, viewer.id)  # type: ignore[arg-type]

    def add_recommendation(self, product_id: UUID, actor: User) -> bool:
        """Recommend a product; the author is notified unless it is the actor.

        Returns False (and sends nothing) if the recommendation already existed.
        """
        product, created = self._toggle_on(self.recommendations, product_id, actor)
        if created:
            self.notifications.notify_recommendation(product=product, actor_id=actor.id)  # type: ignore[arg-type]
        return created

    def remove_recommendation(self, product_id: UUID, actor: User) -> None:
        self.recommendations.remove(product_id, actor.id)  # type: ignore[arg-type]

    def is_recommended(self, product_id: UUID, viewer: User | None) -> bool:
        if viewer is None:
            return False
        return self.recommendations.exists(product_id, viewer.id)  # type: ignore[arg-type]

    def bookmarked_products(self, actor: User) -> list[ProductResponse]:
        rows = self.bookmarks.list_products(actor.id)  # type: ignore[arg-type]
        return [to_product_response(product, count) for product, count in rows]

    def recommended_products(self, actor: User) -> list[ProductResponse]:
        rows = self.recommendations.list_products(actor.id)  # type: ignore[arg-type]
        return [to_product_response(product, count) for product, count in rows]
