"""Repository for Product persistence and listing queries."""

from __future__ import annotations

from typing import Any
from uuid import UUID

from sqlalchemy import and_, func, or_
from sqlalchemy.orm import Session

from prodfind.models.bookmark import Bookmark
from prodfind.models.comment import Comment
from prodfind.models.product import Product, ProductVisibility
from prodfind.models.recommendation import Recommendation
from prodfind.models.shared import utc_now
from prodfind.schemas.product import ProductCreate, ProductUpdate


def recommendation_counts_subquery(db: Session) -> Any:
    """Recommendation count per product, for LEFT JOINs onto product queries."""
    return (
        db.query(
            Recommendation.product_id.label("product_id"),
            func.count(Recommendation.id).label("count"),
        )
        .group_by(Recommendation.product_id)
        .subquery("recommendation_counts")
    )


class ProductRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, product_id: UUID, include_deleted: bool = False) -> Product | None:
        query = self.db.query(Product).filter(Product.id == product_id)
        if not include_deleted:
            query = query.filter(Product.deleted_at.is_(None))
        return query.first()

    def list_with_counts(
        self,
        viewer_id: UUID | None = None,
        author_id: UUID | None = None,
    ) -> list[tuple[Product, int]]:
        """List non-removed products with their recommendation counts.

        Without ``author_id`` the viewer rule applies: anonymous viewers see
        public products; signed-in viewers also see unlisted products and their
        own private ones. With ``author_id`` every non-removed product of that
        author is returned, whatever the viewer.

        Ordered by recommendation count (desc), then newest first.
        """
        counts = recommendation_counts_subquery(self.db)
        recommendation_count = func.coalesce(counts.c.count, 0)
        query = (
            self.db.query(Product, recommendation_count.label("recommendation_count"))
            .outerjoin(counts, Product.id == counts.c.product_id)
            .filter(Product.deleted_at.is_(None))
        )

        if author_id is not None:
            query = query.filter(Product.author_id == author_id)
        elif viewer_id is not None:
            query = query.filter(
                or_(
                    Product.visibility.in_(
                        [ProductVisibility.PUBLIC.value, ProductVisibility.UNLISTED.value]
                    ),
                    and_(
                        Product.visibility == ProductVisibility.PRIVATE.value,
                        Product.author_id == viewer_id,
                    ),
                )
            )
        else:
            query = query.filter(Product.visibility == ProductVisibility.PUBLIC.value)

        query = query.order_by(
            recommendation_count.desc(), Product.created_at.desc(), Product.id
        )
        return [(product, int(count)) for product, count in query.all()]

    def count_recommendations(self, product_id: UUID) -> int:
        return (
            self.db.query(func.count(Recommendation.id))
            .filter(Recommendation.product_id == product_id)
            .scalar()
            or 0
        )

    def create(self, data: ProductCreate, author_id: UUID) -> Product:
        product = Product(**data.to_row(), author_id=author_id)
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        return product

    def update(self, product: Product, data: ProductUpdate) -> Product:
        for key, value in data.to_row().items():
            setattr(product, key, value)
        product.updated_at = utc_now()  # type: ignore[assignment]
        self.db.commit()
        self.db.refresh(product)
        return product

    def delete(self, product: Product) -> None:
        """Hard delete a product together with its bookmarks, recommendations and comments."""
        product_id = product.id
        self.db.query(Bookmark).filter(Bookmark.product_id == product_id).delete(
            synchronize_session=False
        )
        self.db.query(Recommendation).filter(Recommendation.product_id == product_id).delete(
            synchronize_session=False
        )
        self.db.query(Comment).filter(
            Comment.product_id == product_id, Comment.parent_id.is_not(None)
        ).delete(synchronize_session=False)
        self.db.query(Comment).filter(Comment.product_id == product_id).delete(
            synchronize_session=False
        )
        self.db.delete(product)
        self.db.commit()

    def soft_delete(
        self, product_id: UUID, *, deleted_by: UUID, reason: str, commit: bool = True
    ) -> bool:
        """Mark an active product as removed.

        A single guarded UPDATE sets all three deletion fields; returns False
        when the product is missing or already removed.
        """
        now = utc_now()
        updated = (
            self.db.query(Product)
            .filter(Product.id == product_id, Product.deleted_at.is_(None))
            .update(
                {
                    Product.deleted_at: now,
                    Product.deleted_by: deleted_by,
                    Product.deletion_reason: reason,
                    Product.updated_at: now,
                },
                synchronize_session=False,
            )
        )
        if commit:
            self.db.commit()
        return updated == 1

    def restore(self, product_id: UUID, *, commit: bool = True) -> bool:
        """Clear the removal marker; returns False unless the product was removed."""
        updated = (
            self.db.query(Product)
            .filter(Product.id == product_id, Product.deleted_at.is_not(None))
            .update(
                {
                    Product.deleted_at: None,
                    Product.deleted_by: None,
                    Product.deletion_reason: None,
                    Product.updated_at: utc_now(),
                },
                synchronize_session=False,
            )
        )
        if commit:
            self.db.commit()
        return updated == 1
