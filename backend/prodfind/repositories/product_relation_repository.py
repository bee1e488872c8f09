"""Shared persistence for per-user product relations (bookmarks, recommendations)."""

from __future__ import annotations

from typing import Any
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from prodfind.models.product import Product
from prodfind.repositories.product_repository import recommendation_counts_subquery


class ProductRelationRepository:
    """Rows keyed by a unique (product_id, user_id) pair.

    ``model`` is set by subclasses.
    """

    model: Any

    def __init__(self, db: Session):
        self.db = db

    def get(self, product_id: UUID, user_id: UUID) -> Any | None:
        return (
            self.db.query(self.model)
            .filter(self.model.product_id == product_id, self.model.user_id == user_id)
            .first()
        )

    def exists(self, product_id: UUID, user_id: UUID) -> bool:
        return self.get(product_id, user_id) is not None

    def add(self, product_id: UUID, user_id: UUID) -> bool:
        """Insert the relation; returns False if it already existed."""
        if self.exists(product_id, user_id):
            return False
        self.db.add(self.model(product_id=product_id, user_id=user_id))
        try:
            self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent insert of the same pair.
            self.db.rollback()
            return False
        return True

    def remove(self, product_id: UUID, user_id: UUID) -> int:
        count = (
            self.db.query(self.model)
            .filter(self.model.product_id == product_id, self.model.user_id == user_id)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        return count

    def list_products(self, user_id: UUID) -> list[tuple[Product, int]]:
        """Products related to ``user_id`` with recommendation counts, newest relation first.

        Removed products are left out.
        """
        counts = recommendation_counts_subquery(self.db)
        recommendation_count = func.coalesce(counts.c.count, 0)
        rows = (
            self.db.query(Product, recommendation_count)
            .join(self.model, self.model.product_id == Product.id)
            .outerjoin(counts, Product.id == counts.c.product_id)
            .filter(self.model.user_id == user_id, Product.deleted_at.is_(None))
            .order_by(self.model.created_at.desc(), Product.id)
            .all()
        )
        return [(product, int(count)) for product, count in rows]
