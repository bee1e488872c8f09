"""Tests for bookmarks and recommendations."""

import pytest
from fastapi.testclient import TestClient

from prodfind.core.database import get_db
from prodfind.main import app
from prodfind.models.bookmark import Bookmark
from prodfind.models.notification import Notification, NotificationAction
from prodfind.models.recommendation import Recommendation
from prodfind.repositories.bookmark_repository import BookmarkRepository
from prodfind.repositories.product_repository import ProductRepository
from prodfind.repositories.recommendation_repository import RecommendationRepository
from prodfind.schemas.product import ProductCreate
from prodfind.services.product_service import ProductService
from tests.conftest import auth_headers, create_user


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def db_session():
    gen = get_db()
    db = next(gen)
    try:
        yield db
    finally:
        for _ in gen:
            pass


@pytest.fixture
def author(db_session):
    return create_user(db_session, "Ada")


@pytest.fixture
def fan(db_session):
    return create_user(db_session, "Grace")


@pytest.fixture
def product(db_session, author):
    return ProductRepository(db_session).create(
        ProductCreate(name="Widget", price="Free"), author_id=author.id
    )


def notifications_for(db, user, action):
    return (
        db.query(Notification)
        .filter(Notification.user_id == user.id, Notification.action == action.value)
        .all()
    )


class TestProductRelationRepository:
    def test_add_and_exists(self, db_session, product, fan):
        repo = BookmarkRepository(db_session)
        assert repo.exists(product.id, fan.id) is False
        assert repo.add(product.id, fan.id) is True
        assert repo.exists(product.id, fan.id) is True

    def test_add_is_idempotent(self, db_session, product, fan):
        repo = RecommendationRepository(db_session)
        assert repo.add(product.id, fan.id) is True
        assert repo.add(product.id, fan.id) is False
        assert db_session.query(Recommendation).count() == 1

    def test_remove(self, db_session, product, fan):
        repo = BookmarkRepository(db_session)
        repo.add(product.id, fan.id)
        assert repo.remove(product.id, fan.id) == 1
        assert repo.remove(product.id, fan.id) == 0
        assert db_session.query(Bookmark).count() == 0

    def test_list_products_excludes_removed(self, db_session, author, product, fan):
        other = ProductRepository(db_session).create(
            ProductCreate(name="Gadget", price="Free"), author_id=author.id
        )
        repo = BookmarkRepository(db_session)
        repo.add(product.id, fan.id)
        repo.add(other.id, fan.id)
        ProductRepository(db_session).soft_delete(other.id, deleted_by=author.id, reason="x")

        rows = repo.list_products(fan.id)
        assert [p.id for p, _ in rows] == [product.id]

    def test_list_products_carries_counts(self, db_session, product, fan):
        RecommendationRepository(db_session).add(product.id, fan.id)
        rows = RecommendationRepository(db_session).list_products(fan.id)
        assert [(p.id, c) for p, c in rows] == [(product.id, 1)]


class TestProductRelationService:
    def test_bookmark_notifies_author(self, db_session, author, product, fan):
        assert ProductService(db_session).add_bookmark(product.id, fan) is True
        notes = notifications_for(db_session, author, NotificationAction.BOOKMARK)
        assert len(notes) == 1
        assert notes[0].actor_id == fan.id
        assert notes[0].target == product.id
        assert notes[0].notification_metadata is None

    def test_duplicate_bookmark_notifies_once(self, db_session, author, product, fan):
        service = ProductService(db_session)
        service.add_bookmark(product.id, fan)
        assert service.add_bookmark(product.id, fan) is False
        assert len(notifications_for(db_session, author, NotificationAction.BOOKMARK)) == 1

    def test_self_recommendation_not_notified(self, db_session, author, product):
        assert ProductService(db_session).add_recommendation(product.id, author) is True
        assert notifications_for(db_session, author, NotificationAction.RECOMMENDATION) == []

    def test_bookmark_removed_product_not_found(self, db_session, author, product, fan):
        from prodfind.core.errors import NotFoundError

        ProductRepository(db_session).soft_delete(product.id, deleted_by=author.id, reason="x")
        with pytest.raises(NotFoundError):
            ProductService(db_session).add_bookmark(product.id, fan)

    def test_status_false_when_anonymous(self, db_session, product, fan):
        service = ProductService(db_session)
        service.add_recommendation(product.id, fan)
        assert service.is_recommended(product.id, fan) is True
        assert service.is_recommended(product.id, None) is False


class TestProductRelationAPI:
    def test_bookmark_flow(self, client, db_session, author, product, fan):
        headers = auth_headers(db_session, fan)
        url = f"/v1/products/{product.id}/bookmark"

        assert client.get(url, headers=headers).json() == {"is_bookmarked": False}
        response = client.post(url, headers=headers)
        assert response.status_code == 200
        assert response.json()["success"] is True
        assert client.get(url, headers=headers).json() == {"is_bookmarked": True}

        bookmarked = client.get("/v1/products/bookmarked", headers=headers)
        assert bookmarked.status_code == 200
        assert [p["id"] for p in bookmarked.json()] == [str(product.id)]

        assert client.delete(url, headers=headers).status_code == 200
        assert client.get(url, headers=headers).json() == {"is_bookmarked": False}

    def test_recommendation_flow(self, client, db_session, author, product, fan):
        headers = auth_headers(db_session, fan)
        url = f"/v1/products/{product.id}/recommendation"

        assert client.post(url, headers=headers).status_code == 200
        assert client.get(url, headers=headers).json() == {"is_recommended": True}

        recommended = client.get("/v1/products/recommended", headers=headers).json()
        assert recommended[0]["id"] == str(product.id)
        assert recommended[0]["recommendation_count"] == 1

        detail = client.get(f"/v1/products/{product.id}").json()
        assert detail["recommendation_count"] == 1

    def test_duplicate_recommendation(self, client, db_session, author, product, fan):
        headers = auth_headers(db_session, fan)
        url = f"/v1/products/{product.id}/recommendation"
        client.post(url, headers=headers)
        response = client.post(url, headers=headers)
        assert response.status_code == 200
        assert response.json()["message"] == "Already recommended"
        db_session.expire_all()
        assert db_session.query(Recommendation).count() == 1
        assert len(notifications_for(db_session, author, NotificationAction.RECOMMENDATION)) == 1

    def test_status_anonymous(self, client, product):
        response = client.get(f"/v1/products/{product.id}/bookmark")
        assert response.status_code == 200
        assert response.json() == {"is_bookmarked": False}

    def test_add_requires_session(self, client, product):
        assert client.post(f"/v1/products/{product.id}/bookmark").status_code == 401
        assert client.post(f"/v1/products/{product.id}/recommendation").status_code == 401

    def test_add_missing_product(self, client, db_session, fan):
        response = client.post(
            "/v1/products/00000000-0000-0000-0000-000000000099/bookmark",
            headers=auth_headers(db_session, fan),
        )
        assert response.status_code == 404

    def test_listings_require_session(self, client):
        assert client.get("/v1/products/bookmarked").status_code == 401
        assert client.get("/v1/products/recommended").status_code == 401
