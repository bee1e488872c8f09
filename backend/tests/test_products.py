"""Tests for product listing, detail, creation, update and deletion."""

import pytest
from fastapi.testclient import TestClient

from prodfind.core.database import get_db
from prodfind.main import app
from prodfind.models.bookmark import Bookmark
from prodfind.models.comment import Comment
from prodfind.models.product import Product, ProductVisibility
from prodfind.models.recommendation import Recommendation
from prodfind.models.user import UserRole
from prodfind.repositories.comment_repository import CommentRepository
from prodfind.repositories.product_repository import ProductRepository
from prodfind.repositories.recommendation_repository import RecommendationRepository
from prodfind.schemas.comment import CommentCreate
from prodfind.schemas.product import ProductCreate, ProductUpdate
from prodfind.services.product_service import ProductService
from tests.conftest import auth_headers, create_user


@pytest.fixture
def client():
    """Create test client."""
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
def viewer(db_session):
    return create_user(db_session, "Grace")


def make_product(db, author, name="Widget", visibility=ProductVisibility.PUBLIC, **kwargs):
    return ProductRepository(db).create(
        ProductCreate(name=name, price="Free", visibility=visibility, **kwargs),
        author_id=author.id,
    )


class TestProductRepository:
    def test_create_normalizes_nested_fields(self, db_session, author):
        product = make_product(
            db_session,
            author,
            images=[{"url": "https://example.com/a.png"}],
            category=["tools", "dev", "tools"],
        )
        assert product.category == ["dev", "tools"]
        assert product.images[0]["url"] == "https://example.com/a.png"
        assert "id" in product.images[0]
        assert product.visibility == "public"
        assert product.deleted_at is None

    def test_list_excludes_removed(self, db_session, author):
        repo = ProductRepository(db_session)
        kept = make_product(db_session, author, "Kept")
        removed = make_product(db_session, author, "Removed")
        assert repo.soft_delete(removed.id, deleted_by=author.id, reason="spam")

        ids = [p.id for p, _ in repo.list_with_counts()]
        assert ids == [kept.id]

    def test_list_visibility_anonymous(self, db_session, author):
        public = make_product(db_session, author, "Public")
        make_product(db_session, author, "Unlisted", ProductVisibility.UNLISTED)
        make_product(db_session, author, "Private", ProductVisibility.PRIVATE)

        ids = [p.id for p, _ in ProductRepository(db_session).list_with_counts()]
        assert ids == [public.id]

    def test_list_visibility_signed_in(self, db_session, author, viewer):
        make_product(db_session, author, "Public")
        make_product(db_session, author, "Unlisted", ProductVisibility.UNLISTED)
        make_product(db_session, author, "Private", ProductVisibility.PRIVATE)
        own_private = make_product(db_session, viewer, "Mine", ProductVisibility.PRIVATE)

        names = {p.name for p, _ in ProductRepository(db_session).list_with_counts(viewer.id)}
        assert names == {"Public", "Unlisted", "Mine"}
        assert own_private.name in names

    def test_list_by_author_ignores_visibility(self, db_session, author, viewer):
        make_product(db_session, author, "Public")
        make_product(db_session, author, "Private", ProductVisibility.PRIVATE)
        make_product(db_session, viewer, "Other")

        rows = ProductRepository(db_session).list_with_counts(author_id=author.id)
        assert {p.name for p, _ in rows} == {"Public", "Private"}

    def test_list_orders_by_recommendation_count(self, db_session, author, viewer):
        third = create_user(db_session, "Linus")
        quiet = make_product(db_session, author, "Quiet")
        popular = make_product(db_session, author, "Popular")
        liked = make_product(db_session, author, "Liked")
        recs = RecommendationRepository(db_session)
        recs.add(popular.id, viewer.id)
        recs.add(popular.id, third.id)
        recs.add(liked.id, viewer.id)

        rows = ProductRepository(db_session).list_with_counts()
        assert [(p.id, c) for p, c in rows] == [(popular.id, 2), (liked.id, 1), (quiet.id, 0)]

    def test_list_ties_newest_first(self, db_session, author):
        older = make_product(db_session, author, "Older")
        newer = make_product(db_session, author, "Newer")
        ids = [p.id for p, _ in ProductRepository(db_session).list_with_counts()]
        assert ids == [newer.id, older.id]

    def test_soft_delete_sets_all_fields(self, db_session, author):
        repo = ProductRepository(db_session)
        product = make_product(db_session, author)
        assert repo.soft_delete(product.id, deleted_by=author.id, reason="spam") is True
        db_session.expire_all()
        stored = repo.get_by_id(product.id, include_deleted=True)
        assert stored.deleted_at is not None
        assert stored.deleted_by == author.id
        assert stored.deletion_reason == "spam"

    def test_soft_delete_is_guarded(self, db_session, author):
        repo = ProductRepository(db_session)
        product = make_product(db_session, author)
        assert repo.soft_delete(product.id, deleted_by=author.id, reason="first")
        assert repo.soft_delete(product.id, deleted_by=author.id, reason="second") is False
        db_session.expire_all()
        assert repo.get_by_id(product.id, include_deleted=True).deletion_reason == "first"

    def test_restore_is_guarded(self, db_session, author):
        repo = ProductRepository(db_session)
        product = make_product(db_session, author)
        assert repo.restore(product.id) is False
        repo.soft_delete(product.id, deleted_by=author.id, reason="spam")
        assert repo.restore(product.id) is True
        db_session.expire_all()
        stored = repo.get_by_id(product.id)
        assert stored is not None
        assert stored.deleted_by is None
        assert stored.deletion_reason is None

    def test_update_partial(self, db_session, author):
        repo = ProductRepository(db_session)
        product = make_product(db_session, author, description="Original")
        updated = repo.update(product, ProductUpdate(name="Renamed"))
        assert updated.name == "Renamed"
        assert updated.description == "Original"

    def test_delete_cascades(self, db_session, author, viewer):
        repo = ProductRepository(db_session)
        product = make_product(db_session, author)
        RecommendationRepository(db_session).add(product.id, viewer.id)
        comments = CommentRepository(db_session)
        top = comments.create(CommentCreate(product_id=product.id, content="Hi"), viewer.id)
        comments.create(
            CommentCreate(product_id=product.id, content="Hello", parent_id=top.id), author.id
        )

        repo.delete(product)

        assert db_session.query(Product).count() == 0
        assert db_session.query(Comment).count() == 0
        assert db_session.query(Recommendation).count() == 0
        assert db_session.query(Bookmark).count() == 0


class TestProductService:
    def test_get_product_includes_author_and_count(self, db_session, author, viewer):
        product = make_product(db_session, author)
        RecommendationRepository(db_session).add(product.id, viewer.id)

        detail = ProductService(db_session).get_product(product.id, viewer)
        assert detail.author is not None
        assert detail.author.name == "Ada"
        assert detail.recommendation_count == 1

    def test_private_product_hidden_from_others(self, db_session, author, viewer):
        from prodfind.core.errors import NotFoundError

        product = make_product(db_session, author, visibility=ProductVisibility.PRIVATE)
        service = ProductService(db_session)
        assert service.get_product(product.id, author).id == product.id
        with pytest.raises(NotFoundError):
            service.get_product(product.id, viewer)
        with pytest.raises(NotFoundError):
            service.get_product(product.id, None)

    def test_update_requires_owner(self, db_session, author, viewer):
        from prodfind.core.errors import ForbiddenError

        product = make_product(db_session, author)
        with pytest.raises(ForbiddenError):
            ProductService(db_session).update_product(product.id, ProductUpdate(name="X"), viewer)


class TestProductAPI:
    def test_list_anonymous(self, client, db_session, author):
        make_product(db_session, author, "Public")
        make_product(db_session, author, "Private", ProductVisibility.PRIVATE)

        response = client.get("/v1/products/")
        assert response.status_code == 200
        data = response.json()
        assert [p["name"] for p in data] == ["Public"]
        assert data[0]["recommendation_count"] == 0

    def test_list_by_user_id(self, client, db_session, author):
        make_product(db_session, author, "Public")
        make_product(db_session, author, "Private", ProductVisibility.PRIVATE)

        response = client.get("/v1/products/", params={"user_id": str(author.id)})
        assert response.status_code == 200
        assert {p["name"] for p in response.json()} == {"Public", "Private"}

    def test_create_requires_session(self, client):
        response = client.post("/v1/products/", json={"name": "Widget", "price": "Free"})
        assert response.status_code == 401

    def test_create(self, client, db_session, author):
        response = client.post(
            "/v1/products/",
            json={
                "name": "Widget",
                "price": "$5",
                "category": ["tools"],
                "links": [{"url": "https://example.com", "title": "Home"}],
            },
            headers=auth_headers(db_session, author),
        )
        assert response.status_code == 201
        data = response.json()
        assert data["author_id"] == str(author.id)
        assert data["visibility"] == "public"
        assert data["links"][0]["title"] == "Home"
        assert data["recommendation_count"] == 0

    def test_create_validation_error(self, client, db_session, author):
        response = client.post(
            "/v1/products/",
            json={"name": "", "price": "Free"},
            headers=auth_headers(db_session, author),
        )
        assert response.status_code == 422

    def test_create_rejects_automated_user_agent(self, client, db_session, author):
        headers = {**auth_headers(db_session, author), "User-Agent": "curl/8.4.0"}
        response = client.post(
            "/v1/products/", json={"name": "Widget", "price": "Free"}, headers=headers
        )
        assert response.status_code == 401
        assert response.json()["detail"] == "Bot verification failed"

    def test_get(self, client, db_session, author):
        product = make_product(db_session, author)
        response = client.get(f"/v1/products/{product.id}")
        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Widget"
        assert data["author"]["name"] == "Ada"
        assert "email" not in data["author"]

    def test_get_not_found(self, client):
        response = client.get("/v1/products/00000000-0000-0000-0000-000000000099")
        assert response.status_code == 404
        assert response.json()["detail"] == "Product not found"

    def test_get_removed_is_not_found(self, client, db_session, author):
        product = make_product(db_session, author)
        ProductRepository(db_session).soft_delete(product.id, deleted_by=author.id, reason="x")
        response = client.get(f"/v1/products/{product.id}")
        assert response.status_code == 404

    def test_get_private_as_owner(self, client, db_session, author, viewer):
        product = make_product(db_session, author, visibility=ProductVisibility.PRIVATE)
        assert client.get(f"/v1/products/{product.id}").status_code == 404
        assert (
            client.get(
                f"/v1/products/{product.id}", headers=auth_headers(db_session, viewer)
            ).status_code
            == 404
        )
        response = client.get(
            f"/v1/products/{product.id}", headers=auth_headers(db_session, author)
        )
        assert response.status_code == 200

    def test_update(self, client, db_session, author):
        product = make_product(db_session, author)
        response = client.patch(
            f"/v1/products/{product.id}",
            json={"name": "Widget Pro", "visibility": "unlisted"},
            headers=auth_headers(db_session, author),
        )
        assert response.status_code == 200
        assert response.json()["name"] == "Widget Pro"
        assert response.json()["visibility"] == "unlisted"
        assert response.json()["price"] == "Free"

    @pytest.mark.parametrize(
        "field", ["name", "price", "images", "links", "category", "visibility"]
    )
    def test_update_null_required_field(self, client, db_session, author, field):
        product = make_product(db_session, author)
        response = client.patch(
            f"/v1/products/{product.id}",
            json={field: None},
            headers=auth_headers(db_session, author),
        )
        assert response.status_code == 422
        db_session.expire_all()
        assert db_session.query(Product).filter(Product.id == product.id).one().name == "Widget"

    def test_update_clears_optional_field(self, client, db_session, author):
        product = make_product(db_session, author, description="Handy")
        response = client.patch(
            f"/v1/products/{product.id}",
            json={"description": None},
            headers=auth_headers(db_session, author),
        )
        assert response.status_code == 200
        assert response.json()["description"] is None

    def test_update_not_owner(self, client, db_session, author, viewer):
        product = make_product(db_session, author)
        response = client.patch(
            f"/v1/products/{product.id}",
            json={"name": "Hijacked"},
            headers=auth_headers(db_session, viewer),
        )
        assert response.status_code == 403

    def test_update_admin_is_not_owner(self, client, db_session, author):
        admin = create_user(db_session, "Root", role=UserRole.ADMIN)
        product = make_product(db_session, author)
        response = client.patch(
            f"/v1/products/{product.id}",
            json={"name": "Changed"},
            headers=auth_headers(db_session, admin),
        )
        assert response.status_code == 403

    def test_update_not_found(self, client, db_session, author):
        response = client.patch(
            "/v1/products/00000000-0000-0000-0000-000000000099",
            json={"name": "Ghost"},
            headers=auth_headers(db_session, author),
        )
        assert response.status_code == 404

    def test_delete(self, client, db_session, author):
        product = make_product(db_session, author)
        response = client.delete(
            f"/v1/products/{product.id}", headers=auth_headers(db_session, author)
        )
        assert response.status_code == 204
        db_session.expire_all()
        assert db_session.query(Product).count() == 0

    def test_delete_not_owner(self, client, db_session, author, viewer):
        product = make_product(db_session, author)
        response = client.delete(
            f"/v1/products/{product.id}", headers=auth_headers(db_session, viewer)
        )
        assert response.status_code == 403

    def test_delete_requires_session(self, client, db_session, author):
        product = make_product(db_session, author)
        assert client.delete(f"/v1/products/{product.id}").status_code == 401
