"""Minimal smoke tests.

Proves the app boots, the core product flow works, and endpoints respond correctly.
"""

import pytest
from fastapi import FastAPI
from starlette.testclient import TestClient

from prodfind.core.database import get_db
from prodfind.main import app
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


def test_app_starts():
    """The FastAPI app object can be imported and is a FastAPI instance."""
    assert isinstance(app, FastAPI)


def test_health_endpoint(client: TestClient):
    """GET / returns 200 with app info."""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["app"] == "Prodfind"
    assert data["status"] == "running"
    assert "version" in data


def test_openapi_lists_routes(client: TestClient):
    paths = client.get("/openapi.json").json()["paths"]
    assert "/v1/products/" in paths
    assert "/v1/admin/appeals" in paths
    assert "/v1/notifications/{notification_id}/appeal" in paths


def test_publish_and_discuss(client: TestClient, db_session):
    """A product is published, recommended and commented on by another user."""
    maker = auth_headers(db_session, create_user(db_session, "Ada"))
    fan = auth_headers(db_session, create_user(db_session, "Grace"))

    product = client.post(
        "/v1/products/", json={"name": "Smoke Widget", "price": "Free"}, headers=maker
    ).json()
    client.post(f"/v1/products/{product['id']}/recommendation", headers=fan)
    client.post(
        "/v1/comments/",
        json={"product_id": product["id"], "content": "Looks great"},
        headers=fan,
    )

    listing = client.get("/v1/products/").json()
    assert listing[0]["id"] == product["id"]
    assert listing[0]["recommendation_count"] == 1

    unread = client.get("/v1/notifications/unread_count", headers=maker).json()
    assert unread == {"unread_count": 2}
