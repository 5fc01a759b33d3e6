"""Mock backend endpoint tests using FastAPI TestClient."""

import pytest
from fastapi.testclient import TestClient

from api.server import create_app


class TestHealthEndpoints:
    """Tests for health check endpoints."""

    @pytest.fixture
    def client(self):
        return TestClient(create_app())

    def test_root_endpoint(self, client):
        """Root endpoint returns OK status."""
        response = client.get("/")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert "service" in data
        assert "version" in data


class TestUserEndpoints:
    """Tests for registration and subscription updates."""

    @pytest.fixture
    def client(self):
        return TestClient(create_app())

    def test_register_user(self, client):
        response = client.post("/users/", json={
            "username": "alice",
            "is_pro": False,
            "auth_provider": "custom",
            "email": None,
        })

        assert response.status_code == 200
        assert response.json()["username"] == "alice"

    def test_register_requires_username(self, client):
        response = client.post("/users/", json={"is_pro": True})

        # Should fail validation
        assert response.status_code == 422

    def test_subscription_update(self, client):
        client.post("/users/", json={"username": "alice"})

        response = client.post(
            "/users/subscription/",
            json={"is_pro": True, "expiration_date": "2026-11-19T00:00:00+00:00"},
            headers={"username": "alice"},
        )

        assert response.status_code == 200
        assert response.json()["is_pro"] is True

    def test_subscription_without_username_header(self, client):
        response = client.post("/users/subscription/", json={"is_pro": True})

        assert response.status_code == 401


class TestTryOnEndpoints:

    @pytest.fixture
    def client(self):
        client = TestClient(create_app())
        client.post("/users/", json={"username": "alice"})
        return client

    def test_tryon_url(self, client):
        response = client.post(
            "/tryon/url/",
            data={"url": "https://www.tiktok.com/@shop/video/1"},
            headers={"username": "alice"},
        )

        assert response.status_code == 200
        data = response.json()
        assert len(data["result_ids"]) == 1
        assert data["result_urls"][0].startswith("/images/results/")

    def test_tryon_url_missing_url(self, client):
        response = client.post("/tryon/url/", data={}, headers={"username": "alice"})

        assert response.status_code == 422

    def test_template_upload_defaults_to_general(self, client):
        response = client.post(
            "/templates/",
            files={"file": ("image.jpg", b"\xff\xd8\xff\xd9", "image/jpeg")},
            headers={"username": "alice"},
        )

        assert response.status_code == 200
        assert response.json()["category"] == "general"
        assert len(client.get("/templates/", headers={"username": "alice"}).json()) == 1
