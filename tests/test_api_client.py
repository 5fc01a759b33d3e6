"""Tests for the backend client against the in-memory backend."""

import json

import httpx
import pytest

from tryiton.config import ApiConfig
from tryiton.models import Account, AuthProvider, ItemCategory
from tryiton.services import TryItOnClient


class TestRequestFormat:
    """Tests for what goes over the wire."""

    @pytest.fixture
    def captured(self):
        return []

    @pytest.fixture
    def client(self, captured):
        def handler(request):
            captured.append(request)
            return httpx.Response(200, json={})
        return TryItOnClient(ApiConfig(base_url="http://api.test/"), transport=httpx.MockTransport(handler))

    @pytest.mark.asyncio
    async def test_register_user_payload(self, client, captured):
        await client.register_user(Account(
            username="alice",
            is_pro=True,
            auth_provider=AuthProvider.GOOGLE,
            email="a@x.io",
        ))

        request = captured[0]
        assert request.method == "POST"
        assert str(request.url) == "http://api.test/users/"
        assert request.headers["username"] == "alice"
        assert json.loads(request.content) == {
            "username": "alice",
            "is_pro": True,
            "auth_provider": "google",
            "email": "a@x.io",
        }

    @pytest.mark.asyncio
    async def test_subscription_payload_without_expiration(self, client, captured):
        await client.notify_subscription("alice", False)

        request = captured[0]
        assert request.url.path == "/users/subscription/"
        assert request.headers["username"] == "alice"
        assert json.loads(request.content) == {"is_pro": False, "expiration_date": None}

    @pytest.mark.asyncio
    async def test_close_is_idempotent(self, client):
        await client.register_user(Account(username="alice"))

        await client.close()
        await client.close()


class TestAgainstBackend:

    @pytest.mark.asyncio
    async def test_check_connection(self, api_client):
        assert await api_client.check_connection() is True

    @pytest.mark.asyncio
    async def test_upload_then_fetch_templates(self, api_client, minimal_jpeg_bytes):
        await api_client.register_user(Account(username="alice"))

        template = await api_client.upload_template("alice", minimal_jpeg_bytes, ItemCategory.GLASSES)
        templates = await api_client.fetch_templates("alice")

        assert template.category == "glasses"
        assert [t.id for t in templates] == [template.id]
        assert template.image_url("http://testserver").endswith(f"/images/templates/{template.filename}")

    @pytest.mark.asyncio
    async def test_try_on_requests_produce_results(self, api_client, minimal_jpeg_bytes):
        await api_client.register_user(Account(username="alice"))

        from_url = await api_client.try_on_url("alice", "https://www.instagram.com/p/abc/")
        from_image = await api_client.try_on_image("alice", minimal_jpeg_bytes)
        results = await api_client.fetch_results("alice")

        assert len(from_url.result_ids) == 1
        assert len(from_image.result_ids) == 1
        assert {r.id for r in results} == set(from_url.result_ids + from_image.result_ids)

    @pytest.mark.asyncio
    async def test_unknown_user_is_rejected(self, api_client):
        with pytest.raises(httpx.HTTPStatusError):
            await api_client.notify_subscription("nobody", True)


class TestCategories:

    def test_display_name(self):
        assert ItemCategory.SHOE.display_name == "Shoe"

    def test_all_share_categories_present(self):
        assert [c.value for c in ItemCategory] == [
            "accessory", "shoe", "clothing", "glasses", "general",
        ]
