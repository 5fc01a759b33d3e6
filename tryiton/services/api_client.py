"""HTTP client for the TryItOn try-on backend."""

import uuid
from datetime import datetime

import httpx

from ..config import ApiConfig
from ..models import (
    Account,
    ItemCategory,
    Template,
    TryOnResponseData,
    TryOnResult,
)


class TryItOnClient:
    """Client for the try-on backend's REST API.

    Every call except user registration authenticates with a ``username``
    header. Non-2xx responses raise ``httpx.HTTPStatusError``.
    """

    def __init__(
        self,
        config: ApiConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config = config
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self.config.timeout,
                transport=self._transport,
            )
        return self._client

    @staticmethod
    def auth_header(username: str) -> dict[str, str]:
        return {"username": username}

    async def check_connection(self) -> bool:
        """Verify the backend is reachable."""
        try:
            response = await self.client.get(self.config.url("/"))
            return response.status_code == 200
        except httpx.ConnectError:
            return False

    async def register_user(self, account: Account) -> None:
        """Create or update the user record for ``account``."""
        payload = {
            "username": account.username,
            "is_pro": account.is_pro,
            "auth_provider": account.auth_provider.value,
            "email": account.email,
        }
        response = await self.client.post(
            self.config.url("/users/"),
            json=payload,
            headers=self.auth_header(account.username),
        )
        response.raise_for_status()

    async def notify_subscription(
        self,
        username: str,
        is_pro: bool,
        expiration_date: datetime | None = None,
    ) -> None:
        """Report an entitlement change."""
        payload = {
            "is_pro": is_pro,
            "expiration_date": expiration_date.isoformat() if expiration_date else None,
        }
        response = await self.client.post(
            self.config.url("/users/subscription/"),
            json=payload,
            headers=self.auth_header(username),
        )
        response.raise_for_status()

    async def fetch_templates(self, username: str) -> list[Template]:
        response = await self.client.get(
            self.config.url("/templates/"),
            headers=self.auth_header(username),
        )
        response.raise_for_status()
        return [Template.model_validate(item) for item in response.json()]

    async def fetch_results(self, username: str) -> list[TryOnResult]:
        response = await self.client.get(
            self.config.url("/results/"),
            headers=self.auth_header(username),
        )
        response.raise_for_status()
        return [TryOnResult.model_validate(item) for item in response.json()]

    async def upload_template(
        self,
        username: str,
        image: bytes,
        category: ItemCategory = ItemCategory.GENERAL,
    ) -> Template:
        """Upload a JPEG photo of the user as a try-on template."""
        response = await self.client.post(
            self.config.url("/templates/"),
            headers=self.auth_header(username),
            files={"file": ("image.jpg", image, "image/jpeg")},
            data={"category": category.value},
        )
        response.raise_for_status()
        return Template.model_validate(response.json())

    async def try_on_url(self, username: str, url: str) -> TryOnResponseData:
        """Request a try-on for an item page (e.g. an Instagram post)."""
        response = await self.client.post(
            self.config.url("/tryon/url/"),
            headers=self.auth_header(username),
            data={"url": url},
        )
        response.raise_for_status()
        return TryOnResponseData.model_validate(response.json())

    async def try_on_image(self, username: str, image: bytes) -> TryOnResponseData:
        """Request a try-on for an item photo."""
        response = await self.client.post(
            self.config.url("/tryon/upload/"),
            headers=self.auth_header(username),
            files={"file": (f"item_{uuid.uuid4().hex[:8]}.jpg", image, "image/jpeg")},
        )
        response.raise_for_status()
        return TryOnResponseData.model_validate(response.json())

    async def fetch_image(self, url: str) -> bytes:
        """Download an arbitrary image, e.g. a Google profile picture."""
        response = await self.client.get(url)
        response.raise_for_status()
        return response.content

    async def close(self):
        """Close the HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None
