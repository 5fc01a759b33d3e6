"""Share extension: posts shared pages and photos for the signed-in user.

Runs in its own process and only ever reads the shared scope. The main app
is the sole writer, so a missing or stale username is read as "not logged
in" rather than an error in the store.
"""

import logging

from ..exceptions import NotLoggedInError, StorageError, UnsupportedContentError
from ..models import ItemCategory, Template, TryOnResponseData
from ..services import TryItOnClient
from ..storage import keys
from ..storage.scope import StorageScope

logger = logging.getLogger(__name__)

URL_TRYON_HOSTS = ("instagram.com", "tiktok.com")


class ShareExtension:
    """Read-only consumer of the shared scope."""

    def __init__(self, shared: StorageScope | None, client: TryItOnClient):
        self.shared = shared
        self.client = client

    def current_username(self) -> str | None:
        """Username from the shared scope, or ``None`` if nobody is signed in."""
        if self.shared is None:
            logger.error("Shared container unavailable")
            return None
        try:
            self.shared.reload()
            username = self.shared.get(keys.USERNAME)
        except (StorageError, OSError) as e:
            logger.error("Failed to read shared container: %s", e)
            return None
        if not isinstance(username, str) or not username:
            return None
        return username

    async def post(
        self,
        url: str | None = None,
        image: bytes | None = None,
        category: ItemCategory = ItemCategory.GENERAL,
    ) -> TryOnResponseData | Template:
        """Send shared content to the backend.

        Instagram and TikTok links become URL try-ons. A shared photo is
        uploaded as a template in ``category``.
        """
        username = self.current_username()
        if username is None:
            raise NotLoggedInError("Please login to TryItOn app first")

        if url and any(host in url for host in URL_TRYON_HOSTS):
            logger.info("Sharing %s for %s", url, username)
            return await self.client.try_on_url(username, url)
        if image:
            logger.info("Uploading shared photo as %s template for %s", category.value, username)
            return await self.client.upload_template(username, image, category)
        raise UnsupportedContentError("Unsupported content type")
