"""Account session: the object UI code signs in and out through."""

import asyncio
import logging
import secrets
from datetime import datetime
from enum import Enum
from typing import Any, Coroutine

import httpx

from .exceptions import CredentialVerificationError, StorageError
from .models import Account, AppleCredential, AuthProvider, GoogleProfile
from .services import TryItOnClient
from .storage.adapter import DualScopePersistence
from .sync import ConsistencyReconciler

logger = logging.getLogger(__name__)

NONCE_CHARSET = "0123456789ABCDEFGHIJKLMNOPQRSTUVXYZabcdefghijklmnopqrstuvwxyz-._"


class SessionState(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED = "authenticated"


def generate_nonce(length: int = 32) -> str:
    """Random nonce for Apple sign-in."""
    return "".join(secrets.choice(NONCE_CHARSET) for _ in range(length))


class AccountSession:
    """Owns the in-memory account and keeps both storage scopes in step.

    Every mutation commits locally first. Calls to the backend are started
    as background tasks on the running event loop; their outcome is logged
    and never rolls back local state.

    Flow on launch:
    1. ``restore_on_launch()`` reconciles the scopes
    2. the account is loaded from the private scope
    """

    def __init__(
        self,
        persistence: DualScopePersistence,
        client: TryItOnClient | None = None,
        reconciler: ConsistencyReconciler | None = None,
    ):
        self.persistence = persistence
        self.client = client
        self.reconciler = reconciler or ConsistencyReconciler(persistence)

        self.account = Account.anonymous()
        self.state = SessionState.UNAUTHENTICATED

        self._pending: set[asyncio.Task] = set()
        self._apple_nonce: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.state is SessionState.AUTHENTICATED

    # -- launch --------------------------------------------------------

    def restore_on_launch(self) -> Account:
        """Reconcile the scopes and load the saved account, if any."""
        action = self.reconciler.reconcile()
        logger.info("Reconciliation finished: %s", action.value)

        try:
            self.account = self.persistence.load_private()
        except (StorageError, OSError, ValueError) as e:
            logger.error("Failed to load saved account: %s", e)
            self.account = Account.anonymous()

        if self.account.is_authenticated:
            logger.info("Restored session for %s", self.account.username)
            self.state = SessionState.AUTHENTICATED
        else:
            logger.info("No saved login found")
            self.state = SessionState.UNAUTHENTICATED
        return self.account

    # -- sign in / out -------------------------------------------------

    def login(
        self,
        username: str,
        is_pro: bool = False,
        provider: AuthProvider = AuthProvider.LOCAL,
        email: str | None = None,
        apple_user_id: str | None = None,
    ) -> asyncio.Task | None:
        """Sign in and register the user with the backend.

        Returns the registration task, or ``None`` when none was started.
        """
        if not username:
            raise ValueError("username must not be empty")

        account = Account(
            username=username,
            is_pro=is_pro,
            auth_provider=provider,
            email=email,
            apple_user_id=apple_user_id,
        )
        logger.info("Logging in %s via %s (pro=%s)", username, provider.value, is_pro)
        self._commit(account)
        self.state = SessionState.AUTHENTICATED

        if self.client is None:
            return None
        return self._spawn(self.client.register_user(account), f"registration of {username}")

    def login_with_google(self, profile: GoogleProfile | None) -> asyncio.Task | None:
        """Complete a Google sign-in. Google users start without entitlement."""
        if profile is None:
            logger.error("No user data returned from Google Sign In")
            raise CredentialVerificationError("Google sign-in returned no user")

        task = self.login(
            profile.name or "GoogleUser",
            is_pro=False,
            provider=AuthProvider.GOOGLE,
            email=profile.email or None,
        )
        if profile.image_url and self.client is not None:
            self._spawn(
                self._fetch_profile_image(self.account.username, profile.image_url),
                "profile image download",
            )
        return task

    def begin_apple_sign_in(self) -> str:
        """Start an Apple sign-in; the returned nonce goes into the request."""
        self._apple_nonce = generate_nonce()
        return self._apple_nonce

    def login_with_apple(self, credential: AppleCredential) -> asyncio.Task | None:
        """Complete an Apple sign-in started with ``begin_apple_sign_in``."""
        expected, self._apple_nonce = self._apple_nonce, None
        if expected is None or not secrets.compare_digest(credential.nonce, expected):
            logger.error("Apple credential nonce does not match the pending request")
            raise CredentialVerificationError("Apple credential failed nonce verification")

        return self.login(
            credential.display_username(),
            is_pro=False,
            provider=AuthProvider.APPLE,
            email=credential.email,
            apple_user_id=credential.user,
        )

    def logout(self) -> None:
        """Sign out locally. Always succeeds."""
        logger.info("Logging out user: %s", self.account.username)
        try:
            self.persistence.clear()
        except StorageError as e:
            logger.error("Failed to clear saved credentials: %s", e)
        self.account = Account.anonymous()
        self.state = SessionState.UNAUTHENTICATED

    # -- entitlement ---------------------------------------------------

    def update_entitlement(
        self,
        active: bool,
        expiration_date: datetime | None = None,
    ) -> asyncio.Task | None:
        """Apply a subscription status reported by the billing platform."""
        if active == self.account.is_pro:
            return None
        if not self.is_authenticated:
            logger.warning("Ignoring entitlement change while signed out")
            return None

        account = self.account.model_copy(update={"is_pro": active})
        logger.info("Entitlement for %s changed to %s", account.username, active)
        self._commit(account)

        if self.client is None:
            return None
        return self._spawn(
            self.client.notify_subscription(account.username, active, expiration_date),
            f"subscription update for {account.username}",
        )

    # -- background work -----------------------------------------------

    async def wait_pending(self) -> None:
        """Wait for every background call started so far."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def _commit(self, account: Account) -> None:
        self.persistence.write(account)
        self.account = account

    def _spawn(self, coro: Coroutine[Any, Any, Any], label: str) -> asyncio.Task | None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("No running event loop, skipping %s", label)
            coro.close()
            return None

        task = loop.create_task(self._run_remote(coro, label))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    @staticmethod
    async def _run_remote(coro: Coroutine[Any, Any, Any], label: str) -> bool:
        try:
            await coro
        except (httpx.HTTPError, StorageError) as e:
            logger.error("%s failed: %s", label.capitalize(), e)
            return False
        logger.info("%s succeeded", label.capitalize())
        return True

    async def _fetch_profile_image(self, username: str, url: str) -> None:
        image = await self.client.fetch_image(url)
        if self.account.username != username:
            logger.info("Discarding profile image for %s, user changed", username)
            return
        self._commit(self.account.model_copy(update={"profile_image": image}))
