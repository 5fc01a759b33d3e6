"""Mirrors the account into the private and shared scopes."""

import logging

from ..exceptions import StorageError
from ..models import Account
from . import keys
from .scope import StorageScope

logger = logging.getLogger(__name__)


class DualScopePersistence:
    """Writes every account change to both scopes.

    The private scope is written first and is the source of truth. The
    shared scope is written next and then synchronized, since its writes
    are not durable until flushed. When the shared scope is ``None`` every
    shared-scope operation is skipped.
    """

    def __init__(self, private: StorageScope, shared: StorageScope | None):
        self.private = private
        self.shared = shared
        if shared is None:
            logger.warning("Shared container unavailable; persisting to the private scope only")

    @property
    def shared_available(self) -> bool:
        return self.shared is not None

    def write(self, account: Account) -> None:
        """Persist ``account`` to the private scope, then the shared scope.

        Private-scope failures propagate. Shared-scope failures are logged.
        """
        entries = keys.account_to_entries(account)
        self._apply(self.private, entries)

        if self.shared is None:
            logger.debug("Skipping shared write for %s", account.username)
            return
        try:
            self._apply(self.shared, entries)
            self.shared.synchronize()
        except StorageError as e:
            logger.error("Failed to write shared container for %s: %s", account.username, e)
            return

        logger.debug("Shared container now has username %r", self.shared.get(keys.USERNAME))

    def clear(self) -> None:
        """Remove every account key from both scopes.

        The shared scope is cleared even if the private scope fails.
        """
        try:
            for key in keys.ACCOUNT_KEYS:
                self.private.remove(key)
        finally:
            self._clear_shared()

    def _clear_shared(self) -> None:
        if self.shared is None:
            return
        try:
            for key in keys.ACCOUNT_KEYS:
                self.shared.remove(key)
            self.shared.synchronize()
        except StorageError as e:
            logger.error("Failed to clear shared container: %s", e)

    def load_private(self) -> Account:
        """Read the full account snapshot from the private scope."""
        return keys.account_from_entries(
            {key: self.private.get(key) for key in keys.ACCOUNT_KEYS}
        )

    def read_shared_identity(self) -> tuple[str, bool]:
        """Return ``(username, is_pro)`` from the shared scope."""
        if self.shared is None:
            return "", False
        return (
            self.shared.get(keys.USERNAME) or "",
            self.shared.get(keys.IS_PRO, False) is True,
        )

    @staticmethod
    def _apply(scope: StorageScope, entries: dict) -> None:
        for key, value in entries.items():
            if value is None:
                scope.remove(key)
            else:
                scope.set(key, value)
