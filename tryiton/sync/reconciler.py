"""Launch-time repair of divergence between the private and shared scopes."""

import logging
from enum import Enum

from ..exceptions import StorageError
from ..storage import keys
from ..storage.adapter import DualScopePersistence
from ..storage.scope import StorageScope

logger = logging.getLogger(__name__)


class ReconcileAction(str, Enum):
    IN_SYNC = "in_sync"
    PUSHED_PRIVATE = "pushed_private"
    PULLED_SHARED = "pulled_shared"
    NOTHING_STORED = "nothing_stored"


class ConsistencyReconciler:
    """Resolves private/shared disagreement on ``username``.

    The private scope wins whenever it holds a username. The shared scope
    wins only when the private one is empty, which happens after the app's
    own storage was reset while the group container survived.

    Scope failures are logged and read as empty, so ``reconcile`` never
    raises.
    """

    def __init__(self, persistence: DualScopePersistence):
        self.persistence = persistence

    def reconcile(self) -> ReconcileAction:
        u_priv = self._read_username(self.persistence.private)
        u_shared = self._read_username(self.persistence.shared)

        if u_priv:
            if u_shared == u_priv:
                logger.debug("Scopes agree on username %s", u_priv)
                return ReconcileAction.IN_SYNC
            if u_shared:
                logger.warning("Username mismatch: private=%s shared=%s", u_priv, u_shared)
            else:
                logger.warning("Shared container missing username %s", u_priv)
            return self._push_private(u_priv)

        if u_shared:
            logger.info("Only the shared container has username %s", u_shared)
            return self._pull_shared(u_shared)

        logger.info("Neither scope has credentials")
        return ReconcileAction.NOTHING_STORED

    def _push_private(self, u_priv: str) -> ReconcileAction:
        if self.persistence.shared is None:
            logger.info("Shared container unavailable, keeping private username %s", u_priv)
            return ReconcileAction.IN_SYNC
        try:
            self.persistence.write(self.persistence.load_private())
        except (StorageError, ValueError) as e:
            logger.error("Failed to push private credentials: %s", e)
            return ReconcileAction.IN_SYNC

        if self._read_username(self.persistence.shared) == u_priv:
            logger.info("Fix verified: shared container now has username %s", u_priv)
        else:
            logger.error("Fix failed: shared container still lacks username %s", u_priv)
        return ReconcileAction.PUSHED_PRIVATE

    def _pull_shared(self, u_shared: str) -> ReconcileAction:
        shared = self.persistence.shared
        private = self.persistence.private
        try:
            is_pro = shared.get(keys.IS_PRO, False) is True
            private.set(keys.USERNAME, u_shared)
            private.set(keys.IS_PRO, is_pro)
        except StorageError as e:
            logger.error("Failed to copy credentials from shared container: %s", e)
            return ReconcileAction.NOTHING_STORED
        logger.info("Copied credentials from shared container to private scope")
        return ReconcileAction.PULLED_SHARED

    @staticmethod
    def _read_username(scope: StorageScope | None) -> str:
        if scope is None:
            return ""
        try:
            value = scope.get(keys.USERNAME)
        except (StorageError, OSError) as e:
            logger.error("Failed to read username from %s: %s", scope.name, e)
            return ""
        return value if isinstance(value, str) else ""
