"""TryItOn account sync between the app and its share extension."""

from .config import SyncConfig, load_config
from .models import Account, AuthProvider
from .session import AccountSession, SessionState
from .storage import DualScopePersistence, open_private_scope, open_shared_scope
from .services import TryItOnClient

__all__ = [
    "SyncConfig",
    "load_config",
    "Account",
    "AuthProvider",
    "AccountSession",
    "SessionState",
    "DualScopePersistence",
    "open_private_scope",
    "open_shared_scope",
    "TryItOnClient",
    "create_session",
    "create_share_extension",
]


def create_session(config: SyncConfig | None = None) -> AccountSession:
    """Wire the scopes, backend client and session from configuration."""
    config = config or load_config()
    persistence = DualScopePersistence(
        private=open_private_scope(config.storage),
        shared=open_shared_scope(config.storage),
    )
    return AccountSession(persistence, client=TryItOnClient(config.api))


def create_share_extension(config: SyncConfig | None = None):
    """Wire the read-only share extension from configuration."""
    from .share import ShareExtension

    config = config or load_config()
    return ShareExtension(open_shared_scope(config.storage), TryItOnClient(config.api))
