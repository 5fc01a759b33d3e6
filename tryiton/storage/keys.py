"""Key layout shared by the private and shared scopes.

The same keys are used in both scopes. ``account_to_entries`` and
``account_from_entries`` are the only places that know how an ``Account``
maps onto them.
"""

import logging
from typing import Any, Mapping

from ..models import Account, AuthProvider

logger = logging.getLogger(__name__)

USERNAME = "username"
IS_PRO = "isPro"
AUTH_PROVIDER = "authProvider"
EMAIL = "email"
PROFILE_IMAGE = "profileImage"
APPLE_USER_ID = "appleUserID"

ACCOUNT_KEYS = (USERNAME, IS_PRO, AUTH_PROVIDER, EMAIL, PROFILE_IMAGE, APPLE_USER_ID)


def account_to_entries(account: Account) -> dict[str, Any]:
    """Flatten an account into storage entries.

    Optional fields that are unset map to ``None``, meaning "remove the key".
    """
    return {
        USERNAME: account.username,
        IS_PRO: account.is_pro,
        AUTH_PROVIDER: account.auth_provider.value,
        EMAIL: account.email,
        PROFILE_IMAGE: account.profile_image,
        APPLE_USER_ID: account.apple_user_id,
    }


def account_from_entries(entries: Mapping[str, Any]) -> Account:
    """Rebuild an account from storage entries.

    A missing or empty username yields the anonymous account, whatever else
    the entries hold.
    """
    username = entries.get(USERNAME) or ""
    if not isinstance(username, str) or not username:
        return Account.anonymous()

    raw_provider = entries.get(AUTH_PROVIDER)
    try:
        provider = AuthProvider(raw_provider) if raw_provider else AuthProvider.LOCAL
    except ValueError:
        logger.warning("Unknown auth provider %r stored for %s, using local", raw_provider, username)
        provider = AuthProvider.LOCAL

    return Account(
        username=username,
        is_pro=entries.get(IS_PRO, False) is True,
        auth_provider=provider,
        email=_typed(entries, EMAIL, str),
        profile_image=_typed(entries, PROFILE_IMAGE, bytes),
        apple_user_id=_typed(entries, APPLE_USER_ID, str),
    )


def _typed(entries: Mapping[str, Any], key: str, kind: type) -> Any:
    value = entries.get(key)
    if value is None or value == "":
        return None
    if not isinstance(value, kind):
        logger.warning("Ignoring stored %s of type %s", key, type(value).__name__)
        return None
    return value
