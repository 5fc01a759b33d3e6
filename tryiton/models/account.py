"""Account state models."""

from enum import Enum

from pydantic import BaseModel, model_validator


class AuthProvider(str, Enum):
    """How the user signed in. ``LOCAL`` travels as ``"custom"``."""

    LOCAL = "custom"
    GOOGLE = "google"
    APPLE = "apple"


class Account(BaseModel):
    """The signed-in user's identity and entitlement."""

    username: str = ""
    is_pro: bool = False
    auth_provider: AuthProvider = AuthProvider.LOCAL
    email: str | None = None
    profile_image: bytes | None = None
    apple_user_id: str | None = None

    @model_validator(mode="after")
    def _anonymous_has_no_entitlement(self) -> "Account":
        if not self.username:
            if self.is_pro:
                raise ValueError("an unauthenticated account cannot be entitled")
            if self.auth_provider is not AuthProvider.LOCAL:
                raise ValueError("an unauthenticated account must use the local provider")
        return self

    @classmethod
    def anonymous(cls) -> "Account":
        return cls()

    @property
    def is_authenticated(self) -> bool:
        return bool(self.username)


class GoogleProfile(BaseModel):
    """Profile returned by a completed Google sign-in."""

    name: str | None = None
    email: str | None = None
    image_url: str | None = None


class AppleCredential(BaseModel):
    """Credential returned by a completed Apple sign-in."""

    user: str
    nonce: str
    given_name: str | None = None
    family_name: str | None = None
    email: str | None = None

    def display_username(self) -> str:
        """Username derived from the full name, falling back to ``AppleUser``."""
        if self.given_name and self.family_name:
            return f"{self.given_name}{self.family_name}"
        if self.given_name:
            return self.given_name
        return "AppleUser"
