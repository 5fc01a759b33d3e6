"""Exceptions raised by the account sync package."""


class TryItOnError(Exception):
    """Base exception for the package."""
    pass


class StorageError(TryItOnError):
    """Raised when a storage scope cannot be read or written."""
    pass


class StorageUnavailableError(StorageError):
    """Raised when the shared group container cannot be opened."""
    pass


class CredentialVerificationError(TryItOnError):
    """Raised when a federated sign-in credential is rejected."""
    pass


class NotLoggedInError(TryItOnError):
    """Raised by the share extension when no user is signed in."""
    pass


class UnsupportedContentError(TryItOnError):
    """Raised by the share extension for content it cannot post."""
    pass
