"""Data models for TryItOn account sync."""

from .account import Account, AuthProvider, GoogleProfile, AppleCredential
from .catalog import ItemCategory, Template, TryOnResult, TryOnResponseData

__all__ = [
    "Account",
    "AuthProvider",
    "GoogleProfile",
    "AppleCredential",
    "ItemCategory",
    "Template",
    "TryOnResult",
    "TryOnResponseData",
]
