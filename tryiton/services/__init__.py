"""Remote services."""

from .api_client import TryItOnClient

__all__ = ["TryItOnClient"]
