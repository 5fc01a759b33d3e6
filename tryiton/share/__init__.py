"""Share extension consumer."""

from .extension import ShareExtension

__all__ = ["ShareExtension"]
