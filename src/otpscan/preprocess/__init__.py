"""Text preprocessing applied before candidate extraction."""

from .normalizer import NormalizedMessage, normalize

__all__ = ["NormalizedMessage", "normalize"]
