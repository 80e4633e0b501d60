"""Keyword providers supplying locale-specific keyword lists and reason strings."""

from .provider import BundleKeywordProvider, KeywordSet, StaticKeywordProvider

__all__ = ["BundleKeywordProvider", "KeywordSet", "StaticKeywordProvider"]
