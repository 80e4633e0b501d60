"""Typed exceptions for configuration and keyword bundle problems."""


class ConfigError(ValueError):
    """Base class for configuration related errors."""


class KeywordBundleError(ConfigError):
    """Raised when a keyword bundle exists but cannot be parsed or validated."""
