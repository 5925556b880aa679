"""Custom exceptions for configuration handling."""


class ConfigError(Exception):
    """Raised when configuration is missing, invalid, or cannot be resolved."""
    pass
