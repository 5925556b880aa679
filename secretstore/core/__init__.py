"""Core module - configuration loading."""

from secretstore.core.exceptions import ConfigError
from secretstore.core.placeholders import PlaceholderResolver
from secretstore.core.config import Config

__all__ = [
    "ConfigError",
    "PlaceholderResolver",
    "Config",
]
