"""Placeholder resolver - resolves ${env:NAME} patterns in config."""

import os
import re
import logging
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from secretstore.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

# Pattern to match ${env:VAR_NAME}
PLACEHOLDER_PATTERN = re.compile(r'\$\{env:([^}]+)\}')


class PlaceholderResolver:
    """
    Resolves ${env:NAME} patterns in config values.

    Credentials should not live in the YAML file itself, so the config
    refers to environment variables instead:

        login:
          access_key: ${env:KES_AWS_ACCESS_KEY}

    Usage:
        resolver = PlaceholderResolver()
        resolved = resolver.resolve_value('${env:AWS_REGION}')

        # Or resolve entire config dict
        config = resolver.resolve_config(raw_config)
    """

    def __init__(self, prefix: str = "", dotenv_path: Optional[Path] = None):
        """
        Args:
            prefix: Prefix prepended to every variable name
            dotenv_path: Optional .env file loaded before resolving
        """
        self.prefix = prefix
        if dotenv_path is not None and Path(dotenv_path).exists():
            # Existing environment always wins over the .env file
            load_dotenv(dotenv_path, override=False)
            logger.info(f"Loaded environment from {dotenv_path}")

    def lookup(self, name: str) -> str:
        env_key = f"{self.prefix}{name}"
        value = os.environ.get(env_key)
        if value is None:
            raise ConfigError(
                f"Placeholder '{name}' cannot be resolved. Set environment variable: {env_key}"
            )
        return value

    def resolve_value(self, value: Any) -> Any:
        """
        Resolve a single value, replacing ${env:NAME} patterns.

        Args:
            value: Value that may contain placeholders

        Returns:
            Value with placeholders resolved (non-strings unchanged)

        Raises:
            ConfigError: If a referenced variable is not set
        """
        if not isinstance(value, str):
            return value

        def replace(match):
            return self.lookup(match.group(1))

        return PLACEHOLDER_PATTERN.sub(replace, value)

    def resolve_config(self, config: Any) -> Any:
        """Recursively resolve all placeholders in a dict/list structure."""
        if isinstance(config, dict):
            return {k: self.resolve_config(v) for k, v in config.items()}

        elif isinstance(config, list):
            return [self.resolve_config(item) for item in config]

        elif isinstance(config, str):
            return self.resolve_value(config)

        else:
            return config
