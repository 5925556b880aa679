"""
Configuration loader for the secret store.
Reads the keystore YAML file, applies an environment override and resolves
${env:NAME} placeholders.
"""

import yaml
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from secretstore.core.exceptions import ConfigError
from secretstore.core.placeholders import PlaceholderResolver

logger = logging.getLogger(__name__)


def _read_yaml(path: Path) -> Dict[str, Any]:
    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping, got {type(data).__name__}")
    return data


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Merge override into a copy of base; nested mappings are merged key by key."""
    merged = dict(base)
    for key, value in override.items():
        if isinstance(merged.get(key), dict) and isinstance(value, dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class Config:
    """
    Singleton config loader.

    Usage:
        config = Config.load("config/keystore.yaml", env="dev")
        region = config.get("keystore.aws.region")
        keystore = config.get_section("keystore")
    """

    _instance: Optional["Config"] = None
    _config: Dict[str, Any] = {}

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @classmethod
    def load(cls, config_path: str = "config/keystore.yaml", env: str = None) -> "Config":
        """
        Load config from YAML file.

        Args:
            config_path: Path to main config file
            env: Environment name; <config dir>/environments/{env}.yaml is
                 merged over the main file if it exists

        Raises:
            FileNotFoundError: If the config file does not exist
            ConfigError: If the file is not a mapping or a placeholder cannot be resolved
        """
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        data = _read_yaml(path)
        logger.info(f"Loaded config from {config_path}")

        if env:
            env_path = path.parent / "environments" / f"{env}.yaml"
            if env_path.exists():
                data = _deep_merge(data, _read_yaml(env_path))
                logger.info(f"Applied environment override: {env}")
            else:
                logger.warning(f"No override for environment '{env}' at {env_path}")

        resolver = PlaceholderResolver(dotenv_path=Path.cwd() / ".env")

        instance = cls()
        instance._config = resolver.resolve_config(data)
        return instance

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get config value using dot notation.

        Example:
            config.get("keystore.aws.region")  # Returns "us-east-1"
            config.get("keystore.missing", "x")  # Returns "x"
        """
        value = self._config
        for part in key.split("."):
            if not isinstance(value, dict) or part not in value:
                return default
            value = value[part]
        return value

    def get_section(self, section: str) -> Dict[str, Any]:
        """Get entire config section as dict."""
        return self.get(section, {})

    @property
    def raw(self) -> Dict[str, Any]:
        return self._config

    @classmethod
    def reset(cls):
        """Reset singleton instance (useful for testing)."""
        cls._instance = None
        cls._config = {}
