"""Factory for creating key stores with registry pattern."""

import logging
from typing import Dict, Type, List, Callable

from secretstore.core.config import Config
from secretstore.core.exceptions import ConfigError
from secretstore.keystore.base import KeyStore
from secretstore.keystore.context import Context

logger = logging.getLogger(__name__)

# Registry to hold key store classes
_KEYSTORE_REGISTRY: Dict[str, Type[KeyStore]] = {}


def register_keystore(name: str) -> Callable:
    """
    Decorator to register a key store class.

    A registered class must provide a `connect(ctx, **kwargs)` classmethod.

    Usage:
        @register_keystore("aws")
        class SecretsManagerStore(KeyStore):
            ...
    """
    def decorator(cls: Type[KeyStore]) -> Type[KeyStore]:
        if name in _KEYSTORE_REGISTRY:
            logger.warning(f"Overwriting existing key store: {name}")
        _KEYSTORE_REGISTRY[name] = cls
        logger.debug(f"Registered key store: {name} -> {cls.__name__}")
        return cls
    return decorator


def get_registered_keystores() -> List[str]:
    """Return list of registered key store names."""
    return list(_KEYSTORE_REGISTRY.keys())


class KeyStoreFactory:
    """
    Factory that connects key stores based on config.

    Usage:
        # From config dict
        store = KeyStoreFactory.from_config(ctx, {
            "provider": "aws",
            "aws": {
                "region": "us-east-1",
                "kms_key_id": "alias/kes",
            }
        })

        # From a YAML file with a keystore section
        store = KeyStoreFactory.from_file(ctx, "config/keystore.yaml", env="dev")

        # Or directly
        store = KeyStoreFactory.create(ctx, "aws", region="us-east-1")
    """

    @classmethod
    def create(cls, ctx: Context, provider: str, **kwargs) -> KeyStore:
        """
        Connect a key store.

        Args:
            ctx: Context bounding the connect and its status probe
            provider: Provider name ('aws', 'memory')
            **kwargs: Provider-specific configuration

        Returns:
            Connected KeyStore instance

        Raises:
            ValueError: If provider is unknown
        """
        if provider not in _KEYSTORE_REGISTRY:
            available = get_registered_keystores()
            raise ValueError(
                f"Unknown key store provider: '{provider}'. "
                f"Available: {available}"
            )

        store_class = _KEYSTORE_REGISTRY[provider]
        logger.info(f"Connecting key store: {provider}")

        return store_class.connect(ctx, **kwargs)

    @classmethod
    def from_config(cls, ctx: Context, config: dict) -> KeyStore:
        """
        Connect a key store from config dict.

        Args:
            ctx: Context bounding the connect
            config: Config dict with provider and provider-specific settings

        Returns:
            Connected KeyStore instance
        """
        provider = config.get("provider", "aws")
        provider_config = config.get(provider) or {}

        logger.debug(f"Creating key store from config: provider={provider}")

        return cls.create(ctx, provider, **provider_config)

    @classmethod
    def from_file(cls, ctx: Context, config_path: str = "config/keystore.yaml", env: str = None) -> KeyStore:
        """
        Connect the key store described by the `keystore` section of a YAML file.

        Args:
            ctx: Context bounding the connect
            config_path: Path to the config file
            env: Environment override to apply (e.g. 'dev')

        Raises:
            ConfigError: If the file has no keystore section
        """
        section = Config.load(config_path, env=env).get_section("keystore")
        if not isinstance(section, dict) or not section:
            raise ConfigError(f"No 'keystore' section in {config_path}")

        return cls.from_config(ctx, section)
