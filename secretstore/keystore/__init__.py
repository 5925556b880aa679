"""Key store module - pluggable secret stores behind one contract."""

# Import base and factory first (defines registry and decorator)
from secretstore.keystore.base import KeyStore, KeyStoreState
from secretstore.keystore.context import Context, OperationCanceledError, DeadlineExceededError
from secretstore.keystore.exceptions import (
    KeyStoreError,
    KeyExistsError,
    KeyNotFoundError,
    AccessDeniedError,
    UnreachableError,
    UnknownStoreError,
)
from secretstore.keystore.factory import (
    KeyStoreFactory,
    register_keystore,
    get_registered_keystores,
)
from secretstore.keystore.listing import list_names

# Import stores to trigger registration
from secretstore.keystore.memory import MemoryKeyStore
from secretstore.keystore.aws import SecretsManagerStore, SecretsManagerConfig

__all__ = [
    "KeyStore",
    "KeyStoreState",
    "Context",
    "OperationCanceledError",
    "DeadlineExceededError",
    "KeyStoreError",
    "KeyExistsError",
    "KeyNotFoundError",
    "AccessDeniedError",
    "UnreachableError",
    "UnknownStoreError",
    "KeyStoreFactory",
    "register_keystore",
    "get_registered_keystores",
    "list_names",
    "MemoryKeyStore",
    "SecretsManagerStore",
    "SecretsManagerConfig",
]
