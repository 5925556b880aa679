"""In-memory key store."""

import logging
import threading
from typing import Dict, List, Tuple

from secretstore.keystore.base import KeyStore, KeyStoreState
from secretstore.keystore.context import Context
from secretstore.keystore.exceptions import KeyExistsError, KeyNotFoundError
from secretstore.keystore.factory import register_keystore
from secretstore.keystore.listing import list_names

logger = logging.getLogger(__name__)


@register_keystore("memory")
class MemoryKeyStore(KeyStore):
    """
    Key store keeping entries in a process-local dict.

    Entries are lost when the process exits. Useful for local development
    and as a reference for the KeyStore contract.
    """

    def __init__(self):
        self._entries: Dict[str, bytes] = {}
        self._lock = threading.Lock()

    @classmethod
    def connect(cls, ctx: Context, **kwargs) -> "MemoryKeyStore":
        ctx.check()
        if kwargs:
            logger.warning(f"Ignoring options for in-memory key store: {sorted(kwargs)}")
        return cls()

    def status(self, ctx: Context) -> KeyStoreState:
        ctx.check()
        return KeyStoreState(latency=0.0)

    def create(self, ctx: Context, name: str, value: bytes) -> None:
        ctx.check()
        with self._lock:
            if name in self._entries:
                raise KeyExistsError()
            self._entries[name] = bytes(value)

    def get(self, ctx: Context, name: str) -> bytes:
        ctx.check()
        with self._lock:
            if name not in self._entries:
                raise KeyNotFoundError()
            return self._entries[name]

    def delete(self, ctx: Context, name: str) -> None:
        ctx.check()
        with self._lock:
            if self._entries.pop(name, None) is None:
                raise KeyNotFoundError()

    def list(self, ctx: Context, prefix: str = "", n: int = -1, cursor: str = "") -> Tuple[List[str], str]:
        ctx.check()
        with self._lock:
            names = list(self._entries)
        return list_names(names, prefix, n, cursor)

    def __str__(self) -> str:
        return "In-Memory"
