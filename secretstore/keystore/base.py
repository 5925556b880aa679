"""Abstract base class for key stores."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Tuple

from secretstore.keystore.context import Context


@dataclass
class KeyStoreState:
    """
    Result of a key store status probe.

    Attributes:
        latency: Round-trip time of the probe in seconds
    """
    latency: float

    def __repr__(self) -> str:
        return f"KeyStoreState(latency={self.latency * 1000:.1f}ms)"


class KeyStore(ABC):
    """
    Abstract base class that all key stores must implement.

    A key store maps unique names to opaque byte values. Ensures a
    consistent interface across:
    - AWS Secrets Manager
    - In-memory store

    Every operation takes a Context. Operations raise the errors from
    secretstore.keystore.exceptions, or the context's own error when the
    context is canceled or past its deadline.
    """

    @abstractmethod
    def status(self, ctx: Context) -> KeyStoreState:
        """
        Probe the key store.

        Returns:
            KeyStoreState with the probe latency

        Raises:
            UnreachableError: If the store cannot be contacted
        """
        pass

    @abstractmethod
    def create(self, ctx: Context, name: str, value: bytes) -> None:
        """
        Store value under name if, and only if, no entry with that name exists.

        Raises:
            KeyExistsError: If an entry with that name already exists
        """
        pass

    def set(self, ctx: Context, name: str, value: bytes) -> None:
        """Same as create: an existing entry is never overwritten."""
        self.create(ctx, name, value)

    @abstractmethod
    def get(self, ctx: Context, name: str) -> bytes:
        """
        Return the value stored under name.

        Raises:
            KeyNotFoundError: If no entry with that name exists
        """
        pass

    @abstractmethod
    def delete(self, ctx: Context, name: str) -> None:
        """
        Remove the entry immediately.

        Raises:
            KeyNotFoundError: If no entry with that name exists
        """
        pass

    @abstractmethod
    def list(self, ctx: Context, prefix: str = "", n: int = -1, cursor: str = "") -> Tuple[List[str], str]:
        """
        List entry names starting with prefix.

        Args:
            prefix: Name prefix ("" matches every name)
            n: Maximum number of names; all matching names if negative
            cursor: Cursor returned by a previous call to continue from

        Returns:
            (names, next_cursor); next_cursor is "" when no matches remain
        """
        pass

    def close(self) -> None:
        """Release held resources. Safe to call more than once."""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
