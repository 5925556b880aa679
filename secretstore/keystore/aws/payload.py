"""Text/binary encoding of secret values."""

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class SecretPayload:
    """
    A secret value as it travels to and from Secrets Manager.

    AWS stores a secret either as "SecretString" or as "SecretBinary" and
    guarantees that exactly one of them is present. The console only shows
    "SecretString", so UTF-8 values are written as text and everything
    else as binary.

    Attributes:
        value: The raw secret bytes
        is_text: Whether the value travels as SecretString
    """
    value: bytes
    is_text: bool

    @classmethod
    def from_bytes(cls, value: bytes) -> "SecretPayload":
        try:
            bytes(value).decode("utf-8")
        except UnicodeDecodeError:
            return cls(value=bytes(value), is_text=False)
        return cls(value=bytes(value), is_text=True)

    @classmethod
    def from_response(cls, response: Dict[str, Any]) -> "SecretPayload":
        """Decode a GetSecretValue response."""
        text: Optional[str] = response.get("SecretString")
        if text is not None:
            return cls(value=text.encode("utf-8"), is_text=True)
        return cls(value=bytes(response.get("SecretBinary") or b""), is_text=False)

    def to_request(self) -> Dict[str, Any]:
        """Keyword arguments for CreateSecret/PutSecretValue."""
        if self.is_text:
            return {"SecretString": self.value.decode("utf-8")}
        return {"SecretBinary": self.value}

    def __repr__(self) -> str:
        kind = "text" if self.is_text else "binary"
        return f"SecretPayload({kind}, {len(self.value)} bytes)"
