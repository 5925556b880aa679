"""Configuration types for the AWS Secrets Manager key store."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from secretstore.core.exceptions import ConfigError

# Refresh time-limited credentials this long before they actually expire
EXPIRY_MARGIN = timedelta(minutes=5)


@dataclass(frozen=True)
class Credentials:
    """
    AWS credentials: access key, secret key and session token.

    Attributes:
        access_key: AWS access key ID
        secret_key: AWS secret access key
        session_token: Session token for temporary credentials
        source: Which resolution step produced the credentials
        expires_at: Expiry of temporary credentials (None = long-lived)
    """
    access_key: str = ""
    secret_key: str = field(default="", repr=False)
    session_token: str = field(default="", repr=False)
    source: str = "static"
    expires_at: Optional[datetime] = None

    def is_empty(self) -> bool:
        return not (self.access_key or self.secret_key or self.session_token)

    def expired(self, now: Optional[datetime] = None) -> bool:
        if self.expires_at is None:
            return False
        now = now or datetime.now(timezone.utc)
        return now >= self.expires_at - EXPIRY_MARGIN

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "Credentials":
        data = data or {}
        return cls(
            access_key=data.get("access_key") or "",
            secret_key=data.get("secret_key") or "",
            session_token=data.get("session_token") or "",
        )


@dataclass(frozen=True)
class SecretsManagerConfig:
    """
    Options for connecting to AWS Secrets Manager.

    Attributes:
        region: AWS region. Required, even when addr names a regional endpoint.
        addr: Custom endpoint, e.g. secretsmanager.us-east-1.amazonaws.com
              or http://localhost:4566. Empty = default regional endpoint.
        kms_key_id: AWS-KMS key used to encrypt the stored values.
              Empty = the account's default Secrets Manager key.
        login: Static credentials. Empty = ambient credential chain.
        connect_timeout: Seconds to wait for a connection
        read_timeout: Seconds to wait for a response
        max_attempts: Total attempts per request, including botocore retries
    """
    region: str
    addr: str = ""
    kms_key_id: str = ""
    login: Credentials = field(default_factory=Credentials)
    connect_timeout: float = 5.0
    read_timeout: float = 30.0
    max_attempts: int = 3

    def __post_init__(self):
        if not self.region:
            raise ConfigError("AWS Secrets Manager: region is required")

    @property
    def endpoint(self) -> str:
        """HTTPS URL of the Secrets Manager endpoint."""
        if not self.addr:
            return f"https://secretsmanager.{self.region}.amazonaws.com"
        if "://" in self.addr:
            return self.addr
        return f"https://{self.addr}"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SecretsManagerConfig":
        """
        Build config from a config section.

        Example:
            SecretsManagerConfig.from_dict({
                "region": "us-east-1",
                "kms_key_id": "alias/kes",
                "login": {"access_key": "...", "secret_key": "..."},
            })
        """
        return cls(
            region=data.get("region") or "",
            addr=data.get("addr") or "",
            kms_key_id=data.get("kms_key_id") or "",
            login=Credentials.from_dict(data.get("login")),
            connect_timeout=float(data.get("connect_timeout", 5.0)),
            read_timeout=float(data.get("read_timeout", 30.0)),
            max_attempts=int(data.get("max_attempts", 3)),
        )
