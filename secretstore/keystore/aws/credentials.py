"""AWS credential sources and the resolution chain."""

import os
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from botocore.configloader import raw_config_parse
from botocore.utils import InstanceMetadataFetcher
from dotenv import load_dotenv

from secretstore.keystore.aws.config import Credentials

logger = logging.getLogger(__name__)


class CredentialSource(ABC):
    """
    Abstract base class that all credential sources must implement.

    Ensures consistent interface across:
    - Static credentials from config
    - Environment variables
    - Shared credentials file
    - EC2 instance role
    """

    name: str = "unknown"

    @abstractmethod
    def load(self) -> Optional[Credentials]:
        """
        Look up credentials.

        Returns:
            Credentials, or None if this source has none
        """
        pass


class StaticCredentialSource(CredentialSource):
    """Credentials given explicitly in the key store config."""

    name = "static"

    def __init__(self, login: Optional[Credentials] = None):
        self.login = login or Credentials()

    def load(self) -> Optional[Credentials]:
        if self.login.is_empty():
            return None
        return Credentials(
            access_key=self.login.access_key,
            secret_key=self.login.secret_key,
            session_token=self.login.session_token,
            source=self.name,
        )


class EnvCredentialSource(CredentialSource):
    """Reads AWS_ACCESS_KEY_ID, AWS_SECRET_ACCESS_KEY and AWS_SESSION_TOKEN."""

    name = "env"

    def __init__(self, prefix: str = "", dotenv_path: Optional[Path] = None):
        """
        Args:
            prefix: Prefix prepended to the variable names
            dotenv_path: .env file loaded first (default: ./.env)
        """
        self.prefix = prefix
        self.dotenv_path = Path(dotenv_path) if dotenv_path else Path.cwd() / ".env"

    def _env(self, key: str) -> str:
        return os.environ.get(f"{self.prefix}{key}", "")

    def load(self) -> Optional[Credentials]:
        if self.dotenv_path.exists():
            load_dotenv(self.dotenv_path, override=False)

        access_key = self._env("AWS_ACCESS_KEY_ID")
        secret_key = self._env("AWS_SECRET_ACCESS_KEY")
        if not access_key or not secret_key:
            return None
        return Credentials(
            access_key=access_key,
            secret_key=secret_key,
            session_token=self._env("AWS_SESSION_TOKEN"),
            source=self.name,
        )


class SharedFileCredentialSource(CredentialSource):
    """Reads a profile from the shared credentials file (~/.aws/credentials)."""

    name = "shared-file"

    def __init__(self, path: Optional[str] = None, profile: Optional[str] = None):
        """
        Args:
            path: Credentials file (default: $AWS_SHARED_CREDENTIALS_FILE or ~/.aws/credentials)
            profile: Profile name (default: $AWS_PROFILE or 'default')
        """
        self.path = path
        self.profile = profile

    def load(self) -> Optional[Credentials]:
        path = self.path or os.environ.get("AWS_SHARED_CREDENTIALS_FILE", "~/.aws/credentials")
        path = os.path.expanduser(path)
        profile = self.profile or os.environ.get("AWS_PROFILE", "default")

        if not os.path.isfile(path):
            return None

        section = raw_config_parse(path).get(profile, {})
        access_key = section.get("aws_access_key_id", "")
        secret_key = section.get("aws_secret_access_key", "")
        if not access_key or not secret_key:
            return None
        return Credentials(
            access_key=access_key,
            secret_key=secret_key,
            session_token=section.get("aws_session_token", ""),
            source=f"{self.name}:{profile}",
        )


class InstanceRoleCredentialSource(CredentialSource):
    """
    Temporary credentials of the IAM role attached to an EC2 instance.

    When the key store runs on an EC2 instance with an instance profile,
    the credentials come from the instance metadata service and expire
    after a few hours. The store re-resolves them before they run out.
    """

    name = "instance-role"

    def __init__(self, timeout: float = 1.0, num_attempts: int = 1, fetcher=None):
        self._fetcher = fetcher or InstanceMetadataFetcher(
            timeout=timeout, num_attempts=num_attempts
        )

    def load(self) -> Optional[Credentials]:
        data = self._fetcher.retrieve_iam_role_credentials()
        if not data:
            return None

        expires_at = None
        if data.get("expiry_time"):
            expires_at = datetime.strptime(
                data["expiry_time"], "%Y-%m-%dT%H:%M:%SZ"
            ).replace(tzinfo=timezone.utc)

        return Credentials(
            access_key=data["access_key"],
            secret_key=data["secret_key"],
            session_token=data.get("token") or "",
            source=f"{self.name}:{data.get('role_name', '')}",
            expires_at=expires_at,
        )


class CredentialResolver:
    """
    Resolves credentials from an ordered list of sources.

    The first source returning credentials wins. Default order:
    explicit config > environment > shared file > instance role.

    Usage:
        resolver = CredentialResolver.default(config.login)
        credentials = resolver.resolve()  # None if no source has credentials

        # In tests, inject sources directly
        resolver = CredentialResolver([StaticCredentialSource(login)])
    """

    def __init__(self, sources: List[CredentialSource]):
        self.sources = list(sources)

    @classmethod
    def default(cls, login: Optional[Credentials] = None) -> "CredentialResolver":
        return cls([
            StaticCredentialSource(login),
            EnvCredentialSource(),
            SharedFileCredentialSource(),
            InstanceRoleCredentialSource(),
        ])

    def resolve(self) -> Optional[Credentials]:
        for source in self.sources:
            try:
                credentials = source.load()
            except Exception as e:
                logger.warning(f"Credential source '{source.name}' failed: {e}")
                continue

            if credentials is not None and not credentials.is_empty():
                logger.info(f"Using AWS credentials from: {credentials.source}")
                return credentials

        logger.info("No AWS credentials resolved; falling back to the SDK default chain")
        return None
