"""AWS Secrets Manager key store."""

from secretstore.keystore.aws.config import Credentials, SecretsManagerConfig
from secretstore.keystore.aws.credentials import (
    CredentialSource,
    StaticCredentialSource,
    EnvCredentialSource,
    SharedFileCredentialSource,
    InstanceRoleCredentialSource,
    CredentialResolver,
)
from secretstore.keystore.aws.errors import ErrorKind, classify_error
from secretstore.keystore.aws.payload import SecretPayload
from secretstore.keystore.aws.secrets_manager import SecretsManagerStore

__all__ = [
    "Credentials",
    "SecretsManagerConfig",
    "CredentialSource",
    "StaticCredentialSource",
    "EnvCredentialSource",
    "SharedFileCredentialSource",
    "InstanceRoleCredentialSource",
    "CredentialResolver",
    "ErrorKind",
    "classify_error",
    "SecretPayload",
    "SecretsManagerStore",
]
