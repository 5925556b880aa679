"""AWS Secrets Manager key store."""

import math
import time
import logging
import threading
from typing import List, Optional, Tuple

import boto3
import requests
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from secretstore.keystore.aws.config import SecretsManagerConfig
from secretstore.keystore.aws.credentials import CredentialResolver
from secretstore.keystore.aws.errors import ErrorKind, classify_error
from secretstore.keystore.aws.payload import SecretPayload
from secretstore.keystore.base import KeyStore, KeyStoreState
from secretstore.keystore.context import Context
from secretstore.keystore.exceptions import (
    AccessDeniedError,
    KeyExistsError,
    KeyNotFoundError,
    UnknownStoreError,
    UnreachableError,
)
from secretstore.keystore.factory import register_keystore
from secretstore.keystore.listing import list_names

logger = logging.getLogger(__name__)

VENDOR_ERRORS = (BotoCoreError, ClientError)


@register_keystore("aws")
class SecretsManagerStore(KeyStore):
    """
    Key store backed by AWS Secrets Manager.

    Each entry is one secret: the entry name is the secret name and the
    entry value is the secret value.

    Usage:
        config = SecretsManagerConfig(region="us-east-1", kms_key_id="alias/kes")
        store = SecretsManagerStore.connect(Context(timeout=10), config)

        store.create(ctx, "my-key", b"key material")
        value = store.get(ctx, "my-key")
    """

    def __init__(
        self,
        config: SecretsManagerConfig,
        resolver: Optional[CredentialResolver] = None,
        client=None,
    ):
        """
        Args:
            config: Connection options
            resolver: Credential resolver (default: CredentialResolver.default)
            client: Prebuilt boto3 secretsmanager client (skips credential resolution)
        """
        self.config = config
        self._resolver = resolver or CredentialResolver.default(config.login)
        self._credentials = None
        self._lock = threading.Lock()
        self._session = None
        self._client = client
        # Clients with tighter timeouts, keyed by (connect, read, attempts)
        self._bounded = {}

    @classmethod
    def connect(
        cls,
        ctx: Context,
        config: Optional[SecretsManagerConfig] = None,
        resolver: Optional[CredentialResolver] = None,
        **kwargs,
    ) -> "SecretsManagerStore":
        """
        Connect to AWS Secrets Manager and verify that it is reachable.

        Args:
            ctx: Context bounding the connect
            config: Connection options; built from kwargs if omitted
            resolver: Credential resolver
            **kwargs: Config section, see SecretsManagerConfig.from_dict

        Raises:
            UnreachableError: If the endpoint cannot be contacted
        """
        if config is None:
            config = SecretsManagerConfig.from_dict(kwargs)

        ctx.check()
        store = cls(config, resolver=resolver)

        try:
            store._client = store._new_client()
            # Credential resolution may have used up the deadline
            ctx.check()
            state = store.status(ctx)
        except Exception:
            store.close()
            raise

        logger.info(f"Connected to {store}: latency={state.latency * 1000:.1f}ms")
        return store

    def _new_session(self) -> boto3.Session:
        credentials = self._resolver.resolve()
        self._credentials = credentials

        session_kwargs = {"region_name": self.config.region}
        if credentials is not None:
            session_kwargs.update(
                aws_access_key_id=credentials.access_key,
                aws_secret_access_key=credentials.secret_key,
                aws_session_token=credentials.session_token or None,
            )
        return boto3.Session(**session_kwargs)

    def _build_client(self, connect_timeout: float, read_timeout: float, max_attempts: int):
        return self._session.client(
            "secretsmanager",
            endpoint_url=self.config.endpoint if self.config.addr else None,
            config=BotoConfig(
                connect_timeout=connect_timeout,
                read_timeout=read_timeout,
                retries={"max_attempts": max_attempts, "mode": "standard"},
            ),
        )

    def _new_client(self):
        self._session = self._new_session()
        return self._build_client(
            self.config.connect_timeout,
            self.config.read_timeout,
            self.config.max_attempts,
        )

    @property
    def client(self):
        """The boto3 client, rebuilt once time-limited credentials expire."""
        stale = []
        with self._lock:
            if self._client is not None and self._credentials is not None and self._credentials.expired():
                logger.info(f"AWS credentials from {self._credentials.source} expired, resolving again")
                stale = [self._client, *self._bounded.values()]
                self._bounded = {}
                self._client = self._new_client()
            client = self._client

        for old in stale:
            _close_client(old)
        return client

    def _limits(self, remaining: Optional[float]) -> Optional[Tuple[float, float, int]]:
        """
        Connect timeout, read timeout and attempts that fit into `remaining` seconds.

        Returns None if the configured limits already fit.
        """
        if remaining is None:
            return None

        budget = _round_down(remaining)
        connect_timeout = min(self.config.connect_timeout, budget)
        read_timeout = min(self.config.read_timeout, budget)
        attempts = int(budget // (connect_timeout + read_timeout))
        attempts = max(1, min(self.config.max_attempts, attempts))

        limits = (connect_timeout, read_timeout, attempts)
        if limits == (self.config.connect_timeout, self.config.read_timeout, self.config.max_attempts):
            return None
        return limits

    def _client_for(self, ctx: Context, operation: str, name: str):
        """Return a client whose timeouts and retries end before the context deadline."""
        # Rebuilds the client first if credentials expired
        self.client
        limits = self._limits(ctx.remaining())

        with self._lock:
            if self._client is None:
                raise UnknownStoreError(operation, name, "store is closed")
            if limits is None or self._session is None:
                return self._client
            bounded = self._bounded.get(limits)
            if bounded is None:
                logger.debug(f"Building client for deadline: connect={limits[0]}s read={limits[1]}s "
                             f"attempts={limits[2]}")
                bounded = self._bounded[limits] = self._build_client(*limits)
            return bounded

    def _raise(self, ctx: Context, operation: str, name: str, err: Exception):
        # A canceled or expired context wins over whatever the SDK reported
        ctx_err = ctx.err()
        if ctx_err is not None:
            raise ctx_err from err

        kind = classify_error(err)
        if kind is ErrorKind.ALREADY_EXISTS:
            raise KeyExistsError() from err
        if kind is ErrorKind.NOT_FOUND:
            raise KeyNotFoundError() from err
        if kind is ErrorKind.ACCESS_DENIED:
            raise AccessDeniedError(f"aws: cannot access '{name}': {err}") from err
        raise UnknownStoreError(operation, name, err) from err

    def status(self, ctx: Context) -> KeyStoreState:
        """
        Probe the endpoint with an unauthenticated GET.

        Any HTTP response counts as reachable; only reachability and
        latency are measured, not authorization.

        Raises:
            UnreachableError: On DNS, connection, TLS or timeout failures
        """
        ctx.check()

        # One deadline bounds both phases; requests has no total timeout
        remaining = ctx.remaining()
        if remaining is None:
            timeout = (self.config.connect_timeout, self.config.read_timeout)
        else:
            timeout = (min(self.config.connect_timeout, remaining), min(self.config.read_timeout, remaining))

        start = time.monotonic()
        try:
            with requests.get(self.config.endpoint, timeout=timeout, stream=True):
                latency = time.monotonic() - start
        except requests.exceptions.RequestException as e:
            ctx_err = ctx.err()
            if ctx_err is not None:
                raise ctx_err from e
            logger.error(f"{self} is unreachable: {e}")
            raise UnreachableError(e) from e

        ctx.check()
        return KeyStoreState(latency=latency)

    def create(self, ctx: Context, name: str, value: bytes) -> None:
        """
        Store value under name if, and only if, no such secret exists.

        If kms_key_id is configured, AWS encrypts the value with that key.
        Otherwise, AWS uses the account's default Secrets Manager key.

        Raises:
            KeyExistsError: If a secret with that name already exists
        """
        ctx.check()

        request = {"Name": name, **SecretPayload.from_bytes(value).to_request()}
        if self.config.kms_key_id:
            request["KmsKeyId"] = self.config.kms_key_id

        try:
            self._client_for(ctx, "create", name).create_secret(**request)
        except VENDOR_ERRORS as e:
            self._raise(ctx, "create", name, e)

        logger.debug(f"Created secret: {name}")

    def get(self, ctx: Context, name: str) -> bytes:
        """
        Return the value of the secret.

        Raises:
            KeyNotFoundError: If no such secret exists
            AccessDeniedError: If AWS cannot decrypt the secret
        """
        ctx.check()

        try:
            response = self._client_for(ctx, "read", name).get_secret_value(SecretId=name)
        except VENDOR_ERRORS as e:
            self._raise(ctx, "read", name, e)

        return SecretPayload.from_response(response).value

    def delete(self, ctx: Context, name: str) -> None:
        """
        Delete the secret immediately, without a recovery window.

        Raises:
            KeyNotFoundError: If no such secret exists
        """
        ctx.check()

        try:
            client = self._client_for(ctx, "delete", name)
            client.delete_secret(SecretId=name, ForceDeleteWithoutRecovery=True)
        except VENDOR_ERRORS as e:
            self._raise(ctx, "delete", name, e)

        logger.debug(f"Deleted secret: {name}")

    def list(self, ctx: Context, prefix: str = "", n: int = -1, cursor: str = "") -> Tuple[List[str], str]:
        """
        Return up to n secret names starting with prefix, and a cursor.

        All pages of ListSecrets are fetched before filtering; the returned
        cursor is "" once no more matching names remain.
        """
        ctx.check()

        names = []
        try:
            paginator = self._client_for(ctx, "list", prefix).get_paginator("list_secrets")
            for page in paginator.paginate():
                ctx.check()
                for secret in page.get("SecretList", []):
                    if secret.get("Name"):
                        names.append(secret["Name"])
        except VENDOR_ERRORS as e:
            self._raise(ctx, "list", prefix, e)

        logger.debug(f"Listed {len(names)} secrets")
        return list_names(names, prefix, n, cursor)

    def close(self) -> None:
        """Close the clients' connection pools. Safe to call more than once."""
        with self._lock:
            clients = [self._client, *self._bounded.values()]
            self._client, self._bounded, self._session = None, {}, None

        if clients[0] is None:
            return
        for client in clients:
            _close_client(client)
        logger.info(f"Closed {self}")

    def __str__(self) -> str:
        return f"AWS SecretsManager: {self.config.endpoint}"


def _round_down(seconds: float) -> float:
    """Round a time budget down to 0.1s steps below one second, whole seconds above."""
    if seconds < 1:
        return max(0.1, math.floor(seconds * 10) / 10)
    return float(math.floor(seconds))


def _close_client(client) -> None:
    if client is not None and hasattr(client, "close"):
        client.close()
