"""Error taxonomy shared by all key stores."""


class KeyStoreError(Exception):
    """Base class for key store errors."""
    pass


class KeyExistsError(KeyStoreError):
    """Raised when creating an entry whose name is already taken."""

    def __init__(self, message: str = "key already exists"):
        super().__init__(message)


class KeyNotFoundError(KeyStoreError):
    """Raised when the referenced entry does not exist."""

    def __init__(self, message: str = "key does not exist"):
        super().__init__(message)


class AccessDeniedError(KeyStoreError):
    """Raised when the vault refuses access, e.g. it cannot decrypt the entry."""
    pass


class UnreachableError(KeyStoreError):
    """Raised when the key store endpoint cannot be contacted."""

    def __init__(self, cause: Exception):
        self.cause = cause
        super().__init__(f"key store is unreachable: {cause}")


class UnknownStoreError(KeyStoreError):
    """
    Raised for any vendor failure without a more specific kind.

    Attributes:
        operation: Store operation that failed ('create', 'get', ...)
        name: Entry name the operation was applied to
        cause: Underlying vendor error
    """

    def __init__(self, operation: str, name: str, cause: Exception, vendor: str = "aws"):
        self.operation = operation
        self.name = name
        self.cause = cause
        super().__init__(f"{vendor}: failed to {operation} '{name}': {cause}")
