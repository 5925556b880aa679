"""Mapping of AWS Secrets Manager errors onto the key store error kinds."""

from enum import Enum
from typing import Optional

from botocore.exceptions import ClientError
from botocore.exceptions import ConnectionError as BotoConnectionError


class ErrorKind(Enum):
    """Normalized error categories."""
    ALREADY_EXISTS = "already_exists"
    NOT_FOUND = "not_found"
    ACCESS_DENIED = "access_denied"
    UNREACHABLE = "unreachable"
    UNKNOWN = "unknown"


# boto3 raises modeled exceptions (client.exceptions.ResourceNotFoundException,
# ...) as ClientError subclasses, so the error code covers both forms.
ERROR_CODES = {
    "ResourceExistsException": ErrorKind.ALREADY_EXISTS,
    "ResourceNotFoundException": ErrorKind.NOT_FOUND,
    "DecryptionFailure": ErrorKind.ACCESS_DENIED,
    "DecryptionFailureException": ErrorKind.ACCESS_DENIED,
    "AccessDeniedException": ErrorKind.ACCESS_DENIED,
}

# Returned for a secret that was deleted but is not purged yet
MARKED_FOR_DELETION = "marked for deletion"


def error_code(err: Exception) -> Optional[str]:
    """Return the AWS error code of a botocore ClientError, else None."""
    if isinstance(err, ClientError):
        return err.response.get("Error", {}).get("Code")
    return None


def error_message(err: Exception) -> str:
    if isinstance(err, ClientError):
        return err.response.get("Error", {}).get("Message", "") or ""
    return str(err)


def classify_error(err: Exception) -> ErrorKind:
    """
    Classify a vendor error.

    Args:
        err: Exception raised by the boto3 client

    Returns:
        The matching ErrorKind; ErrorKind.UNKNOWN when nothing matches
    """
    if isinstance(err, BotoConnectionError):
        return ErrorKind.UNREACHABLE

    code = error_code(err)
    if code is None:
        return ErrorKind.UNKNOWN

    if code == "InvalidRequestException" and MARKED_FOR_DELETION in error_message(err).lower():
        return ErrorKind.NOT_FOUND

    return ERROR_CODES.get(code, ErrorKind.UNKNOWN)
