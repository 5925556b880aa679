"""Tests for AWS error classification."""

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError, ReadTimeoutError

from secretstore.keystore.aws.errors import ErrorKind, classify_error, error_code


def client_error(code: str, message: str = "boom", operation: str = "GetSecretValue") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": message}}, operation)


class TestClassifyError:
    """Tests for classify_error."""

    @pytest.mark.parametrize("code,kind", [
        ("ResourceExistsException", ErrorKind.ALREADY_EXISTS),
        ("ResourceNotFoundException", ErrorKind.NOT_FOUND),
        ("DecryptionFailure", ErrorKind.ACCESS_DENIED),
        ("DecryptionFailureException", ErrorKind.ACCESS_DENIED),
        ("AccessDeniedException", ErrorKind.ACCESS_DENIED),
        ("InternalServiceError", ErrorKind.UNKNOWN),
        ("ThrottlingException", ErrorKind.UNKNOWN),
    ])
    def test_error_codes(self, code, kind):
        """Should map known codes and default to UNKNOWN."""
        assert classify_error(client_error(code)) is kind

    def test_marked_for_deletion(self):
        """Secrets pending deletion count as not found."""
        # Arrange
        err = client_error(
            "InvalidRequestException",
            "You can't perform this operation on the secret because it was marked for deletion.",
        )

        # Act & Assert
        assert classify_error(err) is ErrorKind.NOT_FOUND

    def test_other_invalid_request(self):
        """Other invalid requests stay unknown."""
        assert classify_error(client_error("InvalidRequestException", "bad")) is ErrorKind.UNKNOWN

    def test_connection_error(self):
        """Connection failures are unreachable."""
        # Arrange
        err = EndpointConnectionError(endpoint_url="https://secretsmanager.invalid")

        # Act & Assert
        assert classify_error(err) is ErrorKind.UNREACHABLE

    def test_read_timeout_is_unknown(self):
        """A read timeout is not a connection failure."""
        # Arrange
        err = ReadTimeoutError(endpoint_url="https://secretsmanager.invalid")

        # Act & Assert
        assert classify_error(err) is ErrorKind.UNKNOWN

    def test_non_vendor_error(self):
        """Arbitrary exceptions are unknown."""
        assert classify_error(ValueError("nope")) is ErrorKind.UNKNOWN

    def test_error_code(self):
        """Should extract code only from ClientError."""
        assert error_code(client_error("ResourceNotFoundException")) == "ResourceNotFoundException"
        assert error_code(RuntimeError("x")) is None
