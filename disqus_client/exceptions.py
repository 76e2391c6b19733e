"""Custom exceptions for the Disqus client."""

from typing import Any


class DisqusError(Exception):
    """Base exception for all Disqus client errors."""

    pass


class TransportError(DisqusError):
    """Raised when a request fails at the network level (DNS, TLS, timeout)."""

    pass


class ParseError(DisqusError):
    """Raised when a response body is not a JSON object."""

    pass


class APIError(DisqusError):
    """Raised when the API answers with a non-zero ``code`` field."""

    def __init__(
        self,
        message: str,
        code: Any = None,
        response: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.response = response


class CredentialsNotConfiguredError(DisqusError):
    """Raised when an operation needs API credentials before ``configure()``."""

    pass


class AuthorizationError(DisqusError):
    """Raised when the authorization redirect cannot be obtained."""

    pass


class CredentialsStorageError(DisqusError):
    """Raised when there's an error reading or writing the stored identity."""

    pass


class CredentialsInvalidError(CredentialsStorageError):
    """Raised when a stored identity is found but invalid or corrupted."""

    pass
