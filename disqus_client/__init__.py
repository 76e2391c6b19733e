"""Client for the Disqus OAuth 2.0 flow and REST API."""

from ._version import __version__
from .authorization import (
    AuthorizationUI,
    LoopbackAuthorizationUI,
    ManualAuthorizationUI,
    RedirectChannel,
)
from .client import DisqusClient
from .config import DisqusSettings, get_settings
from .exceptions import (
    APIError,
    AuthorizationError,
    CredentialsInvalidError,
    CredentialsNotConfiguredError,
    CredentialsStorageError,
    DisqusError,
    ParseError,
    TransportError,
)
from .models import APIResult, Credentials, HTTPMethod, Identity


__all__ = [
    "__version__",
    # Client
    "DisqusClient",
    "DisqusSettings",
    "get_settings",
    # Authorization
    "AuthorizationUI",
    "LoopbackAuthorizationUI",
    "ManualAuthorizationUI",
    "RedirectChannel",
    # Models
    "APIResult",
    "Credentials",
    "HTTPMethod",
    "Identity",
    # Exceptions
    "DisqusError",
    "TransportError",
    "ParseError",
    "APIError",
    "AuthorizationError",
    "CredentialsNotConfiguredError",
    "CredentialsStorageError",
    "CredentialsInvalidError",
]
