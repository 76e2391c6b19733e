"""Parameter and URL encoding helpers.

Request parameters are serialized verbatim: neither keys nor values are
percent-escaped. A key or value containing ``&`` or ``=`` therefore
corrupts the payload. Callers that need those characters must escape them
themselves (see ``percent_encode_alphanumeric``).
"""

from collections.abc import Mapping
from typing import Any
from urllib.parse import urlsplit


def encode_params(params: Mapping[str, Any]) -> str:
    """Join parameters as ``key=value`` pairs separated by ``&``.

    Args:
        params: Parameters to serialize, values are converted with ``str()``

    Returns:
        The joined string, empty when there are no parameters
    """
    return "&".join(f"{key}={value}" for key, value in params.items())


def append_query(url: str, params: Mapping[str, Any]) -> str:
    """Append the verbatim parameter string to a URL as its query."""
    query = encode_params(params)
    if not query:
        return url
    return f"{url}?{query}"


def percent_encode_alphanumeric(value: str) -> str:
    """Escape every byte except ASCII letters and digits as ``%XX``."""
    return "".join(
        chr(byte) if chr(byte).isascii() and chr(byte).isalnum() else f"%{byte:02X}"
        for byte in value.encode("utf-8")
    )


def api_url(base_url: str, endpoint: str) -> str:
    """Resolve an API endpoint such as ``threads/list`` to its JSON URL."""
    return f"{base_url}{endpoint}.json"


def extract_code(redirect_url: str) -> str | None:
    """Extract the ``code`` query parameter from an authorization redirect.

    The value is returned exactly as it appears in the query, without
    percent-decoding, so it can be sent on in an unescaped form body.

    Returns:
        The authorization code, or None when the redirect carries none
    """
    query = urlsplit(redirect_url).query
    for pair in query.split("&"):
        key, sep, value = pair.partition("=")
        if key == "code" and sep and value:
            return value
    return None
