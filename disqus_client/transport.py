"""HTTP transport for signed Disqus requests."""

from collections.abc import Mapping
from typing import Any

import httpx

from disqus_client.config.settings import HTTPSettings
from disqus_client.core.logging import get_logger
from disqus_client.encoding import append_query, encode_params
from disqus_client.exceptions import TransportError
from disqus_client.models import HTTPMethod


logger = get_logger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


class DisqusTransport:
    """Sends a single request per call and returns the raw response body.

    There is no retry and no redirect customisation. HTTP status codes are
    not interpreted: the API reports failures through the ``code`` field of
    the body.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        settings: HTTPSettings | None = None,
    ):
        """Initialize the transport.

        Args:
            http_client: HTTP client for making requests (creates one if not provided)
            settings: HTTP settings used when the client is created here
        """
        self.settings = settings or HTTPSettings()
        self._http_client = http_client
        self._owns_http_client = http_client is None

    @property
    def http_client(self) -> httpx.AsyncClient:
        """Get the HTTP client, creating one if needed."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                timeout=self.settings.timeout,
                verify=self.settings.verify,
            )
        return self._http_client

    async def aclose(self) -> None:
        """Close the HTTP client if this transport created it."""
        if self._owns_http_client and self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    def build_request(
        self, url: str, method: HTTPMethod, params: Mapping[str, Any]
    ) -> httpx.Request:
        """Build the outgoing request.

        POST parameters go into a form body, every other method carries them
        in the query string. Values are inserted without escaping.
        """
        headers = {"Accept": "application/json"}

        if method is HTTPMethod.POST:
            headers["Content-Type"] = FORM_CONTENT_TYPE
            return self.http_client.build_request(
                method.value,
                url,
                headers=headers,
                content=encode_params(params).encode("utf-8"),
            )

        return self.http_client.build_request(
            method.value,
            append_query(url, params),
            headers=headers,
        )

    async def dispatch(
        self, url: str, method: HTTPMethod, params: Mapping[str, Any]
    ) -> bytes:
        """Send a request and return the response body.

        Raises:
            TransportError: If the request cannot be built or fails at the
                network level
        """
        logger.debug(
            "disqus_request_start",
            method=method.value,
            url=url,
            param_keys=sorted(params),
        )

        try:
            request = self.build_request(url, method, params)
            response = await self.http_client.send(request)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.debug(
                "disqus_request_failed",
                method=method.value,
                url=url,
                error=str(e),
            )
            raise TransportError(f"{method.value} {url} failed: {e}") from e

        logger.debug(
            "disqus_request_complete",
            method=method.value,
            url=url,
            status_code=response.status_code,
        )
        return response.content
