"""Tests for the signed request transport."""

import json

import httpx
import pytest
from pytest_httpx import HTTPXMock

from disqus_client.config.settings import HTTPSettings
from disqus_client.exceptions import TransportError
from disqus_client.models import HTTPMethod
from disqus_client.transport import DisqusTransport


URL = "https://disqus.com/api/3.0/threads/list.json"


class TestDisqusTransport:
    """Test cases for DisqusTransport."""

    @pytest.fixture
    def transport(self, http_client: httpx.AsyncClient) -> DisqusTransport:
        return DisqusTransport(http_client=http_client)

    async def test_post_sends_form_body(
        self, transport: DisqusTransport, httpx_mock: HTTPXMock
    ) -> None:
        httpx_mock.add_response(method="POST", url=URL, json={"code": 0})

        body = await transport.dispatch(
            URL, HTTPMethod.POST, {"thread": "123", "message": "hi"}
        )

        request = httpx_mock.get_request()
        assert request is not None
        assert request.headers["Content-Type"] == "application/x-www-form-urlencoded"
        assert request.headers["Accept"] == "application/json"
        assert sorted(request.content.decode().split("&")) == [
            "message=hi",
            "thread=123",
        ]
        assert request.url.query == b""
        assert json.loads(body) == {"code": 0}

    async def test_get_sends_query_string(
        self, transport: DisqusTransport, httpx_mock: HTTPXMock
    ) -> None:
        httpx_mock.add_response(method="GET", json={"code": 0})

        await transport.dispatch(URL, HTTPMethod.GET, {"forum": "news", "limit": 25})

        request = httpx_mock.get_request()
        assert request is not None
        assert request.method == "GET"
        assert request.headers["Accept"] == "application/json"
        assert "Content-Type" not in request.headers
        assert request.content == b""
        assert dict(request.url.params) == {"forum": "news", "limit": "25"}
        assert not request.url.query.endswith(b"&")

    @pytest.mark.parametrize("method", [HTTPMethod.DELETE, HTTPMethod.PUT, HTTPMethod.PATCH])
    async def test_other_methods_use_query_string(
        self, transport: DisqusTransport, httpx_mock: HTTPXMock, method: HTTPMethod
    ) -> None:
        httpx_mock.add_response(method=method.value, json={"code": 0})

        await transport.dispatch(URL, method, {"post": "9"})

        request = httpx_mock.get_request()
        assert request is not None
        assert request.url.params["post"] == "9"
        assert request.content == b""

    async def test_get_without_params_has_no_query(
        self, transport: DisqusTransport, httpx_mock: HTTPXMock
    ) -> None:
        httpx_mock.add_response(method="GET", url=URL, json={"code": 0})

        await transport.dispatch(URL, HTTPMethod.GET, {})

        request = httpx_mock.get_request()
        assert request is not None
        assert str(request.url) == URL

    async def test_unescaped_ampersand_splits_post_values(
        self, transport: DisqusTransport, httpx_mock: HTTPXMock
    ) -> None:
        """Values are sent verbatim, so an embedded & produces an extra field."""
        httpx_mock.add_response(method="POST", json={"code": 0})

        await transport.dispatch(URL, HTTPMethod.POST, {"message": "fish&chips"})

        request = httpx_mock.get_request()
        assert request is not None
        assert request.content == b"message=fish&chips"

    async def test_http_error_status_is_not_raised(
        self, transport: DisqusTransport, httpx_mock: HTTPXMock
    ) -> None:
        httpx_mock.add_response(
            method="GET", status_code=400, json={"code": 2, "response": "Invalid argument"}
        )

        body = await transport.dispatch(URL, HTTPMethod.GET, {"forum": "x"})

        assert json.loads(body)["code"] == 2

    async def test_network_error_raises_transport_error(
        self, transport: DisqusTransport, httpx_mock: HTTPXMock
    ) -> None:
        httpx_mock.add_exception(httpx.ConnectError("connection refused"))

        with pytest.raises(TransportError) as exc_info:
            await transport.dispatch(URL, HTTPMethod.GET, {"forum": "x"})

        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    async def test_timeout_raises_transport_error(
        self, transport: DisqusTransport, httpx_mock: HTTPXMock
    ) -> None:
        httpx_mock.add_exception(httpx.ReadTimeout("timed out"))

        with pytest.raises(TransportError):
            await transport.dispatch(URL, HTTPMethod.POST, {"forum": "x"})

    async def test_invalid_url_raises_transport_error(
        self, transport: DisqusTransport, httpx_mock: HTTPXMock
    ) -> None:
        with pytest.raises(TransportError) as exc_info:
            await transport.dispatch(URL, HTTPMethod.GET, {"forum": "a\nb"})

        assert isinstance(exc_info.value.__cause__, httpx.InvalidURL)
        assert httpx_mock.get_requests() == []


class TestHTTPClientLifecycle:
    """Test ownership of the underlying HTTP client."""

    async def test_creates_client_from_settings(self) -> None:
        transport = DisqusTransport(settings=HTTPSettings(timeout=12.5))

        client = transport.http_client

        assert isinstance(client, httpx.AsyncClient)
        assert client.timeout.read == 12.5
        assert transport.http_client is client

        await transport.aclose()
        assert client.is_closed

    async def test_does_not_close_injected_client(
        self, http_client: httpx.AsyncClient
    ) -> None:
        transport = DisqusTransport(http_client=http_client)

        await transport.aclose()

        assert not http_client.is_closed
