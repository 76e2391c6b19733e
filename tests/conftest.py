"""Shared test fixtures for the Disqus client tests.

HTTP traffic is intercepted with pytest-httpx; everything else runs on the
real components.
"""

from collections.abc import AsyncGenerator

import httpx
import pytest

from disqus_client.client import DisqusClient
from disqus_client.core.logging import setup_logging
from disqus_client.models import Identity
from disqus_client.storage import MemoryStorage


AUTH_BASE_URL = "https://disqus.com/api/oauth/2.0/"
API_BASE_URL = "https://disqus.com/api/3.0/"
TOKEN_URL = f"{AUTH_BASE_URL}access_token/"


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom settings."""
    config.option.asyncio_mode = "auto"
    setup_logging(json_logs=False, log_level_name="DEBUG")


class FakeAuthorizationUI:
    """Authorization UI that replays a fixed redirect URL."""

    def __init__(self, redirect_url: str):
        self.redirect_url = redirect_url
        self.displayed: list[str] = []
        self.closed = False

    async def display(self, url: str) -> None:
        self.displayed.append(url)

    async def wait_for_redirect(self) -> str:
        return self.redirect_url

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def identity() -> Identity:
    return Identity.model_validate(
        {
            "userID": "42",
            "accessToken": "old-token",
            "refreshToken": "refresh-1",
            "username": "jane",
        }
    )


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
async def http_client() -> AsyncGenerator[httpx.AsyncClient, None]:
    async with httpx.AsyncClient() as client:
        yield client


@pytest.fixture
def client(storage: MemoryStorage, http_client: httpx.AsyncClient) -> DisqusClient:
    return DisqusClient(storage=storage, http_client=http_client)


@pytest.fixture
async def configured_client(client: DisqusClient) -> DisqusClient:
    await client.configure("X", "Y", "app://cb")
    return client


@pytest.fixture
async def authenticated_client(
    storage: MemoryStorage, http_client: httpx.AsyncClient, identity: Identity
) -> DisqusClient:
    """Client restored from storage, configured without a refresh token round trip."""
    await storage.save(identity.model_copy(update={"refresh_token": None}))
    client = DisqusClient(storage=storage, http_client=http_client)
    await client.restore_identity()
    await client.configure("X", "Y", "app://cb")
    return client
