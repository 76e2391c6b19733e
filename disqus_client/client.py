"""Disqus OAuth and REST API client."""

import json
from collections.abc import Mapping
from typing import Any

import httpx
from pydantic import SecretStr, ValidationError

from disqus_client.authorization import AuthorizationUI
from disqus_client.config.settings import (
    DEFAULT_API_BASE_URL,
    DEFAULT_AUTH_BASE_URL,
    DisqusSettings,
)
from disqus_client.core.logging import get_logger
from disqus_client.encoding import (
    api_url,
    extract_code,
    percent_encode_alphanumeric,
)
from disqus_client.exceptions import (
    APIError,
    CredentialsNotConfiguredError,
    CredentialsStorageError,
    DisqusError,
    ParseError,
)
from disqus_client.models import APIResult, Credentials, HTTPMethod, Identity
from disqus_client.storage import IdentityStorage, MemoryStorage, create_storage
from disqus_client.transport import DisqusTransport


logger = get_logger(__name__)

AUTHORIZATION_SCOPE = "read,write"


class DisqusClient:
    """Client for the Disqus OAuth 2.0 flow and REST API.

    The client holds one set of application credentials and at most one
    authenticated identity. Every identity change is written to ``storage``.

    Concurrent calls are independent. Overlapping ``authenticate`` or
    ``logout`` calls update the identity last-write-wins, and an
    authenticated call racing a logout may still send the old token.
    """

    def __init__(
        self,
        storage: IdentityStorage | None = None,
        transport: DisqusTransport | None = None,
        http_client: httpx.AsyncClient | None = None,
        auth_base_url: str = DEFAULT_AUTH_BASE_URL,
        api_base_url: str = DEFAULT_API_BASE_URL,
    ):
        """Initialize the client.

        Args:
            storage: Identity storage backend (in-memory if not provided)
            transport: Request transport (built around ``http_client`` if not provided)
            http_client: HTTP client for the default transport
            auth_base_url: Base URL of the OAuth endpoints
            api_base_url: Base URL of the REST API
        """
        self.storage = storage or MemoryStorage()
        self.transport = transport or DisqusTransport(http_client=http_client)
        self.auth_base_url = auth_base_url
        self.api_base_url = api_base_url
        self._credentials: Credentials | None = None
        self._identity: Identity | None = None

    @classmethod
    def from_settings(
        cls,
        settings: DisqusSettings,
        http_client: httpx.AsyncClient | None = None,
    ) -> "DisqusClient":
        """Build a client with storage, transport and URLs taken from settings.

        Credentials are not applied; call ``configure_from_settings``.
        """
        return cls(
            storage=create_storage(settings),
            transport=DisqusTransport(http_client=http_client, settings=settings.http),
            auth_base_url=settings.auth_base_url,
            api_base_url=settings.api_base_url,
        )

    async def __aenter__(self) -> "DisqusClient":
        await self.restore_identity()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.transport.aclose()

    # Identity

    @property
    def credentials(self) -> Credentials:
        """The configured application credentials.

        Raises:
            CredentialsNotConfiguredError: If ``configure`` has not been called
        """
        if self._credentials is None:
            raise CredentialsNotConfiguredError(
                "Call configure() with the application keys first"
            )
        return self._credentials

    @property
    def is_authenticated(self) -> bool:
        return self._identity is not None

    @property
    def current_user_id(self) -> str | None:
        return self._identity.user_id if self._identity is not None else None

    async def restore_identity(self) -> bool:
        """Load a previously stored identity.

        Missing or undecodable data leaves the client unauthenticated.

        Returns:
            True if an identity was restored
        """
        try:
            identity = await self.storage.load()
        except CredentialsStorageError as e:
            logger.warning(
                "identity_restore_failed",
                location=self.storage.get_location(),
                error=str(e),
            )
            return False

        self._identity = identity
        logger.debug(
            "identity_restored",
            authenticated=identity is not None,
            location=self.storage.get_location(),
        )
        return identity is not None

    async def _set_identity(self, identity: Identity | None) -> None:
        if identity is None:
            self._identity = None
            await self.storage.delete()
        else:
            await self.storage.save(identity)
            self._identity = identity

    # Configuration

    async def configure(
        self,
        public_key: str,
        secret_key: str | SecretStr,
        redirect_uri: str,
    ) -> None:
        """Set the application credentials.

        When an identity is already held, one token refresh is attempted with
        the new credentials. Its failure is ignored and leaves the identity
        unchanged.
        """
        self._credentials = Credentials(
            public_key=public_key,
            secret_key=secret_key,
            redirect_uri=redirect_uri,
        )
        logger.debug("credentials_configured", public_key=public_key)

        if self._identity is None:
            return

        try:
            refreshed = await self.refresh_token()
        except DisqusError as e:
            logger.debug("token_refresh_on_configure_failed", error=str(e))
            return
        logger.debug("token_refresh_on_configure", success=refreshed)

    async def configure_from_settings(self, settings: DisqusSettings) -> None:
        """Apply the credentials found in ``settings``.

        Raises:
            CredentialsNotConfiguredError: If the settings lack any of the keys
        """
        credentials = settings.credentials()
        await self.configure(
            credentials.public_key,
            credentials.secret_key,
            credentials.redirect_uri,
        )

    # Authorization

    def build_authorization_url(self) -> str:
        credentials = self.credentials
        return (
            f"{self.auth_base_url}authorize/"
            f"?client_id={credentials.public_key}"
            f"&scope={AUTHORIZATION_SCOPE}"
            "&response_type=code"
            f"&redirect_uri={credentials.redirect_uri}"
        )

    async def authenticate(self, ui: AuthorizationUI) -> bool:
        """Run the authorization-code flow.

        The authorization URL is handed to ``ui``; once the redirect arrives
        the ``code`` it carries is exchanged for a token. An interrupted
        attempt has no resumable state and must be started over.

        Returns:
            True if the exchange succeeded and an identity is now held
        """
        url = self.build_authorization_url()
        try:
            await ui.display(url)
            redirect_url = await ui.wait_for_redirect()
        finally:
            await ui.close()

        code = extract_code(redirect_url)
        if code is None:
            logger.info("authorization_redirect_without_code", redirect=redirect_url)
            return False

        return await self.exchange_code(code)

    async def exchange_code(self, code: str) -> bool:
        """Exchange an authorization code for an access token.

        Returns:
            True if the identity was obtained and stored. An identity that
            cannot be written to storage is not kept and yields False.
        """
        credentials = self.credentials
        params = {
            "grant_type": "authorization_code",
            "client_id": credentials.public_key,
            "client_secret": credentials.secret_key.get_secret_value(),
            "redirect_uri": percent_encode_alphanumeric(credentials.redirect_uri),
            "code": code,
        }

        logger.debug("token_exchange_start", has_code=bool(code))
        result = await self._request(self._token_url, HTTPMethod.POST, params)
        if not result.success or result.data is None:
            logger.info("token_exchange_failed", error=str(result.error))
            return False

        try:
            identity = Identity.from_response(result.data)
        except ValidationError as e:
            logger.warning("token_exchange_invalid_identity", error=str(e))
            return False

        try:
            await self._set_identity(identity)
        except CredentialsStorageError as e:
            logger.error(
                "token_exchange_identity_not_saved",
                location=self.storage.get_location(),
                error=str(e),
            )
            return False
        logger.info("token_exchange_success", user_id=identity.user_id)
        return True

    async def refresh_token(self) -> bool:
        """Refresh the access token of the held identity.

        Returns:
            True if the identity was refreshed and stored
        """
        identity = self._identity
        if identity is None or not identity.refresh_token:
            return False

        credentials = self.credentials
        params = {
            "grant_type": "refresh_token",
            "client_id": credentials.public_key,
            "client_secret": credentials.secret_key.get_secret_value(),
            "refresh_token": identity.refresh_token,
        }

        result = await self._request(self._token_url, HTTPMethod.POST, params)
        if not result.success or result.data is None:
            logger.debug("token_refresh_failed", error=str(result.error))
            return False

        try:
            refreshed = identity.merged_with(result.data)
        except ValidationError as e:
            logger.debug("token_refresh_invalid_identity", error=str(e))
            return False

        await self._set_identity(refreshed)
        logger.debug("token_refresh_success", user_id=refreshed.user_id)
        return True

    async def logout(self) -> None:
        """Forget the identity and remove it from storage."""
        await self._set_identity(None)
        logger.info("logged_out")

    @property
    def _token_url(self) -> str:
        return f"{self.auth_base_url}access_token/"

    # API calls

    async def get(
        self,
        api: str,
        params: Mapping[str, Any] | None = None,
        auth_required: bool = False,
    ) -> APIResult:
        """Call ``api`` (e.g. ``threads/list``) with GET."""
        return await self.perform_api_call(api, HTTPMethod.GET, auth_required, params)

    async def post(
        self,
        api: str,
        params: Mapping[str, Any] | None = None,
        auth_required: bool = False,
    ) -> APIResult:
        """Call ``api`` (e.g. ``posts/create``) with POST."""
        return await self.perform_api_call(api, HTTPMethod.POST, auth_required, params)

    async def perform_api_call(
        self,
        endpoint: str,
        method: HTTPMethod,
        auth_required: bool = False,
        params: Mapping[str, Any] | None = None,
    ) -> APIResult:
        """Call an API endpoint with the application keys attached.

        ``access_token`` is added only when ``auth_required`` is set and an
        identity is held.

        Returns:
            The decoded body with ``success`` set iff the transport succeeded
            and the body carries ``code == 0``
        """
        url = api_url(self.api_base_url, endpoint)
        return await self._request(url, method, params or {}, auth_required)

    async def _request(
        self,
        url: str,
        method: HTTPMethod,
        params: Mapping[str, Any],
        auth_required: bool = False,
    ) -> APIResult:
        credentials = self.credentials
        signed = dict(params)
        signed["api_key"] = credentials.public_key
        signed["api_secret"] = credentials.secret_key.get_secret_value()

        identity = self._identity
        if auth_required and identity is not None:
            signed["access_token"] = identity.access_token

        try:
            body = await self.transport.dispatch(url, method, signed)
            data = _decode_body(body)
        except DisqusError as e:
            return APIResult(data=None, success=False, error=e)

        if not _is_success_code(data.get("code")):
            return APIResult(
                data=data,
                success=False,
                error=APIError(
                    f"API returned code {data.get('code')!r}",
                    code=data.get("code"),
                    response=data,
                ),
            )
        return APIResult(data=data, success=True)


def _decode_body(body: bytes) -> dict[str, Any]:
    try:
        data = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ParseError(f"Response is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ParseError(f"Expected a JSON object, got {type(data).__name__}")
    return data


def _is_success_code(code: Any) -> bool:
    # JSON booleans decode to bool, which compares equal to 0/1
    return isinstance(code, int) and not isinstance(code, bool) and code == 0
