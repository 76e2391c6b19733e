"""Authorization UI collaborators.

The client never presents the authorization page itself. It hands the URL
to an ``AuthorizationUI`` and waits for the final redirect URL, from which
the ``code`` query parameter is taken. The UI is responsible for closing
whatever surface it opened.
"""

import asyncio
import webbrowser
from http.server import BaseHTTPRequestHandler, HTTPServer
from threading import Thread
from typing import Any, Protocol
from urllib.parse import urlsplit

import typer

from disqus_client.core.logging import get_logger
from disqus_client.exceptions import AuthorizationError


logger = get_logger(__name__)


class AuthorizationUI(Protocol):
    """Presents the authorization URL and reports the redirect back."""

    async def display(self, url: str) -> None:
        """Show the authorization page for ``url``."""
        ...

    async def wait_for_redirect(self) -> str:
        """Wait for the final redirect URL."""
        ...

    async def close(self) -> None:
        """Dismiss the authorization surface."""
        ...


class RedirectChannel:
    """One-shot channel carrying the redirect URL of an authorization attempt."""

    def __init__(self) -> None:
        self._future: asyncio.Future[str] = asyncio.get_running_loop().create_future()

    @property
    def resolved(self) -> bool:
        return self._future.done()

    def resolve(self, redirect_url: str) -> None:
        """Deliver the redirect URL.

        Raises:
            AuthorizationError: If the channel was already resolved
        """
        if self._future.done():
            raise AuthorizationError("Redirect already delivered for this attempt")
        self._future.set_result(redirect_url)

    async def wait(self, timeout: float | None = None) -> str:
        """Wait for the redirect URL.

        Raises:
            AuthorizationError: If no redirect arrives within ``timeout``
        """
        try:
            return await asyncio.wait_for(asyncio.shield(self._future), timeout)
        except TimeoutError as e:
            raise AuthorizationError(
                f"No authorization redirect received within {timeout} seconds"
            ) from e


class LoopbackAuthorizationUI:
    """Opens the system browser and captures the redirect on a local server.

    Only usable when the redirect URI points at ``localhost`` or
    ``127.0.0.1``; the server binds the host and port of the redirect URI.
    """

    def __init__(
        self,
        redirect_uri: str,
        timeout: float = 300.0,
        open_browser: bool = True,
    ):
        parsed = urlsplit(redirect_uri)
        if parsed.hostname not in ("localhost", "127.0.0.1"):
            raise AuthorizationError(
                f"Loopback authorization needs a localhost redirect URI, got {redirect_uri}"
            )
        self.redirect_uri = redirect_uri
        self.host = parsed.hostname
        self.port = parsed.port if parsed.port is not None else 80
        self.path = parsed.path or "/"
        self.timeout = timeout
        self.open_browser = open_browser
        self._channel: RedirectChannel | None = None
        self._server: HTTPServer | None = None
        self._server_thread: Thread | None = None

    @property
    def server_address(self) -> tuple[str, int] | None:
        if self._server is None:
            return None
        host, port = self._server.server_address[:2]
        return str(host), int(port)

    async def display(self, url: str) -> None:
        self._channel = RedirectChannel()
        self._start_server(asyncio.get_running_loop(), self._channel)

        logger.info("authorization_url_ready", url=url)
        if self.open_browser:
            await asyncio.to_thread(webbrowser.open, url)

    async def wait_for_redirect(self) -> str:
        if self._channel is None:
            raise AuthorizationError("display() must be called before waiting")
        return await self._channel.wait(self.timeout)

    async def close(self) -> None:
        if self._server is not None:
            server = self._server
            self._server = None
            await asyncio.to_thread(server.shutdown)
            server.server_close()
        if self._server_thread is not None:
            self._server_thread.join(timeout=1)
            self._server_thread = None

    def _start_server(
        self, loop: asyncio.AbstractEventLoop, channel: RedirectChannel
    ) -> None:
        expected_path = self.path
        redirect_base = self.redirect_uri.split("?", 1)[0]

        class CallbackHandler(BaseHTTPRequestHandler):
            def do_GET(self) -> None:  # noqa: N802
                parsed = urlsplit(self.path)
                if parsed.path != expected_path or not parsed.query:
                    self.send_response(404)
                    self.end_headers()
                    return

                self.send_response(200)
                self.send_header("Content-Type", "text/plain; charset=utf-8")
                self.end_headers()
                self.wfile.write(b"Authorization complete. You can close this window.")

                redirect_url = f"{redirect_base}?{parsed.query}"
                loop.call_soon_threadsafe(_deliver, channel, redirect_url)

            def log_message(self, format: str, *args: Any) -> None:
                pass

        try:
            self._server = HTTPServer((self.host, self.port), CallbackHandler)
        except OSError as e:
            raise AuthorizationError(
                f"Cannot listen for the redirect on {self.host}:{self.port}: {e}"
            ) from e
        self._server_thread = Thread(target=self._server.serve_forever, daemon=True)
        self._server_thread.start()
        logger.debug(
            "callback_server_started", host=self.host, port=self.server_address[1]  # type: ignore[index]
        )


def _deliver(channel: RedirectChannel, redirect_url: str) -> None:
    # Browsers may retry the callback; only the first delivery counts.
    if not channel.resolved:
        channel.resolve(redirect_url)


class ManualAuthorizationUI:
    """Prints the authorization URL and asks the user to paste the redirect.

    Suitable for redirect URIs the local machine cannot receive, such as
    custom app schemes.
    """

    def __init__(self, open_browser: bool = False):
        self.open_browser = open_browser

    async def display(self, url: str) -> None:
        typer.echo("Open this URL in a browser and authorize the application:")
        typer.echo(url)
        if self.open_browser:
            await asyncio.to_thread(webbrowser.open, url)

    async def wait_for_redirect(self) -> str:
        redirect_url: str = await asyncio.to_thread(
            typer.prompt, "Paste the URL you were redirected to"
        )
        return redirect_url.strip()

    async def close(self) -> None:
        return None
