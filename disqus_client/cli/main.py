"""Main entry point for the Disqus command line client."""

import asyncio
from pathlib import Path
from typing import Annotated, Any
from urllib.parse import urlsplit

import typer
from rich import box
from rich.console import Console
from rich.table import Table

from disqus_client._version import __version__
from disqus_client.authorization import (
    AuthorizationUI,
    LoopbackAuthorizationUI,
    ManualAuthorizationUI,
)
from disqus_client.cli.helpers import get_rich_toolkit, parse_params
from disqus_client.client import DisqusClient
from disqus_client.config.logging import LoggingSettings
from disqus_client.config.settings import ConfigurationError, DisqusSettings
from disqus_client.core.logging import get_logger, setup_logging_from_settings
from disqus_client.exceptions import DisqusError
from disqus_client.models import APIResult, HTTPMethod


app = typer.Typer(
    name="disqus",
    help="Disqus API client",
    rich_markup_mode="rich",
    no_args_is_help=True,
    pretty_exceptions_enable=False,
)

console = Console()
logger = get_logger(__name__)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        toolkit = get_rich_toolkit()
        toolkit.print(f"disqus-client {__version__}", tag="version")
        raise typer.Exit()


@app.callback()
def app_main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to a TOML configuration file",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        help="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    ),
) -> None:
    """Disqus API client."""
    try:
        settings = DisqusSettings.from_config(config)
        if log_level is not None:
            settings.logging = LoggingSettings(
                level=log_level, format=settings.logging.format
            )
    except (ConfigurationError, ValueError) as e:
        get_rich_toolkit().print(f"Configuration error: {e}", tag="error")
        raise typer.Exit(2) from e

    setup_logging_from_settings(settings.logging)
    ctx.obj = settings


def create_client(settings: DisqusSettings) -> DisqusClient:
    return DisqusClient.from_settings(settings)


def _settings(ctx: typer.Context) -> DisqusSettings:
    settings: DisqusSettings = ctx.obj
    return settings


def _authorization_ui(
    settings: DisqusSettings, manual: bool, open_browser: bool
) -> AuthorizationUI:
    redirect_uri = settings.redirect_uri
    if (
        manual
        or redirect_uri is None
        or urlsplit(redirect_uri).hostname not in ("localhost", "127.0.0.1")
    ):
        return ManualAuthorizationUI(open_browser=open_browser)
    return LoopbackAuthorizationUI(
        redirect_uri,
        timeout=settings.callback_timeout,
        open_browser=open_browser,
    )


@app.command(name="login")
def login_command(
    ctx: typer.Context,
    manual: Annotated[
        bool,
        typer.Option(
            "--manual",
            help="Paste the redirect URL instead of capturing it on a local server",
        ),
    ] = False,
    open_browser: Annotated[
        bool,
        typer.Option("--browser/--no-browser", help="Open the authorization page"),
    ] = True,
) -> None:
    """Authorize this application with a Disqus account."""
    settings = _settings(ctx)
    toolkit = get_rich_toolkit()

    async def _login() -> tuple[bool, str | None]:
        async with create_client(settings) as client:
            await client.configure_from_settings(settings)
            ui = _authorization_ui(settings, manual, open_browser)
            success = await client.authenticate(ui)
            return success, client.current_user_id

    try:
        success, user_id = asyncio.run(_login())
    except DisqusError as e:
        toolkit.print(f"Login failed: {e}", tag="error")
        raise typer.Exit(1) from e

    if not success:
        toolkit.print("Login failed: the authorization code was not accepted", tag="error")
        raise typer.Exit(1)

    toolkit.print(f"Logged in as user {user_id}", tag="success")


@app.command(name="logout")
def logout_command(ctx: typer.Context) -> None:
    """Forget the stored identity."""
    settings = _settings(ctx)

    async def _logout() -> bool:
        async with create_client(settings) as client:
            was_authenticated = client.is_authenticated
            await client.logout()
            return was_authenticated

    try:
        was_authenticated = asyncio.run(_logout())
    except DisqusError as e:
        get_rich_toolkit().print(f"Logout failed: {e}", tag="error")
        raise typer.Exit(1) from e

    if was_authenticated:
        get_rich_toolkit().print("Logged out", tag="success")
    else:
        get_rich_toolkit().print("Not logged in", tag="info")


@app.command(name="status")
def status_command(ctx: typer.Context) -> None:
    """Show the authentication status."""
    settings = _settings(ctx)

    async def _status() -> tuple[bool, str | None, str]:
        async with create_client(settings) as client:
            return (
                client.is_authenticated,
                client.current_user_id,
                client.storage.get_location(),
            )

    authenticated, user_id, location = asyncio.run(_status())

    table = Table(
        show_header=False,
        box=box.ROUNDED,
        title="Disqus Authentication",
        title_style="bold white",
    )
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="white")
    table.add_row("Authenticated", "yes" if authenticated else "no")
    table.add_row("User ID", user_id or "-")
    table.add_row("Storage", location)
    table.add_row("Public key", settings.public_key or "[dim]not configured[/dim]")
    console.print(table)


def _call(
    settings: DisqusSettings,
    method: HTTPMethod,
    api: str,
    params: list[str] | None,
    auth: bool,
) -> None:
    toolkit = get_rich_toolkit()
    try:
        parsed = parse_params(params)
    except ValueError as e:
        toolkit.print(str(e), tag="error")
        raise typer.Exit(2) from e

    async def _run() -> APIResult:
        async with create_client(settings) as client:
            await client.configure_from_settings(settings)
            return await client.perform_api_call(api, method, auth, parsed)

    try:
        result = asyncio.run(_run())
    except DisqusError as e:
        toolkit.print(f"Request failed: {e}", tag="error")
        raise typer.Exit(1) from e

    if result.data is not None:
        console.print_json(data=result.data)
    if not result.success:
        toolkit.print(f"Request failed: {result.error}", tag="error")
        raise typer.Exit(1)


ParamOption = Annotated[
    list[str] | None,
    typer.Option("--param", "-p", help="Request parameter as key=value (repeatable)"),
]
AuthOption = Annotated[
    bool,
    typer.Option("--auth", help="Attach the access token of the logged in user"),
]


@app.command(name="get")
def get_command(
    ctx: typer.Context,
    api: Annotated[str, typer.Argument(help="API endpoint, e.g. threads/list")],
    param: ParamOption = None,
    auth: AuthOption = False,
) -> None:
    """Call an API endpoint with GET."""
    _call(_settings(ctx), HTTPMethod.GET, api, param, auth)


@app.command(name="post")
def post_command(
    ctx: typer.Context,
    api: Annotated[str, typer.Argument(help="API endpoint, e.g. posts/create")],
    param: ParamOption = None,
    auth: AuthOption = False,
) -> None:
    """Call an API endpoint with POST."""
    _call(_settings(ctx), HTTPMethod.POST, api, param, auth)


def main(argv: list[str] | None = None) -> Any:
    """Run the CLI."""
    return app(args=argv)


if __name__ == "__main__":
    main()
