"""CLI commands for access token management."""

from __future__ import annotations

from typing import Annotated, Optional

import typer
from rich.console import Console

from auth0_middleware.auth import TokenSource
from auth0_middleware.config import get_config
from auth0_middleware.models.errors import AuthError
from auth0_middleware.transport import HttpxTransport
from auth0_middleware.utils.cache import TokenCache
from auth0_middleware.utils.errors import handle_error
from auth0_middleware.utils.output import OutputFormat, mask_token, print_output

console = Console(stderr=True)
app = typer.Typer(name="token", help="Obtain access tokens from the identity provider.")


@app.command()
def fetch(
    provider: Annotated[Optional[str], typer.Option("--provider", "-p", help="Provider profile to use")] = None,
    show: Annotated[bool, typer.Option("--show", help="Print the full token instead of a masked one")] = False,
    output: Annotated[OutputFormat, typer.Option("--output", "-o", help="Output format")] = OutputFormat.TABLE,
) -> None:
    """Request a new access token and display it."""
    try:
        config = get_config()
        auth_config = config.auth_config(provider)
    except (ValueError, FileNotFoundError) as e:
        handle_error(e)
        raise typer.Exit(1)

    transport = HttpxTransport(timeout=config.settings.timeout)
    cache = TokenCache(TokenSource(auth_config, transport))

    try:
        console.print(f"Requesting token from [bold]{auth_config.token_url}[/bold]...", style="yellow")
        token = cache.get()
        if isinstance(token, AuthError):
            handle_error(RuntimeError(token.message))
            raise typer.Exit(1)

        status = cache.get_status()
        result = {
            "status": "authenticated",
            "audience": auth_config.audience,
            "token": token if show else mask_token(token),
            "fetch_count": status.fetch_count,
        }
        print_output(result, output, title="Access Token")
    finally:
        transport.close()
