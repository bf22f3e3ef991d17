"""Auth0 middleware CLI: entry point.

Obtain access tokens and send bearer-authenticated requests from the shell.
"""

from __future__ import annotations

import logging

import typer

from auth0_middleware.commands.providers_cmd import app as providers_app
from auth0_middleware.commands.request_cmd import request as request_cmd
from auth0_middleware.commands.token_cmd import app as token_app

app = typer.Typer(
    name="auth0-middleware",
    help="Send requests authenticated with tokens from an Auth0-style identity provider.",
    no_args_is_help=True,
)

# Register command groups
app.add_typer(token_app, name="token")
app.add_typer(providers_app, name="providers")
app.command("request")(request_cmd)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """Auth0 middleware CLI: tokens, providers and authenticated requests."""
    if verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")


if __name__ == "__main__":
    app()
