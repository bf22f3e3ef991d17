"""CLI commands for identity provider profiles."""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console

from auth0_middleware.config import get_config
from auth0_middleware.utils.errors import handle_error
from auth0_middleware.utils.output import OutputFormat, print_output

console = Console(stderr=True)
app = typer.Typer(name="providers", help="Inspect configured identity providers.")


@app.command("list")
def list_providers(
    output: Annotated[OutputFormat, typer.Option("--output", "-o", help="Output format")] = OutputFormat.TABLE,
) -> None:
    """List configured provider profiles."""
    try:
        config = get_config()
    except (ValueError, FileNotFoundError) as e:
        handle_error(e)
        raise typer.Exit(1)

    if not config.all_providers:
        console.print("[dim]No providers configured. Set AUTH0_URI or add config/providers.yaml.[/dim]")
        raise typer.Exit(0)

    rows = []
    for name in config.all_providers:
        auth_config = config.auth_config(name)
        rows.append({
            "name": name,
            "default": name == config.settings.default_provider,
            "token_url": auth_config.token_url,
            "audience": auth_config.audience,
            "client_id": auth_config.client_id,
        })
    print_output(rows, output, title="Identity Providers")
