"""CLI command for sending authenticated requests."""

from __future__ import annotations

import json
from typing import Annotated, Optional

import typer
from rich.console import Console

from auth0_middleware.client import AuthenticatingClient
from auth0_middleware.config import get_config
from auth0_middleware.utils.errors import handle_error
from auth0_middleware.utils.output import OutputFormat, print_output, response_summary

console = Console(stderr=True)


def _parse_headers(raw: list[str]) -> dict[str, str]:
    headers = {}
    for item in raw:
        name, sep, value = item.partition(":")
        if not sep or not name.strip():
            raise typer.BadParameter(f"Header must look like 'Name: value', got '{item}'")
        headers[name.strip()] = value.strip()
    return headers


def request(
    method: Annotated[str, typer.Argument(help="HTTP method")],
    url: Annotated[str, typer.Argument(help="URL of the protected resource")],
    provider: Annotated[Optional[str], typer.Option("--provider", "-p", help="Provider profile to use")] = None,
    body: Annotated[Optional[str], typer.Option("--body", "-d", help="JSON request body")] = None,
    header: Annotated[Optional[list[str]], typer.Option("--header", "-H", help="Extra header, 'Name: value'")] = None,
    output: Annotated[OutputFormat, typer.Option("--output", "-o", help="Output format")] = OutputFormat.JSON,
) -> None:
    """Send a request with a bearer token attached."""
    headers = _parse_headers(header or [])
    try:
        payload = json.loads(body) if body else None
    except json.JSONDecodeError as e:
        raise typer.BadParameter(f"--body is not valid JSON: {e}")

    try:
        config = get_config()
        auth_config = config.auth_config(provider)
    except (ValueError, FileNotFoundError) as e:
        handle_error(e)
        raise typer.Exit(1)

    client = AuthenticatingClient.from_config(auth_config, timeout=config.settings.timeout)
    try:
        response = client.request(method, url, json=payload, headers=headers)
        summary = response_summary(response)

        print_output(summary, output, title=f"{method.upper()} {url}")
        if response.status_code in (401, 408):
            message = summary["body"].get("message", "") if isinstance(summary["body"], dict) else ""
            handle_error(RuntimeError(f"HTTP {response.status_code}: {message}"))
            raise typer.Exit(1)
    finally:
        client.close()
