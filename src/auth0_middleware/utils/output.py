"""Output formatting utilities for agent-friendly CLI output."""

from __future__ import annotations

import json
import sys
from enum import Enum
from typing import Any

import httpx
from rich.console import Console
from rich.table import Table

console = Console(stderr=True)


class OutputFormat(str, Enum):
    TABLE = "table"
    JSON = "json"


def mask_token(token: str, visible: int = 6) -> str:
    """Hide all but the first characters of a credential."""
    if len(token) <= visible:
        return "*" * len(token)
    return token[:visible] + "..."


def print_output(
    data: list[dict[str, Any]] | dict[str, Any],
    fmt: OutputFormat = OutputFormat.TABLE,
    title: str | None = None,
) -> None:
    """Print data as JSON on stdout or as a Rich table on stderr."""
    if fmt == OutputFormat.JSON:
        print_json(data)
    else:
        print_table(data, title)


def print_json(data: Any) -> None:
    """Print data as formatted JSON to stdout."""
    json.dump(data, sys.stdout, indent=2, default=str)
    sys.stdout.write("\n")


def print_table(data: list[dict[str, Any]] | dict[str, Any], title: str | None = None) -> None:
    """Print data as a Rich table."""
    if isinstance(data, dict):
        data = [data]

    if not data:
        console.print("[dim]No results.[/dim]")
        return

    columns = list(data[0].keys())
    table = Table(title=title, show_lines=False)
    for col in columns:
        table.add_column(col, overflow="fold")

    for row in data:
        table.add_row(*[str(row.get(col, "")) for col in columns])

    console.print(table)


def response_summary(response: httpx.Response) -> dict[str, Any]:
    """Summarize a fully read response for display."""
    try:
        body: Any = response.json()
    except ValueError:
        body = response.text
    return {
        "status": response.status_code,
        "reason": response.reason_phrase,
        "content_type": response.headers.get("content-type", ""),
        "body": body,
    }
