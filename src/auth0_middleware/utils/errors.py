"""Structured error handling for agent-friendly output."""

from __future__ import annotations

import json
import sys

from rich.console import Console

console = Console(stderr=True)

# Actionable hints keyed by error substring
_ERROR_HINTS: list[tuple[str, str]] = [
    ("401", "Credentials rejected. Check AUTH0_CLIENT_ID, AUTH0_CLIENT_SECRET and the audience"),
    ("not been accepted", "Credentials rejected. Check AUTH0_CLIENT_ID, AUTH0_CLIENT_SECRET and the audience"),
    ("408", "Identity provider unreachable. Check the provider URI and network connectivity"),
    ("cannot be contacted", "Identity provider unreachable. Check the provider URI and network connectivity"),
    ("unknown provider", "Provider not configured. Check config/providers.yaml or AUTH0_URI"),
    ("timeout", "Request timed out. Try again or raise AUTH0_TIMEOUT"),
    ("connection", "Connection error. Check network connectivity"),
]


def _get_hint(error_message: str) -> str | None:
    """Match an error message to an actionable hint."""
    lower = error_message.lower()
    for pattern, hint in _ERROR_HINTS:
        if pattern.lower() in lower:
            return hint
    return None


def _get_code(error: Exception, message: str) -> str:
    lower = message.lower()
    if isinstance(error, (ValueError, FileNotFoundError)) and "provider" in lower:
        return "CONFIG_ERROR"
    if "401" in message or "not been accepted" in lower:
        return "AUTH_ERROR"
    if "408" in message or "timeout" in lower:
        return "TIMEOUT"
    if "cannot be contacted" in lower or "connection" in lower:
        return "CONNECTION_ERROR"
    return "RUNTIME_ERROR"


def handle_error(error: Exception) -> None:
    """Handle an error with structured output to stdout and human-readable output to stderr.

    Outputs a JSON error object to stdout for agent consumption:
    {"error": true, "code": "AUTH_ERROR", "message": "...", "hint": "..."}

    Also prints a human-readable error to stderr.
    """
    message = str(error)
    hint = _get_hint(message)

    error_obj: dict[str, object] = {
        "error": True,
        "code": _get_code(error, message),
        "message": message,
    }
    if hint:
        error_obj["hint"] = hint

    json.dump(error_obj, sys.stdout)
    sys.stdout.write("\n")

    console.print(f"[red]Error:[/red] {message}")
    if hint:
        console.print(f"[dim]Hint: {hint}[/dim]")
