"""Shared console, rendering and error-exit helpers for CLI commands."""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime
from typing import Any, Callable, NoReturn, Optional, TypeVar

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from forge_cli.api import RequestFailure
from forge_cli.api.models import Outcome
from forge_cli.errors import ForgeError

DEBUG_ENV_VAR = "FORGE_DEBUG"
_TRUTHY_VALUES = {"1", "true", "yes", "on"}

console = Console(highlight=False, emoji=False, soft_wrap=True)

T = TypeVar("T")


def configure_logging(verbose: bool) -> None:
    """Route library logging to stderr; DEBUG when verbose, WARNING otherwise."""
    if not verbose:
        verbose = os.getenv(DEBUG_ENV_VAR, "").strip().lower() in _TRUTHY_VALUES

    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=False,
    )
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(name)s: %(message)s",
        handlers=[handler],
        force=True,
    )
    # httpx/httpcore are chatty at DEBUG; our client logs each request itself.
    for noisy in ("httpx", "httpcore"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def fail(message: str) -> NoReturn:
    console.print(f"[red]Error: {escape(message)}[/red]")
    raise typer.Exit(1)


def require(outcome: Outcome) -> Any:
    """Return the payload of a successful outcome, or print the failure and exit 1."""
    if isinstance(outcome, RequestFailure):
        fail(outcome.message)
    return outcome.payload


def run_or_exit(fn: Callable[[], T]) -> T:
    try:
        return fn()
    except ForgeError as exc:
        fail(str(exc))


def print_json(payload: Any) -> None:
    typer.echo(json.dumps(payload, indent=2, sort_keys=True, default=str))


def success(message: str) -> None:
    console.print(f"[green]✓ {escape(message)}[/green]")


def dim(text: Any) -> str:
    """Escape server-supplied text and wrap it in dim markup."""
    return f"[dim]{escape(str(text))}[/dim]"


def _parse_datetime(value: Any) -> Optional[datetime]:
    if not value or not isinstance(value, str):
        return None
    try:
        if value.endswith("Z"):
            value = value[:-1] + "+00:00"
        return datetime.fromisoformat(value)
    except ValueError:
        return None


def format_date(value: Any) -> str:
    parsed = _parse_datetime(value)
    if parsed is None:
        return str(value) if value else "unknown"
    return parsed.strftime("%Y-%m-%d")


def format_datetime(value: Any) -> str:
    parsed = _parse_datetime(value)
    if parsed is None:
        return str(value) if value else "unknown"
    return parsed.strftime("%Y-%m-%d %H:%M:%S")


def username_of(entity: Any) -> str:
    """Best-effort ``author.username`` / ``user.username`` lookup."""
    if isinstance(entity, dict):
        username = entity.get("username")
        if username:
            return str(username)
    return "unknown"


def as_records(payload: Any, key: str | None = None) -> list[dict[str, Any]]:
    """Mapping items of a bare array, or of the array at ``payload[key]``."""
    if key is not None and isinstance(payload, dict):
        payload = payload.get(key)
    if not isinstance(payload, list):
        return []
    return [item for item in payload if isinstance(item, dict)]


def as_dict(payload: Any) -> dict[str, Any]:
    return payload if isinstance(payload, dict) else {}


def esc(value: Any) -> str:
    """Escape server-supplied text for use inside rich markup."""
    return escape(str(value))
