"""Command-line client for Kernelius Forge, the agent-native Git platform."""

from __future__ import annotations

from typing import Optional

import typer

from forge_cli.cli import register_commands
from forge_cli.cli.helpers import configure_logging

__version__ = "0.1.0"

app = typer.Typer(
    name="forge",
    help="CLI tool for Kernelius Forge - the agent-native Git platform",
    add_completion=False,
    no_args_is_help=True,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@app.callback()
def callback(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Log HTTP requests and other debug output to stderr"
    ),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit",
    ),
) -> None:
    configure_logging(verbose)


register_commands(app)


def main() -> None:
    app()


__all__ = ["__version__", "app", "main"]
