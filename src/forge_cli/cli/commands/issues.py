"""Issue commands."""

from __future__ import annotations

from typing import Optional

import typer

from forge_cli.api import ForgeClient
from forge_cli.cli.helpers import (
    as_dict,
    as_records,
    console,
    dim,
    esc,
    format_date,
    print_json,
    require,
    run_or_exit,
    success,
    username_of,
)
from forge_cli.repo_ref import parse_repo_arg

app = typer.Typer(help="Manage issues")


def _state_icon(state: object) -> str:
    return "🟢" if state == "open" else "⚪"


@app.command("list")
def list_issues(
    repo: str = typer.Option(..., "--repo", help="Repository (@owner/name)"),
    state: str = typer.Option("open", "--state", help="Filter by state (open/closed)"),
    json_output: bool = typer.Option(False, "--json", help="Print the raw payload"),
) -> None:
    """List issues in a repository."""

    def _run() -> None:
        ref = parse_repo_arg(repo)
        with ForgeClient() as client:
            payload = require(client.get(f"{ref.api_path}/issues", params={"state": state}))

        if json_output:
            print_json(payload)
            return

        issues = as_records(payload)
        if not issues:
            console.print(f"[yellow]No {state} issues found[/yellow]")
            return

        console.print(f"[bold]Issues in {ref} ({len(issues)})[/bold]")
        console.print()
        for issue in issues:
            console.print(f"{_state_icon(issue.get('state'))} #{issue.get('number')} [cyan]{esc(issue.get('title'))}[/cyan]")
            console.print(
                dim(f"   by @{username_of(issue.get('author'))} · {format_date(issue.get('createdAt'))}")
            )

    run_or_exit(_run)


@app.command("view")
def view_issue(
    repo: str = typer.Option(..., "--repo", help="Repository (@owner/name)"),
    number: int = typer.Option(..., "--number", min=1, help="Issue number"),
    json_output: bool = typer.Option(False, "--json", help="Print the raw payload"),
) -> None:
    """View issue details."""

    def _run() -> None:
        ref = parse_repo_arg(repo)
        with ForgeClient() as client:
            issue = as_dict(require(client.get(f"{ref.api_path}/issues/{number}")))

        if json_output:
            print_json(issue)
            return

        console.print(f"{_state_icon(issue.get('state'))} [bold]#{issue.get('number')} {esc(issue.get('title'))}[/bold]")
        console.print(dim(f"by @{username_of(issue.get('author'))} · {format_date(issue.get('createdAt'))}"))
        console.print()
        if issue.get("body"):
            console.print(issue["body"], markup=False)
            console.print()
        console.print(dim(f"State: {issue.get('state')}"))
        if issue.get("closedAt"):
            console.print(dim(f"Closed: {format_date(issue['closedAt'])}"))

    run_or_exit(_run)


@app.command("create")
def create_issue(
    repo: str = typer.Option(..., "--repo", help="Repository (@owner/name)"),
    title: str = typer.Option(..., "--title", help="Issue title"),
    body: Optional[str] = typer.Option(None, "--body", help="Issue description"),
) -> None:
    """Create a new issue."""

    def _run() -> None:
        ref = parse_repo_arg(repo)
        with ForgeClient() as client:
            issue = as_dict(require(client.post(f"{ref.api_path}/issues", {"title": title, "body": body or ""})))

        success("Issue created successfully")
        console.print(dim(f"  #{issue.get('number')} {issue.get('title')}"))
        console.print(dim(f"  {ref}#{issue.get('number')}"))

    run_or_exit(_run)


@app.command("close")
def close_issue(
    repo: str = typer.Option(..., "--repo", help="Repository (@owner/name)"),
    number: int = typer.Option(..., "--number", min=1, help="Issue number"),
) -> None:
    """Close an issue."""

    def _run() -> None:
        ref = parse_repo_arg(repo)
        with ForgeClient() as client:
            require(client.patch(f"{ref.api_path}/issues/{number}", {"state": "closed"}))
        success("Issue closed successfully")

    run_or_exit(_run)


@app.command("comment")
def comment_issue(
    repo: str = typer.Option(..., "--repo", help="Repository (@owner/name)"),
    number: int = typer.Option(..., "--number", min=1, help="Issue number"),
    body: str = typer.Option(..., "--body", help="Comment text"),
) -> None:
    """Add a comment to an issue."""

    def _run() -> None:
        ref = parse_repo_arg(repo)
        with ForgeClient() as client:
            require(client.post(f"{ref.api_path}/issues/{number}/comments", {"body": body}))
        success("Comment added successfully")

    run_or_exit(_run)


__all__ = ["app"]
