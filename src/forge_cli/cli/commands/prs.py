"""Pull request commands."""

from __future__ import annotations

from typing import Any, Optional

import typer

from forge_cli.api import ForgeClient
from forge_cli.cli.helpers import (
    as_dict,
    as_records,
    console,
    dim,
    esc,
    fail,
    format_date,
    print_json,
    require,
    run_or_exit,
    success,
    username_of,
)
from forge_cli.repo_ref import RepoRef, parse_repo_arg

app = typer.Typer(help="Manage pull requests")

MERGE_METHODS = ("merge", "squash", "rebase")


def _state_icon(state: object) -> str:
    if state == "open":
        return "🟢"
    if state == "merged":
        return "🟣"
    return "⚪"


def _branch_line(pr: dict[str, Any]) -> str:
    return (
        f"{pr.get('headBranch')} → {pr.get('baseBranch')} "
        f"by @{username_of(pr.get('author'))} · {format_date(pr.get('createdAt'))}"
    )


def resolve_pull_request_id(client: ForgeClient, ref: RepoRef, number: int) -> str:
    """Look up the server-side id of PR ``number``; sub-resources are keyed by id."""
    pr = as_dict(require(client.get(f"{ref.api_path}/pull-requests/{number}")))
    pr_id = pr.get("id")
    return str(pr_id) if pr_id is not None else str(number)


@app.command("list")
def list_prs(
    repo: str = typer.Option(..., "--repo", help="Repository (@owner/name)"),
    state: str = typer.Option("open", "--state", help="Filter by state (open/closed/merged)"),
    json_output: bool = typer.Option(False, "--json", help="Print the raw payload"),
) -> None:
    """List pull requests in a repository."""

    def _run() -> None:
        ref = parse_repo_arg(repo)
        with ForgeClient() as client:
            payload = require(client.get(f"{ref.api_path}/pull-requests", params={"state": state}))

        if json_output:
            print_json(payload)
            return

        prs = as_records(payload)
        if not prs:
            console.print(f"[yellow]No {state} pull requests found[/yellow]")
            return

        console.print(f"[bold]Pull Requests in {ref} ({len(prs)})[/bold]")
        console.print()
        for pr in prs:
            console.print(f"{_state_icon(pr.get('state'))} #{pr.get('number')} [cyan]{esc(pr.get('title'))}[/cyan]")
            console.print(dim(f"   {_branch_line(pr)}"))

    run_or_exit(_run)


@app.command("view")
def view_pr(
    repo: str = typer.Option(..., "--repo", help="Repository (@owner/name)"),
    number: int = typer.Option(..., "--number", min=1, help="PR number"),
    json_output: bool = typer.Option(False, "--json", help="Print the raw payload"),
) -> None:
    """View pull request details."""

    def _run() -> None:
        ref = parse_repo_arg(repo)
        with ForgeClient() as client:
            pr = as_dict(require(client.get(f"{ref.api_path}/pull-requests/{number}")))

        if json_output:
            print_json(pr)
            return

        console.print(f"{_state_icon(pr.get('state'))} [bold]#{pr.get('number')} {esc(pr.get('title'))}[/bold]")
        console.print(dim(_branch_line(pr)))
        console.print()
        if pr.get("body"):
            console.print(pr["body"], markup=False)
            console.print()
        console.print(dim(f"State: {pr.get('state')}"))
        if pr.get("mergedAt"):
            console.print(dim(f"Merged: {format_date(pr['mergedAt'])}"))
        if pr.get("closedAt"):
            console.print(dim(f"Closed: {format_date(pr['closedAt'])}"))

    run_or_exit(_run)


@app.command("create")
def create_pr(
    repo: str = typer.Option(..., "--repo", help="Repository (@owner/name)"),
    head: str = typer.Option(..., "--head", help="Head branch (source)"),
    base: str = typer.Option(..., "--base", help="Base branch (target)"),
    title: str = typer.Option(..., "--title", help="PR title"),
    body: Optional[str] = typer.Option(None, "--body", help="PR description"),
) -> None:
    """Create a new pull request."""

    def _run() -> None:
        ref = parse_repo_arg(repo)
        payload = {
            "headBranch": head,
            "baseBranch": base,
            "title": title,
            "body": body or "",
        }
        with ForgeClient() as client:
            pr = as_dict(require(client.post(f"{ref.api_path}/pull-requests", payload)))

        success("Pull request created successfully")
        console.print(dim(f"  #{pr.get('number')} {pr.get('title')}"))
        console.print(dim(f"  {ref}#{pr.get('number')}"))

    run_or_exit(_run)


@app.command("merge")
def merge_pr(
    repo: str = typer.Option(..., "--repo", help="Repository (@owner/name)"),
    number: int = typer.Option(..., "--number", min=1, help="PR number"),
    method: str = typer.Option("merge", "--method", help="Merge method (merge/squash/rebase)"),
) -> None:
    """Merge a pull request."""

    def _run() -> None:
        if method not in MERGE_METHODS:
            fail(f"Invalid merge method '{method}'. Expected one of: {', '.join(MERGE_METHODS)}")

        ref = parse_repo_arg(repo)
        with ForgeClient() as client:
            pr_id = resolve_pull_request_id(client, ref, number)
            require(client.post(f"{ref.api_path}/pull-requests/{pr_id}/merge", {"mergeMethod": method}))
        success("Pull request merged successfully")

    run_or_exit(_run)


@app.command("close")
def close_pr(
    repo: str = typer.Option(..., "--repo", help="Repository (@owner/name)"),
    number: int = typer.Option(..., "--number", min=1, help="PR number"),
) -> None:
    """Close a pull request without merging."""

    def _run() -> None:
        ref = parse_repo_arg(repo)
        with ForgeClient() as client:
            require(client.patch(f"{ref.api_path}/pull-requests/{number}", {"state": "closed"}))
        success("Pull request closed successfully")

    run_or_exit(_run)


@app.command("comment")
def comment_pr(
    repo: str = typer.Option(..., "--repo", help="Repository (@owner/name)"),
    number: int = typer.Option(..., "--number", min=1, help="PR number"),
    body: str = typer.Option(..., "--body", help="Comment text"),
) -> None:
    """Add a comment to a pull request."""

    def _run() -> None:
        ref = parse_repo_arg(repo)
        with ForgeClient() as client:
            pr_id = resolve_pull_request_id(client, ref, number)
            require(client.post(f"{ref.api_path}/pull-requests/{pr_id}/comments", {"body": body}))
        success("Comment added successfully")

    run_or_exit(_run)


__all__ = ["MERGE_METHODS", "app", "resolve_pull_request_id"]
