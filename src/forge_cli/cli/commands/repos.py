"""Repository commands."""

from __future__ import annotations

import os
import subprocess
from typing import Any, Optional
from urllib.parse import urlparse

import typer

from forge_cli.api import ForgeClient
from forge_cli.cli.helpers import as_dict, as_records, console, dim, esc, fail, format_date, print_json, require, run_or_exit, success
from forge_cli.repo_ref import RepoRef, parse_repo_arg
from forge_cli.templates import get_template

app = typer.Typer(help="Manage repositories")

_VISIBILITIES = ("public", "private")


def _visibility_icon(repo: dict[str, Any]) -> str:
    return "🔒" if repo.get("visibility") == "private" else "🌐"


def clone_url(api_url: str, ref: RepoRef) -> str:
    """Git smart-HTTP URL served from the same host as the API."""
    parsed = urlparse(api_url)
    return f"{parsed.scheme}://{parsed.netloc}/git/{ref.owner}/{ref.name}"


@app.command("list")
def list_repos(
    json_output: bool = typer.Option(False, "--json", help="Print the raw payload"),
) -> None:
    """List accessible repositories."""

    def _run() -> None:
        with ForgeClient() as client:
            payload = require(client.get("/api/repositories"))

        if json_output:
            print_json(payload)
            return

        repositories = as_records(payload)
        if not repositories:
            console.print("[yellow]No repositories found[/yellow]")
            return

        console.print(f"[bold]Repositories ({len(repositories)})[/bold]")
        console.print()
        for repo in repositories:
            identifier = f"@{repo.get('ownerIdentifier')}/{repo.get('name')}"
            console.print(f"{_visibility_icon(repo)} [cyan]{esc(identifier)}[/cyan]")
            if repo.get("description"):
                console.print(dim(f"   {repo['description']}"))

    run_or_exit(_run)


@app.command("view")
def view_repo(
    repo_arg: str = typer.Argument(..., metavar="REPO", help="Repository (@owner/name)"),
    json_output: bool = typer.Option(False, "--json", help="Print the raw payload"),
) -> None:
    """View repository details."""

    def _run() -> None:
        ref = parse_repo_arg(repo_arg)
        with ForgeClient() as client:
            repo = as_dict(require(client.get(ref.api_path)))

        if json_output:
            print_json(repo)
            return

        console.print(f"[bold]{esc(repo.get('ownerIdentifier'))}/{esc(repo.get('name'))}[/bold]")
        if repo.get("description"):
            console.print(dim(repo["description"]))
        console.print()
        console.print(dim(f"  Visibility: {repo.get('visibility')}"))
        console.print(dim(f"  Type: {repo.get('repoType') or 'standard'}"))
        console.print(dim(f"  Created: {format_date(repo.get('createdAt'))}"))

    run_or_exit(_run)


@app.command("clone")
def clone_repo(
    repo_arg: str = typer.Argument(..., metavar="REPO", help="Repository (@owner/name)"),
    destination: Optional[str] = typer.Argument(None, help="Destination directory"),
) -> None:
    """Clone a repository with git."""

    def _run() -> None:
        ref = parse_repo_arg(repo_arg)
        with ForgeClient() as client:
            # Fails early with the API's message if the repository is missing.
            require(client.get(ref.api_path))
            url = clone_url(client.credentials.api_url, ref)

        dest = destination or ref.name
        console.print(dim(f"Cloning {ref.owner}/{ref.name} into {dest}..."))

        try:
            result = subprocess.run(
                ["git", "clone", url, dest],
                env={**os.environ, "GIT_TERMINAL_PROMPT": "0"},
            )
        except FileNotFoundError:
            fail("git executable not found on PATH")
        if result.returncode != 0:
            fail(f"git clone exited with code {result.returncode}")

        success("Repository cloned successfully")

    run_or_exit(_run)


@app.command("create")
def create_repo(
    name: str = typer.Option(..., "--name", help="Repository name"),
    description: Optional[str] = typer.Option(None, "--description", help="Repository description"),
    visibility: str = typer.Option("private", "--visibility", help="Visibility (public/private)"),
    org: Optional[str] = typer.Option(
        None, "--org", help="Organization identifier (defaults to your personal org)"
    ),
    template_id: Optional[str] = typer.Option(
        None, "--template", help="Repository template ID (see 'forge templates list')"
    ),
) -> None:
    """Create a new repository."""

    def _run() -> None:
        if visibility not in _VISIBILITIES:
            fail(f"Invalid visibility '{visibility}'. Expected one of: {', '.join(_VISIBILITIES)}")

        template = None
        if template_id:
            template = get_template(template_id)
            if template is None:
                fail(f'Template "{template_id}" not found')

        with ForgeClient() as client:
            org_identifier = org
            if not org_identifier:
                user = as_dict(require(client.get("/api/users/me")))
                org_identifier = user.get("username")

            body: dict[str, Any] = {
                "name": name,
                "visibility": visibility,
                "orgIdentifier": org_identifier,
            }
            if description is not None:
                body["description"] = description
            if template is not None:
                body["templateId"] = template.id
                body["metadata"] = template.metadata

            repo = as_dict(require(client.post("/api/repositories", body)))

        success("Repository created successfully")
        console.print(dim(f"  @{repo.get('ownerIdentifier')}/{repo.get('name')}"))

    run_or_exit(_run)


__all__ = ["app", "clone_url"]
