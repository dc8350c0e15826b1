"""User profile commands."""

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
    format_date,
    print_json,
    require,
    run_or_exit,
    success,
)

app = typer.Typer(help="Manage user profile and settings")

BIO_PREVIEW_LENGTH = 60

# CLI option name -> profile field accepted by PATCH /api/settings/profile
_PROFILE_FIELDS = (
    ("name", "name"),
    ("bio", "bio"),
    ("location", "location"),
    ("website", "website"),
    ("pronouns", "pronouns"),
    ("company", "company"),
    ("git_email", "gitEmail"),
)


def _short_bio(bio: str) -> str:
    if len(bio) > BIO_PREVIEW_LENGTH:
        return bio[:BIO_PREVIEW_LENGTH] + "..."
    return bio


@app.command("profile")
def show_profile(
    username: Optional[str] = typer.Argument(None, help="Username (defaults to current user)"),
    json_output: bool = typer.Option(False, "--json", help="Print the raw payload"),
) -> None:
    """View a user profile."""

    def _run() -> None:
        path = f"/api/users/{username}" if username else "/api/users/me"
        with ForgeClient() as client:
            profile = as_dict(require(client.get(path)))

        if json_output:
            print_json(profile)
            return

        console.print(f"[bold]@{esc(profile.get('username'))}[/bold]")
        if profile.get("name"):
            console.print(dim(profile["name"]))
        console.print()

        if profile.get("bio"):
            console.print(profile["bio"], markup=False)
            console.print()

        for key, label in (
            ("location", "📍 "),
            ("website", "🔗 "),
            ("company", "🏢 "),
            ("pronouns", "Pronouns: "),
            ("gitEmail", "Git Email: "),
        ):
            if profile.get(key):
                console.print(dim(f"{label}{profile[key]}"))

        console.print()
        console.print(dim(f"User type: {profile.get('userType') or 'human'}"))
        console.print(dim(f"Joined: {format_date(profile.get('createdAt'))}"))

    run_or_exit(_run)


@app.command("edit")
def edit_profile(
    name: Optional[str] = typer.Option(None, "--name", help="Display name"),
    bio: Optional[str] = typer.Option(None, "--bio", help="Bio/about"),
    location: Optional[str] = typer.Option(None, "--location", help="Location"),
    website: Optional[str] = typer.Option(None, "--website", help="Website URL"),
    pronouns: Optional[str] = typer.Option(None, "--pronouns", help="Pronouns"),
    company: Optional[str] = typer.Option(None, "--company", help="Company name"),
    git_email: Optional[str] = typer.Option(None, "--git-email", help="Git commit email"),
) -> None:
    """Edit your profile."""
    values = {
        "name": name,
        "bio": bio,
        "location": location,
        "website": website,
        "pronouns": pronouns,
        "company": company,
        "git_email": git_email,
    }

    def _run() -> None:
        updates: dict[str, Any] = {
            field: values[option] for option, field in _PROFILE_FIELDS if values[option] is not None
        }
        if not updates:
            console.print(
                "[yellow]No updates specified. Use --name, --bio, --location, --website, "
                "--pronouns, --company, or --git-email[/yellow]"
            )
            return

        with ForgeClient() as client:
            require(client.patch("/api/settings/profile", updates))
        success("Profile updated successfully")

    run_or_exit(_run)


@app.command("search")
def search_users(
    query: str = typer.Argument(..., help="Search query"),
    limit: int = typer.Option(10, "--limit", min=1, help="Limit results"),
    json_output: bool = typer.Option(False, "--json", help="Print the raw payload"),
) -> None:
    """Search for users."""

    def _run() -> None:
        with ForgeClient() as client:
            payload = require(
                client.get("/api/search", params={"q": query, "type": "users", "limit": limit})
            )

        users = as_records(payload, "users")
        if json_output:
            print_json(users)
            return

        if not users:
            console.print("[yellow]No users found[/yellow]")
            return

        console.print(f"[bold]Users ({len(users)})[/bold]")
        console.print()
        for found in users:
            console.print(f"[cyan]@{esc(found.get('username'))}[/cyan]")
            if found.get("name"):
                console.print(dim(f"  {found['name']}"))
            if found.get("bio"):
                console.print(dim(f"  {_short_bio(str(found['bio']))}"))
            console.print()

    run_or_exit(_run)


@app.command("repos")
def list_user_repos(
    username: Optional[str] = typer.Argument(None, help="Username (defaults to current user)"),
    json_output: bool = typer.Option(False, "--json", help="Print the raw payload"),
) -> None:
    """List a user's repositories."""

    def _run() -> None:
        with ForgeClient() as client:
            target = username
            if not target:
                me = as_dict(require(client.get("/api/users/me")))
                target = str(me.get("username"))
            payload = require(client.get(f"/api/repositories/user/{target}"))

        repositories = as_records(payload, "repos")
        if json_output:
            print_json(repositories)
            return

        if not repositories:
            console.print(f"[yellow]No repositories found for @{esc(target)}[/yellow]")
            return

        console.print(f"[bold]@{esc(target)}'s Repositories ({len(repositories)})[/bold]")
        console.print()
        for repo in repositories:
            icon = "🔒" if repo.get("visibility") == "private" else "🌐"
            console.print(f"{icon} [cyan]{esc(repo.get('name'))}[/cyan]")
            if repo.get("description"):
                console.print(dim(f"   {repo['description']}"))

    run_or_exit(_run)


__all__ = ["app"]
