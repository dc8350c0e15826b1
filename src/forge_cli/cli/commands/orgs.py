"""Organization and team commands."""

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

app = typer.Typer(help="Manage organizations")

MEMBER_ROLES = ("owner", "admin", "member")
_ROLE_ICONS = {"owner": "👑", "admin": "⚡"}


def _org_path(slug: str) -> str:
    return f"/api/organizations/{slug}"


def _org_description(org: dict[str, Any]) -> Optional[str]:
    return as_dict(org.get("metadata")).get("description")


@app.command("list")
def list_orgs(
    member: bool = typer.Option(False, "--member", help="Show only organizations you're a member of"),
    json_output: bool = typer.Option(False, "--json", help="Print the raw payload"),
) -> None:
    """List organizations."""

    def _run() -> None:
        with ForgeClient() as client:
            if member:
                user = as_dict(require(client.get("/api/users/me")))
                payload = require(client.get(f"/api/users/{user.get('id')}/organizations"))
                organizations = as_records(payload, "organizations")
            else:
                payload = require(client.get("/api/organizations"))
                organizations = as_records(payload)

        if json_output:
            print_json(organizations)
            return

        if not organizations:
            console.print("[yellow]No organizations found[/yellow]")
            return

        console.print(f"[bold]Organizations ({len(organizations)})[/bold]")
        console.print()
        for org in organizations:
            console.print(f"[cyan]@{esc(org.get('slug'))}[/cyan]")
            console.print(dim(f"  {org.get('name')}"))
            description = _org_description(org)
            if description:
                console.print(dim(f"  {description}"))

    run_or_exit(_run)


@app.command("view")
def view_org(
    slug: str = typer.Argument(..., help="Organization slug"),
    json_output: bool = typer.Option(False, "--json", help="Print the raw payload"),
) -> None:
    """View organization details."""

    def _run() -> None:
        with ForgeClient() as client:
            org = as_dict(require(client.get(_org_path(slug))))

        if json_output:
            print_json(org)
            return

        console.print(f"[bold]@{esc(org.get('slug'))}[/bold]")
        console.print(dim(org.get("name")))
        console.print()
        description = _org_description(org)
        if description:
            console.print(description, markup=False)
            console.print()
        console.print(dim(f"Created: {format_date(org.get('createdAt'))}"))

    run_or_exit(_run)


@app.command("create")
def create_org(
    name: str = typer.Option(..., "--name", help="Organization name"),
    slug: str = typer.Option(..., "--slug", help="Organization slug (URL identifier)"),
    description: Optional[str] = typer.Option(None, "--description", help="Organization description"),
) -> None:
    """Create a new organization."""

    def _run() -> None:
        body: dict[str, Any] = {"name": name, "slug": slug}
        if description:
            body["metadata"] = {"description": description}

        with ForgeClient() as client:
            org = as_dict(require(client.post("/api/organizations", body)))

        success("Organization created successfully")
        console.print(dim(f"  @{org.get('slug')}"))

    run_or_exit(_run)


@app.command("members")
def list_members(
    slug: str = typer.Argument(..., help="Organization slug"),
    json_output: bool = typer.Option(False, "--json", help="Print the raw payload"),
) -> None:
    """List organization members."""

    def _run() -> None:
        with ForgeClient() as client:
            payload = require(client.get(f"{_org_path(slug)}/members"))

        if json_output:
            print_json(payload)
            return

        members = as_records(payload)
        if not members:
            console.print("[yellow]No members found[/yellow]")
            return

        console.print(f"[bold]Members ({len(members)})[/bold]")
        console.print()
        for entry in members:
            role = entry.get("role")
            icon = _ROLE_ICONS.get(str(role), "•")
            console.print(f"{icon} [cyan]@{esc(username_of(entry.get('user')))}[/cyan] {dim(role)}")

    run_or_exit(_run)


@app.command("member-add")
def add_member(
    slug: str = typer.Argument(..., help="Organization slug"),
    username: str = typer.Argument(..., help="Username to add"),
    role: str = typer.Option("member", "--role", help="Member role (owner/admin/member)"),
) -> None:
    """Add a member to an organization."""

    def _run() -> None:
        if role not in MEMBER_ROLES:
            fail(f"Invalid role '{role}'. Expected one of: {', '.join(MEMBER_ROLES)}")

        with ForgeClient() as client:
            require(client.post(f"{_org_path(slug)}/members", {"username": username, "role": role}))
        success(f"Added @{username} to @{slug} as {role}")

    run_or_exit(_run)


@app.command("member-remove")
def remove_member(
    slug: str = typer.Argument(..., help="Organization slug"),
    username: str = typer.Argument(..., help="Username to remove"),
) -> None:
    """Remove a member from an organization."""

    def _run() -> None:
        with ForgeClient() as client:
            require(client.delete(f"{_org_path(slug)}/members/{username}"))
        success(f"Removed @{username} from @{slug}")

    run_or_exit(_run)


@app.command("teams")
def list_teams(
    slug: str = typer.Argument(..., help="Organization slug"),
    json_output: bool = typer.Option(False, "--json", help="Print the raw payload"),
) -> None:
    """List organization teams."""

    def _run() -> None:
        with ForgeClient() as client:
            payload = require(client.get(f"{_org_path(slug)}/teams"))

        if json_output:
            print_json(payload)
            return

        teams = as_records(payload)
        if not teams:
            console.print("[yellow]No teams found[/yellow]")
            return

        console.print(f"[bold]Teams ({len(teams)})[/bold]")
        console.print()
        for team in teams:
            console.print(f"[cyan]{esc(team.get('name'))}[/cyan]")
            if team.get("description"):
                console.print(dim(f"  {team['description']}"))

    run_or_exit(_run)


@app.command("team-create")
def create_team(
    slug: str = typer.Argument(..., help="Organization slug"),
    name: str = typer.Option(..., "--name", help="Team name"),
    description: Optional[str] = typer.Option(None, "--description", help="Team description"),
) -> None:
    """Create a team in an organization."""

    def _run() -> None:
        body: dict[str, Any] = {"name": name}
        if description is not None:
            body["description"] = description

        with ForgeClient() as client:
            team = as_dict(require(client.post(f"{_org_path(slug)}/teams", body)))
        success(f'Team "{team.get("name", name)}" created in @{slug}')

    run_or_exit(_run)


@app.command("team-members")
def list_team_members(
    slug: str = typer.Argument(..., help="Organization slug"),
    team: str = typer.Argument(..., help="Team name"),
    json_output: bool = typer.Option(False, "--json", help="Print the raw payload"),
) -> None:
    """List team members."""

    def _run() -> None:
        with ForgeClient() as client:
            payload = require(client.get(f"{_org_path(slug)}/teams/{team}/members"))

        if json_output:
            print_json(payload)
            return

        members = as_records(payload)
        if not members:
            console.print("[yellow]No team members found[/yellow]")
            return

        console.print(f"[bold]Team Members ({len(members)})[/bold]")
        console.print()
        for entry in members:
            console.print(f"[cyan]@{esc(username_of(entry.get('user')))}[/cyan]")

    run_or_exit(_run)


@app.command("team-add-member")
def add_team_member(
    slug: str = typer.Argument(..., help="Organization slug"),
    team: str = typer.Argument(..., help="Team name"),
    username: str = typer.Argument(..., help="Username to add"),
) -> None:
    """Add a member to a team."""

    def _run() -> None:
        with ForgeClient() as client:
            require(client.post(f"{_org_path(slug)}/teams/{team}/members", {"username": username}))
        success(f"Added @{username} to team {team}")

    run_or_exit(_run)


@app.command("team-remove-member")
def remove_team_member(
    slug: str = typer.Argument(..., help="Organization slug"),
    team: str = typer.Argument(..., help="Team name"),
    username: str = typer.Argument(..., help="Username to remove"),
) -> None:
    """Remove a member from a team."""

    def _run() -> None:
        with ForgeClient() as client:
            require(client.delete(f"{_org_path(slug)}/teams/{team}/members/{username}"))
        success(f"Removed @{username} from team {team}")

    run_or_exit(_run)


__all__ = ["MEMBER_ROLES", "app"]
