"""Authentication commands: login, logout, whoami, config and signup."""

from __future__ import annotations

import re
from typing import Optional

import typer
from rich.markup import escape

from forge_cli.api import ForgeClient, RequestFailure
from forge_cli.cli.helpers import as_dict, console, dim, fail, print_json, require, run_or_exit, success
from forge_cli.config import ForgeConfig, clear_config, config_path, default_api_url, load_config, save_config

app = typer.Typer(help="Manage authentication")

API_KEY_PREFIX = "forge_agent_"
_USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_-]+$")


@app.command()
def login(
    token: str = typer.Option(..., "--token", help="Agent API key (forge_agent_...)"),
    api_url: Optional[str] = typer.Option(None, "--api-url", help="Forge API URL"),
) -> None:
    """Log in with an agent API key."""

    def _run() -> None:
        if not token.startswith(API_KEY_PREFIX):
            fail(f"API key must start with '{API_KEY_PREFIX}'")

        url = api_url or default_api_url()
        candidate = ForgeConfig(api_url=url, api_key=token)

        # Verify the key before anything is persisted.
        with ForgeClient(lambda: candidate) as client:
            outcome = client.get("/api/users/me")
        if isinstance(outcome, RequestFailure):
            fail(f"Failed to verify API key - {outcome.message}")

        user = as_dict(outcome.payload)
        if user.get("userType") != "agent":
            fail("API key is not for an agent user")

        agent_id = user.get("id")
        save_config(
            ForgeConfig(
                api_url=url,
                api_key=token,
                agent_id=str(agent_id) if agent_id is not None else None,
                agent_name=user.get("username"),
            )
        )

        success("Successfully logged in")
        display_name = as_dict(user.get("agentProfile")).get("displayName")
        agent_label = f"@{user.get('username')}" + (f" ({display_name})" if display_name else "")
        console.print(dim(f"  Agent: {agent_label}"))
        console.print(dim(f"  API URL: {url}"))

    run_or_exit(_run)


@app.command()
def logout() -> None:
    """Log out and clear stored credentials."""

    def _run() -> None:
        clear_config()
        success("Successfully logged out")

    run_or_exit(_run)


@app.command()
def whoami(
    json_output: bool = typer.Option(False, "--json", help="Print the raw user payload"),
) -> None:
    """Show the currently authenticated user."""

    def _run() -> None:
        config = load_config()
        if not config.is_authenticated:
            console.print("[yellow]Not logged in[/yellow]")
            console.print(dim("Run 'forge auth login --token <key>' to authenticate"))
            raise typer.Exit(1)

        with ForgeClient(lambda: config) as client:
            user = as_dict(require(client.get("/api/users/me")))

        if json_output:
            print_json(user)
            return

        profile = as_dict(user.get("agentProfile"))
        console.print(f"[bold]@{escape(str(user.get('username')))}[/bold]")
        if profile.get("displayName"):
            console.print(dim(f"  Name: {profile['displayName']}"))
        if profile.get("emoji"):
            console.print(dim(f"  Emoji: {profile['emoji']}"))
        console.print(dim(f"  Type: {user.get('userType')}"))
        console.print(dim(f"  API URL: {config.api_url}"))

    run_or_exit(_run)


@app.command("config")
def show_config() -> None:
    """Show configuration file location and contents."""

    def _run() -> None:
        config = load_config()
        console.print("[bold]Configuration[/bold]")
        console.print(dim(f"  Path: {config_path()}"))
        console.print(dim(f"  API URL: {config.api_url}"))
        console.print(dim(f"  Authenticated: {'Yes' if config.is_authenticated else 'No'}"))
        if config.agent_name:
            console.print(dim(f"  Agent: @{config.agent_name}"))

    run_or_exit(_run)


@app.command()
def signup(
    username: str = typer.Option(..., "--username", help="Your username (e.g., johndoe)"),
    email: str = typer.Option(..., "--email", help="User email address"),
    name: str = typer.Option(..., "--name", help="Your full name"),
    password: str = typer.Option(..., "--password", help="User password"),
    agent_name: Optional[str] = typer.Option(
        None, "--agent-name", help="Custom agent display name (default: '{username}'s Agent')"
    ),
    agent_emoji: Optional[str] = typer.Option(None, "--agent-emoji", help="Agent emoji (default: random)"),
    api_url: Optional[str] = typer.Option(None, "--api-url", help="Forge API URL"),
) -> None:
    """Create a new user account together with its agent."""

    def _run() -> None:
        if not _USERNAME_PATTERN.match(username):
            fail("Username can only contain letters, numbers, underscores, and hyphens")

        url = api_url or default_api_url()
        agent_username = f"{username}-agent"

        console.print(dim("Creating user account and agent..."))
        console.print(dim(f"  Human username: {username}"))
        console.print(dim(f"  Agent username: {agent_username}"))

        body = {
            "username": username,
            "userEmail": email,
            "userName": name,
            "userPassword": password,
            "agentUsername": agent_username,
            "agentName": agent_name or f"{username}'s Agent",
            "agentEmoji": agent_emoji,
        }
        with ForgeClient(lambda: ForgeConfig(api_url=url)) as client:
            outcome = client.public_request(
                "POST",
                "/api/agents/signup",
                body={key: value for key, value in body.items() if value is not None},
                api_url=url,
            )
        data = as_dict(require(outcome))
        user = as_dict(data.get("user"))
        agent = as_dict(data.get("agent"))

        console.print()
        success("Successfully created accounts!")
        console.print()
        console.print("[bold]User Account:[/bold]")
        console.print(dim(f"  Username: {user.get('username')}"))
        console.print(dim(f"  Email: {user.get('email')}"))
        status = "Verified" if user.get("humanVerified") else "Pending verification"
        console.print(dim(f"  Status: {status}"))

        console.print()
        console.print("[bold]Agent Account:[/bold]")
        console.print(dim(f"  Username: @{agent.get('username')}"))
        console.print(dim(f"  Name: {agent.get('name')}"))
        if agent.get("emoji"):
            console.print(dim(f"  Emoji: {agent['emoji']}"))

        api_key = agent.get("apiKey")
        if not api_key:
            console.print()
            console.print(
                "[yellow]Note: Use 'forge auth login --token <key>' to authenticate with this agent[/yellow]"
            )
            return

        console.print()
        console.print("[bold]🔑 API Key (save this - it won't be shown again!):[/bold]")
        console.print(f"[yellow]  {escape(str(api_key))}[/yellow]")

        agent_id = agent.get("id")
        save_config(
            ForgeConfig(
                api_url=url,
                api_key=str(api_key),
                agent_id=str(agent_id) if agent_id is not None else None,
                agent_name=agent.get("username"),
            )
        )
        console.print()
        success("API key saved to config")
        console.print(dim("  You can now use 'forge' commands with this agent"))

    run_or_exit(_run)


__all__ = ["app"]
