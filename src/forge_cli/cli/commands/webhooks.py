"""Repository webhook commands."""

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
    format_datetime,
    print_json,
    require,
    run_or_exit,
    success,
)
from forge_cli.repo_ref import RepoRef, parse_repo_arg

app = typer.Typer(help="Manage repository webhooks")

WEBHOOK_EVENTS: tuple[tuple[str, str], ...] = (
    ("issue.created", "New issue opened"),
    ("issue.updated", "Issue title or body changed"),
    ("issue.closed", "Issue closed"),
    ("issue.reopened", "Issue reopened"),
    ("issue.commented", "New comment on issue"),
    ("pr.created", "Pull request opened"),
    ("pr.updated", "PR title/body changed"),
    ("pr.merged", "PR merged"),
    ("pr.closed", "PR closed without merging"),
    ("pr.review_requested", "Review requested on PR"),
    ("pr.reviewed", "PR review submitted"),
    ("pr.commented", "New comment on PR"),
    ("push", "Commits pushed to branch"),
    ("repo.created", "Repository created"),
    ("repo.deleted", "Repository deleted"),
)

SIGNATURE_HEADER = "X-Forge-Signature"


def parse_events(value: str) -> list[str]:
    """Split a comma-separated ``--events`` value, dropping blanks."""
    return [event.strip() for event in value.split(",") if event.strip()]


def _webhooks_path(ref: RepoRef, webhook_id: Optional[str] = None) -> str:
    path = f"{ref.api_path}/webhooks"
    return f"{path}/{webhook_id}" if webhook_id else path


def _print_secret(secret: Any, heading: str) -> None:
    console.print(f"[bold yellow]⚠️  {heading}[/bold yellow]")
    console.print(f"[cyan]{esc(secret)}[/cyan]")
    console.print()


@app.command("list")
def list_webhooks(
    repo: str = typer.Option(..., "--repo", help="Repository (@owner/name)"),
    json_output: bool = typer.Option(False, "--json", help="Print the raw payload"),
) -> None:
    """List webhooks for a repository."""

    def _run() -> None:
        ref = parse_repo_arg(repo)
        with ForgeClient() as client:
            payload = require(client.get(_webhooks_path(ref)))

        webhooks = as_records(payload, "webhooks")
        if json_output:
            print_json(webhooks)
            return

        if not webhooks:
            console.print("[yellow]No webhooks found[/yellow]")
            return

        console.print(f"[bold]Webhooks ({len(webhooks)})[/bold]")
        console.print()
        for webhook in webhooks:
            icon = "🟢" if webhook.get("active") else "⚪"
            console.print(f"{icon} [cyan]{esc(webhook.get('name') or webhook.get('id'))}[/cyan]")
            console.print(dim(f"   URL: {webhook.get('url')}"))
            console.print(dim(f"   Events: {', '.join(map(str, webhook.get('events') or []))}"))
            if webhook.get("lastTriggeredAt"):
                console.print(dim(f"   Last triggered: {format_datetime(webhook['lastTriggeredAt'])}"))
            failures = webhook.get("failureCount")
            if isinstance(failures, int) and failures > 0:
                console.print(f"[yellow]   Failures: {failures}[/yellow]")
            console.print()

    run_or_exit(_run)


@app.command("view")
def view_webhook(
    repo: str = typer.Option(..., "--repo", help="Repository (@owner/name)"),
    webhook_id: str = typer.Option(..., "--id", help="Webhook ID"),
    json_output: bool = typer.Option(False, "--json", help="Print the raw payload"),
) -> None:
    """View webhook details."""

    def _run() -> None:
        ref = parse_repo_arg(repo)
        with ForgeClient() as client:
            webhook = as_dict(require(client.get(_webhooks_path(ref, webhook_id))))

        if json_output:
            print_json(webhook)
            return

        status = "🟢 Active" if webhook.get("active") else "⚪ Inactive"
        title = webhook.get("name") or f"Webhook {webhook.get('id')}"
        console.print(f"[bold]{esc(title)}[/bold]")
        console.print(dim(f"Status: {status}"))
        console.print()
        console.print(f"URL: [cyan]{esc(webhook.get('url'))}[/cyan]")
        console.print(f"Secret: {dim(webhook.get('secret'))}")
        console.print()
        console.print("[bold]Events:[/bold]")
        for event in webhook.get("events") or []:
            console.print(f"  • {esc(event)}")
        console.print()
        if webhook.get("description"):
            console.print(f"Description: {esc(webhook['description'])}")
        console.print(dim(f"Created: {format_datetime(webhook.get('createdAt'))}"))
        if webhook.get("lastTriggeredAt"):
            console.print(dim(f"Last triggered: {format_datetime(webhook['lastTriggeredAt'])}"))
        if webhook.get("lastSuccessAt"):
            console.print(f"[green]Last success: {format_datetime(webhook['lastSuccessAt'])}[/green]")
        if webhook.get("lastFailureAt"):
            console.print(f"[yellow]Last failure: {format_datetime(webhook['lastFailureAt'])}[/yellow]")

    run_or_exit(_run)


@app.command("create")
def create_webhook(
    repo: str = typer.Option(..., "--repo", help="Repository (@owner/name)"),
    url: str = typer.Option(..., "--url", help="Webhook URL to receive events"),
    events: str = typer.Option(..., "--events", help="Comma-separated list of events to listen for"),
    name: Optional[str] = typer.Option(None, "--name", help="Friendly name for the webhook"),
    description: Optional[str] = typer.Option(None, "--description", help="Description of the webhook"),
    inactive: bool = typer.Option(False, "--inactive", help="Create webhook as inactive"),
) -> None:
    """Create a new webhook."""

    def _run() -> None:
        ref = parse_repo_arg(repo)
        event_list = parse_events(events)
        if not event_list:
            fail("At least one event is required (see 'forge webhooks events')")

        body: dict[str, Any] = {"url": url, "events": event_list, "active": not inactive}
        if name is not None:
            body["webhookName"] = name
        if description is not None:
            body["description"] = description

        with ForgeClient() as client:
            webhook = as_dict(require(client.post(_webhooks_path(ref), body)))

        success("Webhook created successfully")
        console.print()
        console.print(f"ID: [cyan]{esc(webhook.get('id'))}[/cyan]")
        console.print(f"URL: {esc(webhook.get('url'))}")
        console.print(f"Events: {esc(', '.join(event_list))}")
        console.print()
        _print_secret(webhook.get("secretFull"), "Save this secret - it will only be shown once:")
        console.print(dim(f"Use this secret to verify webhook signatures ({SIGNATURE_HEADER} header)"))

    run_or_exit(_run)


@app.command("update")
def update_webhook(
    repo: str = typer.Option(..., "--repo", help="Repository (@owner/name)"),
    webhook_id: str = typer.Option(..., "--id", help="Webhook ID"),
    url: Optional[str] = typer.Option(None, "--url", help="New URL"),
    events: Optional[str] = typer.Option(None, "--events", help="New comma-separated list of events"),
    name: Optional[str] = typer.Option(None, "--name", help="New name"),
    description: Optional[str] = typer.Option(None, "--description", help="New description"),
    active: Optional[bool] = typer.Option(None, "--active/--inactive", help="Enable or disable the webhook"),
) -> None:
    """Update a webhook."""

    def _run() -> None:
        ref = parse_repo_arg(repo)
        updates: dict[str, Any] = {}
        if url:
            updates["url"] = url
        if events:
            updates["events"] = parse_events(events)
        if name is not None:
            updates["name"] = name
        if description is not None:
            updates["description"] = description
        if active is not None:
            updates["active"] = active

        if not updates:
            console.print("[yellow]No updates specified[/yellow]")
            return

        with ForgeClient() as client:
            require(client.patch(_webhooks_path(ref, webhook_id), updates))
        success("Webhook updated successfully")

    run_or_exit(_run)


@app.command("delete")
def delete_webhook(
    repo: str = typer.Option(..., "--repo", help="Repository (@owner/name)"),
    webhook_id: str = typer.Option(..., "--id", help="Webhook ID"),
) -> None:
    """Delete a webhook."""

    def _run() -> None:
        ref = parse_repo_arg(repo)
        with ForgeClient() as client:
            require(client.delete(_webhooks_path(ref, webhook_id)))
        success("Webhook deleted successfully")

    run_or_exit(_run)


@app.command("test")
def test_webhook(
    repo: str = typer.Option(..., "--repo", help="Repository (@owner/name)"),
    webhook_id: str = typer.Option(..., "--id", help="Webhook ID"),
) -> None:
    """Send a test ping to a webhook."""

    def _run() -> None:
        ref = parse_repo_arg(repo)
        console.print(dim("Sending test ping..."))
        with ForgeClient() as client:
            result = as_dict(require(client.post(f"{_webhooks_path(ref, webhook_id)}/test")))

        delivery = as_dict(result.get("delivery"))
        if result.get("success"):
            success("Webhook test successful")
            console.print(dim(f"  Status: {delivery.get('statusCode')}"))
            console.print(dim(f"  Duration: {delivery.get('duration')}ms"))
            return

        console.print("[red]✗ Webhook test failed[/red]")
        if delivery.get("statusCode"):
            console.print(dim(f"  Status: {delivery['statusCode']}"))
        if delivery.get("error"):
            console.print(dim(f"  Error: {delivery['error']}"))

    run_or_exit(_run)


@app.command("deliveries")
def list_deliveries(
    repo: str = typer.Option(..., "--repo", help="Repository (@owner/name)"),
    webhook_id: str = typer.Option(..., "--id", help="Webhook ID"),
    limit: int = typer.Option(20, "--limit", min=1, help="Number of deliveries to show"),
    json_output: bool = typer.Option(False, "--json", help="Print the raw payload"),
) -> None:
    """List recent webhook deliveries."""

    def _run() -> None:
        ref = parse_repo_arg(repo)
        with ForgeClient() as client:
            payload = require(
                client.get(f"{_webhooks_path(ref, webhook_id)}/deliveries", params={"limit": limit})
            )

        deliveries = as_records(payload, "deliveries")
        if json_output:
            print_json(deliveries)
            return

        if not deliveries:
            console.print("[yellow]No deliveries found[/yellow]")
            return

        console.print(f"[bold]Recent Deliveries ({len(deliveries)})[/bold]")
        console.print()
        for delivery in deliveries:
            if delivery.get("success"):
                console.print(f"[green]✓ {esc(delivery.get('event'))}[/green]")
            else:
                console.print(f"[red]✗ {esc(delivery.get('event'))}[/red]")
            console.print(dim(f"   {format_datetime(delivery.get('deliveredAt'))}"))
            if delivery.get("statusCode"):
                console.print(dim(f"   Status: {delivery['statusCode']} · {delivery.get('duration')}ms"))
            if delivery.get("error"):
                console.print(f"[yellow]   Error: {esc(delivery['error'])}[/yellow]")
            console.print()

    run_or_exit(_run)


@app.command("regenerate-secret")
def regenerate_secret(
    repo: str = typer.Option(..., "--repo", help="Repository (@owner/name)"),
    webhook_id: str = typer.Option(..., "--id", help="Webhook ID"),
) -> None:
    """Regenerate a webhook secret."""

    def _run() -> None:
        ref = parse_repo_arg(repo)
        with ForgeClient() as client:
            result = as_dict(
                require(client.post(f"{_webhooks_path(ref, webhook_id)}/regenerate-secret"))
            )

        success("Secret regenerated successfully")
        console.print()
        _print_secret(result.get("secretFull"), "Save this new secret - it will only be shown once:")
        console.print(dim("Update your webhook receiver to use this new secret"))

    run_or_exit(_run)


@app.command("events")
def list_events() -> None:
    """List available webhook event types."""
    console.print("[bold]Available Webhook Events[/bold]")
    console.print()
    for event, description in WEBHOOK_EVENTS:
        console.print(f"  [cyan]{event:<22}[/cyan] {dim(description)}")
    console.print()
    console.print(dim("Use comma-separated list with --events flag:"))
    console.print(dim("  forge webhooks create --events issue.created,pr.created ..."))


__all__ = ["WEBHOOK_EVENTS", "app", "parse_events"]
