"""Repository template commands (local registry, no network)."""

from __future__ import annotations

import json
from typing import Optional

import typer

from forge_cli.cli.helpers import console, dim, esc, print_json
from forge_cli.templates import (
    SELECTABLE_ORG_TYPES,
    RepoTemplate,
    all_templates,
    get_template,
    group_by_org_type,
    parse_org_type,
    templates_for_org_type,
)

app = typer.Typer(help="Manage repository templates")

_ID_WIDTH = 25
_LABEL_WIDTH = 13


def _template_record(template: RepoTemplate) -> dict[str, object]:
    return {
        "id": template.id,
        "name": template.name,
        "description": template.description,
        "icon": template.icon,
        "orgType": template.org_type.value,
        "metadata": template.metadata,
        "namingPattern": template.naming_pattern,
        "namingExample": template.naming_example,
        "initialFiles": [{"path": f.path, "content": f.content} for f in template.initial_files],
    }


def _print_entries(templates: list[RepoTemplate], indent: str = "") -> None:
    for template in templates:
        console.print(f"{indent}[cyan]{template.id:<{_ID_WIDTH}}[/cyan] {dim(template.name)}")
        console.print(f"{indent}{' ' * _ID_WIDTH} {dim(template.description)}")


@app.command("list")
def list_templates(
    org_type: Optional[str] = typer.Option(
        None,
        "--org-type",
        help="Filter by organization type (healthcare, research, company, education, nonprofit)",
    ),
    json_output: bool = typer.Option(False, "--json", help="Print the templates as JSON"),
) -> None:
    """List available repository templates."""
    selected = None
    if org_type:
        try:
            selected = parse_org_type(org_type)
        except ValueError as exc:
            console.print(f"[red]Error: {esc(exc)}[/red]")
            console.print()
            available = ", ".join(t.value for t in SELECTABLE_ORG_TYPES)
            console.print(dim(f"Available types: {available}"))
            raise typer.Exit(1) from None

    templates = templates_for_org_type(selected) if selected else all_templates()

    if json_output:
        print_json([_template_record(t) for t in templates])
        return

    if selected:
        console.print(f"[bold]{selected.icon} {selected.label} Templates[/bold]")
    else:
        console.print("[bold]Available Repository Templates[/bold]")
    console.print()

    if not templates:
        console.print("[yellow]No templates found[/yellow]")
        return

    if selected:
        _print_entries(templates)
    else:
        for group_type, group in group_by_org_type(templates).items():
            console.print(f"[bold]{group_type.icon} {group_type.label}[/bold]")
            _print_entries(group, indent="  ")
            console.print()

    console.print(dim("Use 'forge templates view <id>' to see details"))


@app.command("view")
def view_template(
    template_id: str = typer.Argument(..., metavar="ID", help="Template ID"),
    json_output: bool = typer.Option(False, "--json", help="Print the template as JSON"),
) -> None:
    """View template details."""
    template = get_template(template_id)
    if template is None:
        console.print(f'[red]Error: Template "{esc(template_id)}" not found[/red]')
        console.print()
        console.print(dim("Use 'forge templates list' to see available templates"))
        raise typer.Exit(1)

    if json_output:
        print_json(_template_record(template))
        return

    def row(label: str, value: str) -> None:
        padded = label.ljust(_LABEL_WIDTH)
        console.print(f"{dim(padded)}{value}")

    console.print(f"[bold]{template.name}[/bold]")
    console.print()
    row("ID:", f"[cyan]{template.id}[/cyan]")
    row("Type:", f"{template.org_type.icon} {template.org_type.value}")
    row("Description:", template.description)
    console.print()

    console.print("[bold]Naming Pattern[/bold]")
    console.print(f"{dim('  Pattern:  ')}{template.naming_pattern}")
    console.print(f"{dim('  Example:  ')}[cyan]{template.naming_example}[/cyan]")
    console.print()

    if template.metadata:
        console.print("[bold]Metadata[/bold]")
        if template.repo_type:
            console.print(f"{dim('  Repo Type: ')}{template.repo_type}")
        if template.tags:
            console.print(f"{dim('  Tags:      ')}{', '.join(template.tags)}")
        domain_data = template.metadata.get("domainData")
        if domain_data:
            rendered = json.dumps(domain_data, indent=2).replace("\n", "\n" + " " * _LABEL_WIDTH)
            console.print(dim("  Domain:    "), end="")
            console.print(rendered, markup=False)
        console.print()

    console.print("[bold]Usage[/bold]")
    console.print(
        f"{dim('  forge repos create --name ')}[cyan]{template.naming_example}[/cyan]"
        f"{dim(' --template ')}[cyan]{template.id}[/cyan]"
    )


__all__ = ["app"]
