"""Command groups for the forge CLI."""

from __future__ import annotations

import typer

from . import auth, issues, orgs, prs, repos, templates, user, webhooks

# (group, name, hidden aliases)
_GROUPS = (
    (auth.app, "auth", ()),
    (repos.app, "repos", ()),
    (issues.app, "issues", ()),
    (prs.app, "prs", ("pr",)),
    (orgs.app, "orgs", ("org",)),
    (user.app, "user", ()),
    (webhooks.app, "webhooks", ("webhook",)),
    (templates.app, "templates", ()),
)


def register_commands(app: typer.Typer) -> None:
    """Attach every command group (and its aliases) to the root app."""
    for group, name, aliases in _GROUPS:
        app.add_typer(group, name=name)
        for alias in aliases:
            app.add_typer(group, name=alias, hidden=True)


__all__ = ["register_commands"]
