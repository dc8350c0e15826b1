"""Parsing for ``@owner/name`` repository arguments."""

from __future__ import annotations

import re
from dataclasses import dataclass

from forge_cli.errors import InvalidRepoReference

_REPO_PATTERN = re.compile(r"^@?([^/]+)/(.+)$")


@dataclass(frozen=True, slots=True)
class RepoRef:
    owner: str
    name: str

    @property
    def api_path(self) -> str:
        return f"/api/repositories/{self.owner}/{self.name}"

    def __str__(self) -> str:
        return f"@{self.owner}/{self.name}"


def parse_repo_arg(arg: str) -> RepoRef:
    """Parse ``@owner/name`` or ``owner/name`` into a RepoRef."""
    match = _REPO_PATTERN.match(arg)
    if not match:
        raise InvalidRepoReference(
            f"Invalid repository format: {arg}. Expected format: @owner/name or owner/name"
        )
    return RepoRef(owner=match.group(1), name=match.group(2))
