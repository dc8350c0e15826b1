"""Exception hierarchy shared by the config store, API client and CLI."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from forge_cli.api.models import RequestFailure


class ForgeError(RuntimeError):
    """Base class for every error the CLI reports to the user."""


class ConfigError(ForgeError):
    """Raised when the config file cannot be read, parsed or written."""


class InvalidRepoReference(ForgeError, ValueError):
    """Raised when a repository argument is not in @owner/name form."""


class ForgeAPIError(ForgeError):
    """Raised by ``Outcome.unwrap()`` for a failed request."""

    def __init__(self, failure: RequestFailure) -> None:
        super().__init__(failure.message)
        self.failure = failure

    @property
    def status_code(self) -> int | None:
        return self.failure.status_code

    @property
    def body(self) -> Any:
        return self.failure.body
