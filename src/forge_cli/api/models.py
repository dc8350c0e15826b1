"""Request and outcome types for the Forge API client."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Union

from forge_cli.errors import ForgeAPIError

HTTP_METHODS = ("GET", "POST", "PATCH", "DELETE")


class FailureKind(str, Enum):
    """Why a request did not produce a payload."""

    UNAUTHENTICATED = "unauthenticated"
    TRANSPORT = "transport"
    REMOTE = "remote"


@dataclass(frozen=True, slots=True)
class RequestDescriptor:
    """One outbound call, before it is executed."""

    method: str
    path: str
    body: Any = None
    headers: Mapping[str, str] | None = None
    params: Mapping[str, Any] | None = None

    def __post_init__(self) -> None:
        if self.method not in HTTP_METHODS:
            raise ValueError(f"Unsupported HTTP method: {self.method}")
        if not self.path.startswith("/"):
            raise ValueError(f"Endpoint path must be server-relative: {self.path}")


@dataclass(frozen=True, slots=True)
class Success:
    """A completed request and its decoded JSON payload (``None`` for empty bodies)."""

    payload: Any = None

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> Any:
        return self.payload


@dataclass(frozen=True, slots=True)
class RequestFailure:
    """A request that failed locally, in transit, or on the server."""

    message: str
    kind: FailureKind
    status_code: int | None = None
    body: Any = field(default=None, compare=False)

    @property
    def ok(self) -> bool:
        return False

    def unwrap(self) -> Any:
        raise ForgeAPIError(self)


Outcome = Union[Success, RequestFailure]
