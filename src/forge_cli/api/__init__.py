"""Forge REST API client.

Example::

    from forge_cli.api import ForgeClient, RequestFailure

    with ForgeClient() as client:
        outcome = client.get("/api/users/me")
        if isinstance(outcome, RequestFailure):
            ...
"""

from forge_cli.api.client import NOT_AUTHENTICATED_MESSAGE, ForgeClient, classify_response
from forge_cli.api.models import FailureKind, Outcome, RequestDescriptor, RequestFailure, Success

__all__ = [
    "NOT_AUTHENTICATED_MESSAGE",
    "FailureKind",
    "ForgeClient",
    "Outcome",
    "RequestDescriptor",
    "RequestFailure",
    "Success",
    "classify_response",
]
