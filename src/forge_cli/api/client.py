"""HTTP pipeline for the Forge REST API.

Every call goes through :meth:`ForgeClient.request`, which:

- refuses to touch the network when no API key is configured,
- injects ``Authorization: Bearer <key>`` and ``Content-Type: application/json``,
- follows redirects, and wraps transport errors (DNS, refused, timeout, TLS,
  malformed URL) as a failure outcome,
- classifies the response into :class:`Success` or :class:`RequestFailure`.

The client never raises for request failures and never prints; command
handlers decide how to render a failure and whether to exit.
"""

from __future__ import annotations

import json
import logging
import ssl
from typing import Any, Callable, Mapping, Optional

import httpx
import truststore

from forge_cli.api.models import FailureKind, Outcome, RequestDescriptor, RequestFailure, Success
from forge_cli.config import ForgeConfig, load_config

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0
NOT_AUTHENTICATED_MESSAGE = "Not authenticated. Run 'forge auth login --token <your-api-key>' first."

CredentialsProvider = Callable[[], ForgeConfig]


def _transport_failure(detail: str) -> RequestFailure:
    return RequestFailure(message=f"API request failed: {detail}", kind=FailureKind.TRANSPORT)


def _error_message(body: Any) -> Optional[str]:
    if not isinstance(body, dict):
        return None
    for key in ("error", "message"):
        value = body.get(key)
        if value:
            return value if isinstance(value, str) else str(value)
    return None


def classify_response(response: httpx.Response) -> Outcome:
    """Turn a completed HTTP exchange into an outcome."""
    if not response.is_success:
        generic = f"HTTP {response.status_code}: {response.reason_phrase}"
        try:
            body = response.json()
        except ValueError:
            return RequestFailure(
                message=generic,
                kind=FailureKind.REMOTE,
                status_code=response.status_code,
            )
        return RequestFailure(
            message=_error_message(body) or generic,
            kind=FailureKind.REMOTE,
            status_code=response.status_code,
            body=body,
        )

    content_type = response.headers.get("content-type", "")
    if "application/json" not in content_type:
        return Success(None)

    try:
        return Success(response.json())
    except ValueError as exc:
        return _transport_failure(f"invalid JSON in response ({exc})")


class ForgeClient:
    """Authenticated client for the Forge REST API."""

    def __init__(
        self,
        credentials: CredentialsProvider | None = None,
        *,
        transport: httpx.BaseTransport | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self._credentials_provider = credentials or load_config
        self._credentials: ForgeConfig | None = None
        self._transport = transport
        self._timeout = timeout
        self._http_client: httpx.Client | None = None

    @property
    def credentials(self) -> ForgeConfig:
        """Session credentials, loaded from the provider on first use."""
        if self._credentials is None:
            self._credentials = self._credentials_provider()
        return self._credentials

    def _get_http_client(self) -> httpx.Client:
        if self._http_client is None:
            if self._transport is not None:
                self._http_client = httpx.Client(
                    transport=self._transport, timeout=self._timeout, follow_redirects=True
                )
            else:
                ssl_context = truststore.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
                self._http_client = httpx.Client(
                    verify=ssl_context, timeout=self._timeout, follow_redirects=True
                )
        return self._http_client

    def close(self) -> None:
        if self._http_client is not None:
            self._http_client.close()
            self._http_client = None

    def __enter__(self) -> "ForgeClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.close()
        return False

    def request(
        self,
        method: str,
        path: str,
        *,
        body: Any = None,
        headers: Mapping[str, str] | None = None,
        params: Mapping[str, Any] | None = None,
    ) -> Outcome:
        """Send an authenticated request and classify the result.

        Args:
            method: One of GET, POST, PATCH, DELETE
            path: Server-relative endpoint path, e.g. ``/api/users/me``
            body: JSON-serializable value; ``None`` sends no body
            headers: Header overrides applied on top of the defaults
            params: Query string parameters

        Returns:
            ``Success`` with the decoded payload, or ``RequestFailure``
        """
        descriptor = RequestDescriptor(
            method=method.upper(), path=path, body=body, headers=headers, params=params
        )

        credentials = self.credentials
        if not credentials.api_key:
            logger.debug("Refusing %s %s: no API key configured", descriptor.method, path)
            return RequestFailure(message=NOT_AUTHENTICATED_MESSAGE, kind=FailureKind.UNAUTHENTICATED)

        return self._send(
            credentials.api_url,
            descriptor,
            {
                "Authorization": f"Bearer {credentials.api_key}",
                "Content-Type": "application/json",
            },
        )

    def public_request(
        self,
        method: str,
        path: str,
        *,
        body: Any = None,
        api_url: str | None = None,
    ) -> Outcome:
        """Send a request without credentials (account signup)."""
        descriptor = RequestDescriptor(method=method.upper(), path=path, body=body)
        base_url = api_url or self.credentials.api_url
        return self._send(base_url, descriptor, {"Content-Type": "application/json"})

    def _send(self, base_url: str, descriptor: RequestDescriptor, default_headers: dict[str, str]) -> Outcome:
        url = f"{base_url.rstrip('/')}{descriptor.path}"
        headers = httpx.Headers(default_headers)
        if descriptor.headers:
            headers.update(descriptor.headers)
        content = json.dumps(descriptor.body) if descriptor.body is not None else None

        logger.debug("%s %s", descriptor.method, url)
        try:
            response = self._get_http_client().request(
                descriptor.method,
                url,
                content=content,
                headers=headers,
                params=descriptor.params,
            )
        except (httpx.RequestError, httpx.InvalidURL) as exc:
            logger.debug("%s %s failed in transport: %r", descriptor.method, url, exc)
            return _transport_failure(str(exc) or exc.__class__.__name__)

        logger.debug("%s %s -> %s", descriptor.method, url, response.status_code)
        return classify_response(response)

    def get(self, path: str, params: Mapping[str, Any] | None = None) -> Outcome:
        return self.request("GET", path, params=params)

    def post(self, path: str, body: Any = None) -> Outcome:
        return self.request("POST", path, body=body)

    def patch(self, path: str, body: Any = None) -> Outcome:
        return self.request("PATCH", path, body=body)

    def delete(self, path: str) -> Outcome:
        return self.request("DELETE", path)
