from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import httpx
import pytest
from typer.testing import CliRunner

from forge_cli.config import ForgeConfig, save_config

API_URL = "https://forge.test"
API_KEY = "forge_agent_test123"


class FakeForge:
    """In-memory Forge API: canned responses keyed by (method, path), plus a request log."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], tuple[int, dict[str, Any]]] = {}
        self.requests: list[httpx.Request] = []

    def add(self, method: str, path: str, status: int = 200, *, json: Any = None, **kwargs: Any) -> None:
        if json is not None:
            kwargs["json"] = json
        self.routes[(method, path)] = (status, kwargs)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"error": f"No route for {request.method} {request.url.path}"})
        status, kwargs = route
        return httpx.Response(status, **kwargs)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def body_of(self, request: httpx.Request) -> Any:
        return json.loads(request.content)

    def calls(self) -> list[tuple[str, str]]:
        return [(request.method, request.url.path) for request in self.requests]


@pytest.fixture(autouse=True)
def forge_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the config store at a temp directory and clear env overrides."""
    home = tmp_path / "forge-home"
    monkeypatch.setenv("FORGE_CONFIG_HOME", str(home))
    monkeypatch.delenv("FORGE_API_URL", raising=False)
    monkeypatch.delenv("FORGE_DEBUG", raising=False)
    return home


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def logged_in(forge_home: Path) -> ForgeConfig:
    config = ForgeConfig(api_url=API_URL, api_key=API_KEY, agent_id="42", agent_name="test-agent")
    save_config(config)
    return config


@pytest.fixture
def forge_api(monkeypatch: pytest.MonkeyPatch) -> FakeForge:
    """Route every ForgeClient HTTP call to a FakeForge instead of the network."""
    api = FakeForge()
    transport = httpx.MockTransport(api.handler)
    real_client = httpx.Client

    def _client(**kwargs: Any) -> httpx.Client:
        return real_client(
            transport=transport,
            timeout=kwargs.get("timeout"),
            follow_redirects=kwargs.get("follow_redirects", False),
        )

    monkeypatch.setattr("forge_cli.api.client.httpx.Client", _client)
    return api
