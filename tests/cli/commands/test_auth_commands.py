"""Integration tests for auth CLI commands."""

from __future__ import annotations

from forge_cli import app as cli_app
from forge_cli.config import ForgeConfig, load_config, save_config

API_URL = "https://forge.test"
API_KEY = "forge_agent_test123"

AGENT_USER = {
    "id": "agent-1",
    "username": "builder-agent",
    "userType": "agent",
    "agentProfile": {"displayName": "Builder", "emoji": "🤖"},
}


class TestAuthLogin:
    """Tests for 'forge auth login'."""

    def test_login_success_persists_credentials(self, runner, forge_api):
        forge_api.add("GET", "/api/users/me", json=AGENT_USER)

        result = runner.invoke(cli_app, ["auth", "login", "--token", API_KEY, "--api-url", API_URL])

        assert result.exit_code == 0, result.output
        assert "Successfully logged in" in result.output
        assert "@builder-agent (Builder)" in result.output
        assert forge_api.last.headers["Authorization"] == f"Bearer {API_KEY}"
        assert load_config() == ForgeConfig(
            api_url=API_URL, api_key=API_KEY, agent_id="agent-1", agent_name="builder-agent"
        )

    def test_login_prints_markup_in_username_literally(self, runner, forge_api):
        user = {**AGENT_USER, "username": "bot[red]", "agentProfile": {"displayName": "[b]Builder"}}
        forge_api.add("GET", "/api/users/me", json=user)

        result = runner.invoke(cli_app, ["auth", "login", "--token", API_KEY, "--api-url", API_URL])

        assert result.exit_code == 0, result.output
        assert "Agent: @bot[red] ([b]Builder)" in result.output

    def test_login_rejects_bad_prefix_without_network(self, runner, forge_api):
        result = runner.invoke(cli_app, ["auth", "login", "--token", "ghp_nope"])

        assert result.exit_code == 1
        assert "API key must start with 'forge_agent_'" in result.output
        assert forge_api.requests == []

    def test_login_failed_verification_saves_nothing(self, runner, forge_api):
        forge_api.add("GET", "/api/users/me", 401, json={"error": "Invalid API key"})

        result = runner.invoke(cli_app, ["auth", "login", "--token", API_KEY, "--api-url", API_URL])

        assert result.exit_code == 1
        assert "Failed to verify API key - Invalid API key" in result.output
        assert not load_config().is_authenticated

    def test_login_rejects_human_accounts(self, runner, forge_api):
        forge_api.add("GET", "/api/users/me", json={**AGENT_USER, "userType": "human"})

        result = runner.invoke(cli_app, ["auth", "login", "--token", API_KEY, "--api-url", API_URL])

        assert result.exit_code == 1
        assert "API key is not for an agent user" in result.output
        assert not load_config().is_authenticated


class TestAuthLogout:
    def test_logout_clears_key(self, runner, logged_in):
        result = runner.invoke(cli_app, ["auth", "logout"])

        assert result.exit_code == 0
        assert "Successfully logged out" in result.output
        assert load_config().api_key is None


class TestAuthWhoami:
    def test_whoami_not_logged_in(self, runner, forge_api):
        result = runner.invoke(cli_app, ["auth", "whoami"])

        assert result.exit_code == 1
        assert "Not logged in" in result.output
        assert forge_api.requests == []

    def test_whoami_shows_agent(self, runner, logged_in, forge_api):
        forge_api.add("GET", "/api/users/me", json=AGENT_USER)

        result = runner.invoke(cli_app, ["auth", "whoami"])

        assert result.exit_code == 0, result.output
        assert "@builder-agent" in result.output
        assert "Name: Builder" in result.output
        assert f"API URL: {API_URL}" in result.output

    def test_whoami_prints_markup_in_username_literally(self, runner, logged_in, forge_api):
        forge_api.add("GET", "/api/users/me", json={**AGENT_USER, "username": "bot[bold]x[/bold]"})

        result = runner.invoke(cli_app, ["auth", "whoami"])

        assert result.exit_code == 0, result.output
        assert "@bot[bold]x[/bold]" in result.output

    def test_whoami_json(self, runner, logged_in, forge_api):
        forge_api.add("GET", "/api/users/me", json=AGENT_USER)

        result = runner.invoke(cli_app, ["auth", "whoami", "--json"])

        assert result.exit_code == 0
        assert '"username": "builder-agent"' in result.output

    def test_whoami_server_error(self, runner, logged_in, forge_api):
        forge_api.add("GET", "/api/users/me", 500, text="<html></html>", headers={"content-type": "text/html"})

        result = runner.invoke(cli_app, ["auth", "whoami"])

        assert result.exit_code == 1
        assert "Error: HTTP 500: Internal Server Error" in result.output


class TestAuthConfig:
    def test_config_shows_state(self, runner, logged_in, forge_home):
        result = runner.invoke(cli_app, ["auth", "config"])

        assert result.exit_code == 0
        assert "Authenticated: Yes" in result.output
        assert "Agent: @test-agent" in result.output
        assert "config.toml" in result.output

    def test_config_reports_corrupt_file(self, runner, forge_home):
        forge_home.mkdir(parents=True)
        (forge_home / "config.toml").write_text("api_url = [", encoding="utf-8")

        result = runner.invoke(cli_app, ["auth", "config"])

        assert result.exit_code == 1
        assert "Failed to read config" in result.output


class TestAuthSignup:
    SIGNUP_ARGS = [
        "auth",
        "signup",
        "--username",
        "ada",
        "--email",
        "ada@example.com",
        "--name",
        "Ada Lovelace",
        "--password",
        "hunter22",
        "--api-url",
        API_URL,
    ]

    def test_signup_saves_agent_key(self, runner, forge_api):
        forge_api.add(
            "POST",
            "/api/agents/signup",
            201,
            json={
                "user": {"username": "ada", "email": "ada@example.com", "humanVerified": False},
                "agent": {"id": "a-1", "username": "ada-agent", "name": "ada's Agent", "apiKey": "forge_agent_new"},
            },
        )

        result = runner.invoke(cli_app, self.SIGNUP_ARGS)

        assert result.exit_code == 0, result.output
        body = forge_api.body_of(forge_api.last)
        assert body == {
            "username": "ada",
            "userEmail": "ada@example.com",
            "userName": "Ada Lovelace",
            "userPassword": "hunter22",
            "agentUsername": "ada-agent",
            "agentName": "ada's Agent",
        }
        assert "Authorization" not in forge_api.last.headers
        assert "forge_agent_new" in result.output
        assert load_config() == ForgeConfig(
            api_url=API_URL, api_key="forge_agent_new", agent_id="a-1", agent_name="ada-agent"
        )

    def test_signup_rejects_invalid_username(self, runner, forge_api):
        args = list(self.SIGNUP_ARGS)
        args[args.index("ada")] = "ada lovelace"

        result = runner.invoke(cli_app, args)

        assert result.exit_code == 1
        assert "Username can only contain" in result.output
        assert forge_api.requests == []

    def test_signup_failure_keeps_existing_config(self, runner, forge_api):
        existing = ForgeConfig(api_url=API_URL, api_key="forge_agent_old")
        save_config(existing)
        forge_api.add("POST", "/api/agents/signup", 409, json={"error": "Username already taken"})

        result = runner.invoke(cli_app, self.SIGNUP_ARGS)

        assert result.exit_code == 1
        assert "Error: Username already taken" in result.output
        assert load_config() == existing
