"""Integration tests for webhook and template commands."""

from __future__ import annotations

import json

import pytest

from forge_cli import app as cli_app
from forge_cli.cli.commands.webhooks import WEBHOOK_EVENTS, parse_events

HOOKS_PATH = "/api/repositories/acme/widgets/webhooks"


class TestWebhooks:
    """Tests for 'forge webhooks' and its 'webhook' alias."""

    def test_parse_events(self):
        assert parse_events(" issue.created, pr.merged ,,push") == ["issue.created", "pr.merged", "push"]

    def test_create(self, runner, logged_in, forge_api):
        forge_api.add(
            "POST",
            HOOKS_PATH,
            201,
            json={"id": "wh-1", "url": "https://hooks.test/in", "secretFull": "whsec_abc"},
        )

        result = runner.invoke(
            cli_app,
            [
                "webhooks",
                "create",
                "--repo",
                "@acme/widgets",
                "--url",
                "https://hooks.test/in",
                "--events",
                "issue.created, pr.merged",
                "--name",
                "CI",
            ],
        )

        assert result.exit_code == 0, result.output
        assert forge_api.body_of(forge_api.last) == {
            "url": "https://hooks.test/in",
            "events": ["issue.created", "pr.merged"],
            "active": True,
            "webhookName": "CI",
        }
        assert "whsec_abc" in result.output
        assert "X-Forge-Signature" in result.output

    def test_create_inactive(self, runner, logged_in, forge_api):
        forge_api.add("POST", HOOKS_PATH, 201, json={"id": "wh-1"})

        runner.invoke(
            cli_app,
            ["webhook", "create", "--repo", "acme/widgets", "--url", "https://h.test", "--events", "push", "--inactive"],
        )

        assert forge_api.body_of(forge_api.last)["active"] is False

    def test_list(self, runner, logged_in, forge_api):
        forge_api.add(
            "GET",
            HOOKS_PATH,
            json={
                "webhooks": [
                    {
                        "id": "wh-1",
                        "name": "CI",
                        "active": True,
                        "url": "https://hooks.test/in",
                        "events": ["push"],
                        "failureCount": 2,
                    }
                ]
            },
        )

        result = runner.invoke(cli_app, ["webhooks", "list", "--repo", "@acme/widgets"])

        assert result.exit_code == 0, result.output
        assert "🟢 CI" in result.output
        assert "Events: push" in result.output
        assert "Failures: 2" in result.output

    def test_view(self, runner, logged_in, forge_api):
        forge_api.add(
            "GET",
            f"{HOOKS_PATH}/wh-1",
            json={
                "id": "wh-1",
                "name": "CI [prod]",
                "active": False,
                "url": "https://hooks.test/in",
                "secret": "whsec_****",
                "events": ["push", "pr.merged"],
                "description": "Build trigger",
            },
        )

        result = runner.invoke(cli_app, ["webhooks", "view", "--repo", "@acme/widgets", "--id", "wh-1"])

        assert result.exit_code == 0, result.output
        assert forge_api.calls() == [("GET", f"{HOOKS_PATH}/wh-1")]
        assert "CI [prod]" in result.output
        assert "Status: ⚪ Inactive" in result.output
        assert "URL: https://hooks.test/in" in result.output
        assert "• pr.merged" in result.output
        assert "Description: Build trigger" in result.output

    def test_view_not_found(self, runner, logged_in, forge_api):
        forge_api.add("GET", f"{HOOKS_PATH}/nope", 404, json={"error": "Webhook not found"})

        result = runner.invoke(cli_app, ["webhook", "view", "--repo", "@acme/widgets", "--id", "nope"])

        assert result.exit_code == 1
        assert "Error: Webhook not found" in result.output

    def test_update_toggle(self, runner, logged_in, forge_api):
        forge_api.add("PATCH", f"{HOOKS_PATH}/wh-1", json={"id": "wh-1"})

        result = runner.invoke(
            cli_app, ["webhooks", "update", "--repo", "@acme/widgets", "--id", "wh-1", "--inactive"]
        )

        assert result.exit_code == 0, result.output
        assert forge_api.body_of(forge_api.last) == {"active": False}

    def test_update_without_changes(self, runner, logged_in, forge_api):
        result = runner.invoke(cli_app, ["webhooks", "update", "--repo", "@acme/widgets", "--id", "wh-1"])

        assert result.exit_code == 0
        assert "No updates specified" in result.output
        assert forge_api.requests == []

    def test_delete(self, runner, logged_in, forge_api):
        forge_api.add("DELETE", f"{HOOKS_PATH}/wh-1", 204)

        result = runner.invoke(cli_app, ["webhooks", "delete", "--repo", "@acme/widgets", "--id", "wh-1"])

        assert result.exit_code == 0
        assert "Webhook deleted successfully" in result.output

    @pytest.mark.parametrize(
        ("payload", "expected"),
        [
            ({"success": True, "delivery": {"statusCode": 200, "duration": 41}}, "Duration: 41ms"),
            ({"success": False, "delivery": {"error": "connection refused"}}, "Error: connection refused"),
        ],
    )
    def test_ping(self, runner, logged_in, forge_api, payload, expected):
        forge_api.add("POST", f"{HOOKS_PATH}/wh-1/test", json=payload)

        result = runner.invoke(cli_app, ["webhooks", "test", "--repo", "@acme/widgets", "--id", "wh-1"])

        assert result.exit_code == 0, result.output
        assert forge_api.calls() == [("POST", f"{HOOKS_PATH}/wh-1/test")]
        assert forge_api.last.content == b""
        assert expected in result.output

    def test_deliveries(self, runner, logged_in, forge_api):
        forge_api.add(
            "GET",
            f"{HOOKS_PATH}/wh-1/deliveries",
            json={"deliveries": [{"event": "push", "success": True, "statusCode": 200, "duration": 12}]},
        )

        result = runner.invoke(
            cli_app, ["webhooks", "deliveries", "--repo", "@acme/widgets", "--id", "wh-1", "--limit", "5"]
        )

        assert result.exit_code == 0, result.output
        assert forge_api.last.url.params["limit"] == "5"
        assert "✓ push" in result.output
        assert "Status: 200 · 12ms" in result.output

    def test_regenerate_secret(self, runner, logged_in, forge_api):
        forge_api.add("POST", f"{HOOKS_PATH}/wh-1/regenerate-secret", json={"secretFull": "whsec_new"})

        result = runner.invoke(
            cli_app, ["webhooks", "regenerate-secret", "--repo", "@acme/widgets", "--id", "wh-1"]
        )

        assert result.exit_code == 0, result.output
        assert forge_api.last.content == b""
        assert "whsec_new" in result.output
        assert "Secret regenerated successfully" in result.output

    def test_events_needs_no_login(self, runner, forge_api):
        result = runner.invoke(cli_app, ["webhooks", "events"])

        assert result.exit_code == 0
        assert len(WEBHOOK_EVENTS) == 15
        for event, _ in WEBHOOK_EVENTS:
            assert event in result.output
        assert forge_api.requests == []


class TestTemplates:
    """Tests for 'forge templates'."""

    def test_list_groups_by_org_type(self, runner):
        result = runner.invoke(cli_app, ["templates", "list"])

        assert result.exit_code == 0, result.output
        assert "Available Repository Templates" in result.output
        assert "🏥 Healthcare" in result.output
        assert result.output.count("code-repository") == 1

    def test_list_filtered(self, runner):
        result = runner.invoke(cli_app, ["templates", "list", "--org-type", "education"])

        assert result.exit_code == 0
        assert "🎓 Education Templates" in result.output
        assert "course-materials" in result.output
        assert "patient-record" not in result.output

    def test_list_invalid_org_type(self, runner):
        result = runner.invoke(cli_app, ["templates", "list", "--org-type", "spaceship"])

        assert result.exit_code == 1
        assert 'Invalid org type "spaceship"' in result.output
        assert "Available types: healthcare, research, company, education, nonprofit" in result.output

    def test_list_json(self, runner):
        result = runner.invoke(cli_app, ["templates", "list", "--json"])

        assert result.exit_code == 0
        assert len(json.loads(result.output)) == 11

    def test_view(self, runner):
        result = runner.invoke(cli_app, ["templates", "view", "patient-record"])

        assert result.exit_code == 0, result.output
        assert "Patient Record" in result.output
        assert "patient-{name}" in result.output
        assert '"fhirVersion": "R4"' in result.output
        assert "forge repos create --name patient-john-doe --template patient-record" in result.output

    def test_view_unknown(self, runner):
        result = runner.invoke(cli_app, ["templates", "view", "nope"])

        assert result.exit_code == 1
        assert 'Template "nope" not found' in result.output


class TestRootApp:
    def test_version(self, runner):
        result = runner.invoke(cli_app, ["--version"])

        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_hidden_aliases_not_in_help(self, runner):
        result = runner.invoke(cli_app, ["--help"])

        assert result.exit_code == 0
        for group in ("auth", "repos", "issues", "prs", "orgs", "user", "webhooks", "templates"):
            assert group in result.output
        assert " pr " not in result.output
