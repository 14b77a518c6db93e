"""Tests for the CLI."""

from unittest.mock import AsyncMock, patch

import pytest
from click.testing import CliRunner

from cherry.cli import cli
from cherry.client import CherryClientError
from cherry.common.models import HealthCheckResponse, TodoistWebhookResponse
from cherry.common.settings import get_settings


@pytest.fixture(autouse=True)
def _fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def test_sign_reads_stdin(runner):
    result = runner.invoke(cli, ["sign", "--secret", "shhh"], input='{"a":1}', obj={})

    assert result.exit_code == 0
    assert result.output.strip() == (
        "X-Todoist-Hmac-SHA256: "
        "82a2822723ef5d74e78b2082b74ec3369cc9cf94e58ed4dc61f5c1e2887fd7c7"
    )


def test_sign_reads_file(runner, tmp_path):
    payload = tmp_path / "payload.json"
    payload.write_bytes(b'{"a":1}')

    result = runner.invoke(cli, ["sign", "--secret", "shhh", str(payload)], obj={})

    assert result.exit_code == 0
    assert result.output.strip().endswith("82a2822723ef5d74e78b2082b74ec3369cc9cf94e58ed4dc61f5c1e2887fd7c7")


def test_simulate_sends_signed_webhook(runner):
    with patch(
        "cherry.cli.TodoistWebhookClient.process_webhook",
        new_callable=AsyncMock,
        return_value=TodoistWebhookResponse(success=True, message="Webhook received"),
    ) as mock_process:
        result = runner.invoke(
            cli,
            ["--url", "http://example.test", "simulate", "--secret", "s3", "--event", "item:updated"],
            obj={},
        )

    assert result.exit_code == 0, result.output
    assert "Added signature header with value" in result.output
    assert "Successfully sent item:updated webhook" in result.output
    sent = mock_process.call_args.args[0]
    assert sent.event_name == "item:updated"
    assert sent.user_id == "12345"
    assert sent.event_data["content"] == "Test task"


def test_simulate_without_secret_warns(runner):
    with patch(
        "cherry.cli.TodoistWebhookClient.process_webhook",
        new_callable=AsyncMock,
        return_value=TodoistWebhookResponse(success=True, message="Webhook received"),
    ):
        result = runner.invoke(cli, ["simulate"], obj={})

    assert result.exit_code == 0, result.output
    assert "No secret provided" in result.output


def test_simulate_reports_client_error(runner):
    with patch(
        "cherry.cli.TodoistWebhookClient.process_webhook",
        new_callable=AsyncMock,
        side_effect=CherryClientError("unexpected status code: 401", 401),
    ):
        result = runner.invoke(cli, ["simulate", "--secret", "bad"], obj={})

    assert result.exit_code == 1
    assert "unexpected status code: 401" in result.output


def test_health(runner):
    with patch(
        "cherry.cli.HealthClient.check",
        new_callable=AsyncMock,
        return_value=HealthCheckResponse(status="OK"),
    ):
        result = runner.invoke(cli, ["health"], obj={})

    assert result.exit_code == 0
    assert "Status: OK" in result.output


def test_health_failure(runner):
    with patch(
        "cherry.cli.HealthClient.check",
        new_callable=AsyncMock,
        side_effect=CherryClientError("Request failed: refused"),
    ):
        result = runner.invoke(cli, ["health"], obj={})

    assert result.exit_code == 1
    assert "Health check failed" in result.output


def test_config_file_supplies_url_and_secret(runner, tmp_path):
    config = tmp_path / "cherry.toml"
    config.write_text('[cli]\nbase_url = "http://configured.test"\nsecret = "from-config"\n')

    with patch(
        "cherry.cli.TodoistWebhookClient.process_webhook",
        new_callable=AsyncMock,
        return_value=TodoistWebhookResponse(success=True, message="Webhook received"),
    ):
        result = runner.invoke(cli, ["--config", str(config), "simulate"], obj={})

    assert result.exit_code == 0, result.output
    assert "Added signature header" in result.output
    assert "http://configured.test" in result.output
