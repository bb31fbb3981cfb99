"""Unit tests for the EventAuth CLI."""

import pytest
from click.testing import CliRunner

from eventauth.cli import cli, mask_secret
from eventauth.core.config import DEFAULT_TOKEN_SECRET, get_settings


@pytest.fixture
def cli_env(monkeypatch, tmp_path):
    """Point the CLI at a throwaway SQLite file."""
    monkeypatch.setenv("EVENTAUTH_ENVIRONMENT", "testing")
    monkeypatch.setenv("EVENTAUTH_LOG_FORMAT", "console")
    monkeypatch.setenv("EVENTAUTH_LOG_LEVEL", "WARNING")
    monkeypatch.setenv("EVENTAUTH_DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path}/cli.db")
    get_settings.cache_clear()
    yield tmp_path
    get_settings.cache_clear()


def test_mask_secret():
    assert mask_secret("", DEFAULT_TOKEN_SECRET) == "(not set)"
    assert "default" in mask_secret(DEFAULT_TOKEN_SECRET, DEFAULT_TOKEN_SECRET)
    masked = mask_secret("super-secret-value", DEFAULT_TOKEN_SECRET)
    assert "super-secret-value" not in masked
    assert "18 chars" in masked


def test_info_masks_secrets(cli_env, monkeypatch):
    monkeypatch.setenv("EVENTAUTH_TOKEN_SECRET", "very-private-signing-key")
    get_settings.cache_clear()

    result = CliRunner().invoke(cli, ["info"])

    assert result.exit_code == 0
    assert "EventAuth v0.1.0" in result.output
    assert "very-private-signing-key" not in result.output
    assert "Token Valid:  7 days" in result.output


def test_init_db_creates_database_file(cli_env):
    result = CliRunner().invoke(cli, ["init-db", "--force"])

    assert result.exit_code == 0, result.output
    assert "Database initialized successfully." in result.output
    assert (cli_env / "cli.db").exists()


def test_create_user_then_duplicate(cli_env):
    args = [
        "create-user",
        "--username", "alice",
        "--password", "pw1",
        "--gender", "female",
        "--age", "30",
        "--email", "alice@example.com",
        "--phone", "+1-555-0100",
    ]

    first = CliRunner().invoke(cli, args)
    second = CliRunner().invoke(cli, args)

    assert first.exit_code == 0, first.output
    assert "User created successfully!" in first.output
    assert second.exit_code == 1
    assert "failed to insert user" in second.output


def test_create_user_rejects_non_positive_age(cli_env):
    result = CliRunner().invoke(
        cli,
        [
            "create-user",
            "--username", "alice",
            "--password", "pw1",
            "--gender", "female",
            "--age", "0",
            "--email", "alice@example.com",
            "--phone", "+1-555-0100",
        ],
    )

    assert result.exit_code == 2
