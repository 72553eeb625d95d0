"""Tests for the CLI module."""

import json

import pytest
from click.testing import CliRunner

import inbox_buckets.auth as auth_module
import inbox_buckets.cli as cli_module
from inbox_buckets.cli import cli
from inbox_buckets.fetcher import MailFetcher
from inbox_buckets.service import InboxService
from inbox_buckets.token_store import TokenStore


@pytest.fixture
def home(tmp_path, monkeypatch, rules_file):
    """Point the CLI at an isolated config dir with rules and no token."""
    for var in ("TOKEN_PATH", "RULES_PATH", "CREDENTIALS_PATH", "REDIRECT_URI", "LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("INBOX_BUCKETS_HOME", str(tmp_path))
    return tmp_path


@pytest.fixture
def fake_fetch(monkeypatch, fake_client_factory):
    """Make the CLI's service use the fake Gmail client."""
    factory, built = fake_client_factory

    def make_service(config):
        return InboxService(config, fetcher=MailFetcher(client_factory=factory))

    monkeypatch.setattr(cli_module, "InboxService", make_service)
    return built


def test_cli_help():
    """CLI --help should work and show commands."""
    runner = CliRunner()
    result = runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    for command in ("authorize", "complete", "status", "emails", "by-client", "summary", "rules", "serve"):
        assert command in result.output


def test_cli_version():
    runner = CliRunner()
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "0.1.0" in result.output


def test_authorize_without_credentials_file(home):
    runner = CliRunner()
    result = runner.invoke(cli, ["authorize"])
    assert result.exit_code != 0
    assert "Credentials file not found" in result.output


def test_authorize_prints_url(home):
    (home / "credentials.json").write_text(
        json.dumps(
            {
                "web": {
                    "client_id": "client-123.apps.googleusercontent.com",
                    "client_secret": "client-secret-value",
                    "auth_uri": "https://accounts.google.com/o/oauth2/auth",
                    "token_uri": "https://oauth2.googleapis.com/token",
                    "redirect_uris": ["http://localhost:8080/oauth2callback"],
                }
            }
        )
    )
    runner = CliRunner()
    result = runner.invoke(cli, ["authorize"])
    assert result.exit_code == 0
    assert "https://accounts.google.com/o/oauth2/auth?" in result.output
    assert "client-secret-value" not in result.output


def test_complete_saves_token(home, monkeypatch, credentials, client_config):
    monkeypatch.setattr(auth_module, "load_client_config", lambda path, override: client_config)
    monkeypatch.setattr(auth_module, "exchange_code", lambda client, code: credentials)

    runner = CliRunner()
    result = runner.invoke(cli, ["complete", "the-code"])
    assert result.exit_code == 0
    assert "Authorization successful" in result.output
    assert (home / "token.json").exists()


def test_status(home, credentials):
    runner = CliRunner()
    result = runner.invoke(cli, ["status"])
    assert "Not authorized" in result.output

    TokenStore(home / "token.json").save(credentials)
    result = runner.invoke(cli, ["status"])
    assert "Authorized." in result.output


def test_emails_not_authorized(home, fake_fetch):
    runner = CliRunner()
    result = runner.invoke(cli, ["emails"])
    assert result.exit_code != 0
    assert "Not authorized" in result.output
    assert fake_fetch == []


def test_emails_json(home, fake_fetch, credentials):
    TokenStore(home / "token.json").save(credentials)
    runner = CliRunner()
    result = runner.invoke(cli, ["emails", "--json", "--limit", "2"])
    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert [m["id"] for m in payload] == ["msg_acme_001", "msg_rnd_001"]
    assert payload[0]["from"] == "Acme Billing <billing@acme.com>"


def test_summary_json(home, fake_fetch, credentials):
    TokenStore(home / "token.json").save(credentials)
    runner = CliRunner()
    result = runner.invoke(cli, ["summary", "--json"])
    assert result.exit_code == 0
    assert json.loads(result.stdout) == {
        "total": 3,
        "byClient": {"Acme Co": 1, "Unassigned": 1, "Globex": 1},
    }


def test_by_client_table(home, fake_fetch, credentials):
    TokenStore(home / "token.json").save(credentials)
    runner = CliRunner()
    result = runner.invoke(cli, ["by-client"])
    assert result.exit_code == 0
    assert "Acme Co" in result.output
    assert "Globex" in result.output
    assert "Unassigned" in result.output


def test_limit_out_of_range(home, fake_fetch):
    runner = CliRunner()
    result = runner.invoke(cli, ["emails", "--limit", "0"])
    assert result.exit_code != 0


def test_rules_listing(home):
    runner = CliRunner()
    result = runner.invoke(cli, ["rules"])
    assert result.exit_code == 0
    assert "Acme Co" in result.output
    assert "acme.com" in result.output


def test_rules_missing_file(home, tmp_path):
    runner = CliRunner()
    result = runner.invoke(cli, ["--rules", str(tmp_path / "missing.json"), "rules"])
    assert result.exit_code == 0
    assert "No rules loaded" in result.output


def test_malformed_rules_file(home):
    (home / "rules.json").write_text('{"Acme": "acme"}')
    runner = CliRunner()
    result = runner.invoke(cli, ["rules"])
    assert result.exit_code != 0
    assert "JSON array" in result.output
