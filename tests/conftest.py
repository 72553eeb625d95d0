"""Shared fixtures for tests."""

from __future__ import annotations

import json
import time

import pytest
from google.oauth2.credentials import Credentials

from inbox_buckets.auth import ClientConfig
from inbox_buckets.config import AppConfig
from inbox_buckets.constants import SCOPES
from inbox_buckets.exceptions import FetchError
from inbox_buckets.models import MessageRecord
from inbox_buckets.rules import RuleSet


class FakeGmailClient:
    """Stands in for GmailClient; serves canned messages keyed by ID."""

    def __init__(self, messages: list[MessageRecord], fail_on: set[str] | None = None, delays=None):
        self.messages = {m.id: m for m in messages}
        self.order = [m.id for m in messages]
        self.fail_on = fail_on or set()
        self.delays = delays or {}
        self.list_calls: list[int] = []
        self.get_calls: list[str] = []

    def list_message_ids(self, max_results: int) -> list[str]:
        self.list_calls.append(max_results)
        return self.order[:max_results]

    def get_message(self, msg_id: str) -> MessageRecord:
        self.get_calls.append(msg_id)
        if msg_id in self.delays:
            time.sleep(self.delays[msg_id])
        if msg_id in self.fail_on:
            raise FetchError(f"Failed to fetch message {msg_id}: Gmail API returned HTTP 404")
        return self.messages[msg_id]


@pytest.fixture
def acme_message() -> MessageRecord:
    return MessageRecord(
        id="msg_acme_001",
        subject="October Invoice",
        sender="Acme Billing <billing@acme.com>",
        date="Tue, 14 Oct 2025 09:12:00 +0000",
        snippet="Please find attached your invoice for October.",
    )


@pytest.fixture
def random_message() -> MessageRecord:
    return MessageRecord(
        id="msg_rnd_001",
        subject="hello",
        sender="random@x.com",
        date="Wed, 15 Oct 2025 18:40:00 +0000",
        snippet="Long time no see",
    )


@pytest.fixture
def globex_message() -> MessageRecord:
    return MessageRecord(
        id="msg_glx_001",
        subject="Project kickoff",
        sender="Hank Scorpio <hank@GLOBEX.example>",
        date="Thu, 16 Oct 2025 11:00:00 +0000",
        snippet="Agenda for Monday",
    )


@pytest.fixture
def sample_messages(acme_message, random_message, globex_message) -> list[MessageRecord]:
    return [acme_message, random_message, globex_message]


@pytest.fixture
def sample_ruleset() -> RuleSet:
    return RuleSet.from_entries(
        [
            {"name": "Acme Co", "keywords": ["acme.com", "Invoice"]},
            {"name": "Globex", "keywords": ["globex"]},
        ]
    )


@pytest.fixture
def rules_file(tmp_path):
    path = tmp_path / "rules.json"
    path.write_text(
        json.dumps(
            [
                {"name": "Acme Co", "keywords": ["acme.com", "invoice"]},
                {"name": "Globex", "keywords": ["globex"]},
            ]
        )
    )
    return path


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(
        token="access-token-value",
        refresh_token="refresh-token-value",
        token_uri="https://oauth2.googleapis.com/token",
        client_id="client-123.apps.googleusercontent.com",
        client_secret="client-secret-value",
        scopes=SCOPES,
    )


@pytest.fixture
def client_config() -> ClientConfig:
    return ClientConfig(
        client_type="web",
        client_id="client-123.apps.googleusercontent.com",
        client_secret="client-secret-value",
        redirect_uri="https://dashboard.example.com/oauth2callback",
        auth_uri="https://accounts.google.com/o/oauth2/auth",
        token_uri="https://oauth2.googleapis.com/token",
    )


@pytest.fixture
def app_config(tmp_path, rules_file) -> AppConfig:
    return AppConfig(
        config_dir=tmp_path,
        credentials_path=tmp_path / "credentials.json",
        token_path=tmp_path / "token.json",
        rules_path=rules_file,
    )


@pytest.fixture
def fake_client_factory(sample_messages):
    """Return (factory, holder) where holder[0] is the last client built."""
    built: list[FakeGmailClient] = []

    def factory(_credentials):
        client = FakeGmailClient(sample_messages)
        built.append(client)
        return client

    return factory, built


@pytest.fixture
def fake_client_cls():
    """The fake client class, for tests that build their own message sets."""
    return FakeGmailClient
