from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import pytest
from google.auth.exceptions import RefreshError

from gmail2line.app import run
from gmail2line.config.settings import ForwarderConfig
from gmail2line.errors import ConfigError
from gmail2line.gmail.client import GmailClientConfig


CFG = ForwarderConfig(
    gmail=GmailClientConfig(credentials_json=b"{}", token_json=b"{}"),
    line_channel_access_token="line-token",
    forward_line_id="U1",
    interval=timedelta(minutes=5),
    forward_label="alerts",
)


class FakeGmailClient:
    connect_error: Any = None
    queries: list = []

    def __init__(self, cfg: GmailClientConfig):
        self.cfg = cfg

    def connect(self) -> None:
        if self.connect_error:
            raise self.connect_error

    def list_message_ids(self, query: str = "", max_results=None) -> list:
        FakeGmailClient.queries.append(query)
        return []


@pytest.fixture(autouse=True)
def _fake_gmail(monkeypatch: pytest.MonkeyPatch) -> None:
    FakeGmailClient.connect_error = None
    FakeGmailClient.queries = []
    monkeypatch.setattr(run, "GmailClient", FakeGmailClient)


def test_run_once_uses_configured_label_and_returns_summary() -> None:
    summary = run.run_once(CFG, datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc))

    assert summary["forwarded"] == 0
    assert summary["listed"] == 0
    assert FakeGmailClient.queries[0].startswith("is:unread label:alerts after:")


def test_build_forwarder_wraps_auth_failure() -> None:
    FakeGmailClient.connect_error = RefreshError("invalid_grant")

    with pytest.raises(ConfigError):
        run.build_forwarder(CFG)
