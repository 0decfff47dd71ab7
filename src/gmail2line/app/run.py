# src/gmail2line/app/run.py
from __future__ import annotations

from dataclasses import asdict
from datetime import datetime
from typing import Any, Dict

from google.auth.exceptions import GoogleAuthError

from gmail2line.config.settings import ForwarderConfig
from gmail2line.errors import ConfigError
from gmail2line.gmail.client import GmailClient
from gmail2line.gmail.source import GmailMailSource
from gmail2line.line.client import LineClient, LineClientConfig
from gmail2line.pipeline.orchestrator import Forwarder


def build_forwarder(cfg: ForwarderConfig) -> Forwarder:
    """Wire the Gmail source and LINE sink for one config. Connects to Gmail."""
    gmail = GmailClient(cfg.gmail)
    try:
        gmail.connect()
    except (GoogleAuthError, RuntimeError, ValueError) as exc:
        raise ConfigError(f"unable to retrieve Gmail client: {exc}") from exc
    line = LineClient(
        LineClientConfig(
            channel_access_token=cfg.line_channel_access_token,
            api_base=cfg.line_api_base,
        )
    )
    return Forwarder(
        GmailMailSource(gmail, forward_label=cfg.forward_label),
        line,
        destination_id=cfg.forward_line_id,
        interval=cfg.interval,
    )


def run_once(cfg: ForwarderConfig, now: datetime) -> Dict[str, Any]:
    """
    Execute a single forwarding run and return a machine-readable summary.

    Shared by the CLI and the Lambda entry points; ListError and SinkError
    propagate to them.
    """
    forwarder = build_forwarder(cfg)
    summary = forwarder.run(now)
    return asdict(summary)
