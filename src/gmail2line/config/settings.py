from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import Dict, Mapping, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from dotenv import load_dotenv

from gmail2line.errors import ConfigError
from gmail2line.gmail.client import GmailClientConfig
from gmail2line.gmail.source import DEFAULT_FORWARD_LABEL
from gmail2line.line.client import DEFAULT_API_BASE


logger = logging.getLogger(__name__)

# Project root (independent of current working directory).
PROJECT_ROOT = Path(__file__).resolve().parents[3]


@dataclass(frozen=True)
class ForwarderConfig:
    gmail: GmailClientConfig
    line_channel_access_token: str
    # LINE user, group or room id that receives the push.
    forward_line_id: str
    # Lookback window; should match the schedule interval.
    interval: timedelta
    forward_label: str = DEFAULT_FORWARD_LABEL
    line_api_base: str = DEFAULT_API_BASE


def parse_interval_minutes(value: Optional[str]) -> timedelta:
    if value is None or not str(value).strip():
        raise ConfigError("INTERVAL_MINUTES is not set")
    try:
        minutes = int(str(value).strip())
    except ValueError as exc:
        raise ConfigError(f"INTERVAL_MINUTES must be an integer, got {value!r}") from exc
    if minutes < 0:
        raise ConfigError(f"INTERVAL_MINUTES must not be negative, got {minutes}")
    return timedelta(minutes=minutes)


def resolve_dir(value: str) -> Path:
    """Relative paths are resolved against PROJECT_ROOT."""
    path = Path(value)
    if not path.is_absolute():
        path = PROJECT_ROOT / path
    return path


def _require(values: Mapping[str, Optional[str]], key: str) -> str:
    value = values.get(key)
    if not value:
        raise ConfigError(f"Missing required setting {key}")
    return value


def load_local_config(
    *,
    secrets_dir: Optional[Path] = None,
    overrides: Optional[Mapping[str, Optional[str]]] = None,
    interactive: bool = True,
) -> ForwarderConfig:
    """
    Build the config for a manual/local run.

    Values come from ``overrides`` (CLI flags) first, then the environment
    (``.env`` is loaded here). Gmail credentials are read from files in
    ``secrets_dir`` (default: GMAIL2LINE_SECRETS_DIR or ./secrets).
    """
    load_dotenv()
    values: Dict[str, Optional[str]] = dict(os.environ)
    values.update({k: v for k, v in (overrides or {}).items() if v is not None})

    if secrets_dir is None:
        secrets_dir = resolve_dir(values.get("GMAIL2LINE_SECRETS_DIR") or "secrets")

    credentials_path = secrets_dir / "credentials.json"
    if not credentials_path.exists():
        raise ConfigError(
            f"Missing Gmail credentials at {credentials_path}. "
            "Did you configure GMAIL2LINE_SECRETS_DIR?"
        )
    token_path = secrets_dir / "gmail_token.json"
    token_json = token_path.read_bytes() if token_path.exists() else b""

    return ForwarderConfig(
        gmail=GmailClientConfig(
            credentials_json=credentials_path.read_bytes(),
            token_json=token_json,
            token_path=token_path,
            interactive=interactive,
        ),
        line_channel_access_token=_require(values, "LINE_CHANNEL_ACCESS_TOKEN"),
        forward_line_id=_require(values, "FORWARD_LINE_ID"),
        interval=parse_interval_minutes(values.get("INTERVAL_MINUTES")),
        forward_label=values.get("FORWARD_LABEL") or DEFAULT_FORWARD_LABEL,
        line_api_base=values.get("LINE_API_BASE") or DEFAULT_API_BASE,
    )


# Environment variables that hold the *names* of SSM parameters.
SSM_PARAMETER_ENV_KEYS = (
    "GOOGLE_CREDENTIALS",
    "GOOGLE_TOKEN",
    "LINE_CHANNEL_ACCESS_TOKEN",
    "FORWARD_LINE_ID",
)


def get_ssm_parameters(names: list[str], ssm_client=None) -> Dict[str, str]:
    """Fetch several SecureString parameters in one call, keyed by name."""
    client = ssm_client or boto3.client("ssm")
    try:
        resp = client.get_parameters(Names=names, WithDecryption=True)
    except (BotoCoreError, ClientError) as exc:
        logger.error("Error retrieving SSM parameters %s: %s", names, exc)
        raise ConfigError(f"ssm GetParameters failed: {exc}") from exc

    invalid = resp.get("InvalidParameters") or []
    if invalid:
        raise ConfigError(f"Unknown SSM parameters: {', '.join(invalid)}")
    return {p["Name"]: p["Value"] for p in resp.get("Parameters", [])}


def load_ssm_config(
    env: Optional[Mapping[str, str]] = None,
    ssm_client=None,
) -> ForwarderConfig:
    """Build the config for a Lambda run from SSM Parameter Store."""
    env = os.environ if env is None else env
    names = {key: _require(env, key) for key in SSM_PARAMETER_ENV_KEYS}
    params = get_ssm_parameters(sorted(set(names.values())), ssm_client=ssm_client)
    resolved = {key: params.get(name) for key, name in names.items()}

    return ForwarderConfig(
        gmail=GmailClientConfig(
            credentials_json=_require(resolved, "GOOGLE_CREDENTIALS").encode("utf-8"),
            token_json=_require(resolved, "GOOGLE_TOKEN").encode("utf-8"),
        ),
        line_channel_access_token=_require(resolved, "LINE_CHANNEL_ACCESS_TOKEN"),
        forward_line_id=_require(resolved, "FORWARD_LINE_ID"),
        interval=parse_interval_minutes(env.get("INTERVAL_MINUTES")),
        forward_label=env.get("FORWARD_LABEL") or DEFAULT_FORWARD_LABEL,
        line_api_base=env.get("LINE_API_BASE") or DEFAULT_API_BASE,
    )
