from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence

import requests

from gmail2line.errors import SinkError


logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://api.line.me"
PUSH_PATH = "/v2/bot/message/push"


@dataclass(frozen=True)
class LineClientConfig:
    channel_access_token: str
    api_base: str = DEFAULT_API_BASE
    # Seconds; the push call otherwise blocks on a stalled connection.
    timeout: float = 15.0


class LineClient:
    """Minimal LINE Messaging API client: multi-message push only."""

    def __init__(self, cfg: LineClientConfig, session: Optional[requests.Session] = None):
        self._cfg = cfg
        self._session = session or requests.Session()

    @property
    def push_url(self) -> str:
        return self._cfg.api_base.rstrip("/") + PUSH_PATH

    def push(self, destination_id: str, payloads: Sequence[str]) -> Dict[str, Any]:
        """
        Send every payload as one push to ``destination_id``, in order.
        The API caps messages per push; the batch is not split here.
        """
        body = {
            "to": destination_id,
            "messages": [{"type": "text", "text": text} for text in payloads],
        }
        headers = {
            "Authorization": f"Bearer {self._cfg.channel_access_token}",
            "Content-Type": "application/json",
        }
        try:
            resp = self._session.post(
                self.push_url, json=body, headers=headers, timeout=self._cfg.timeout
            )
        except requests.RequestException as exc:
            raise SinkError(f"push to {destination_id} failed: {exc}") from exc

        if not resp.ok:
            raise SinkError(
                f"push to {destination_id} rejected: status={resp.status_code} body={resp.text}"
            )

        logger.info("Pushed %d message(s) to %s", len(payloads), destination_id)
        if not resp.content:
            return {}
        try:
            return resp.json()
        except ValueError:
            return {}
