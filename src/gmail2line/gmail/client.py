from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import build


logger = logging.getLogger(__name__)

# Modify is needed to remove the UNREAD label after forwarding.
SCOPES = ["https://www.googleapis.com/auth/gmail.modify"]

UNREAD_LABEL = "UNREAD"


@dataclass(frozen=True)
class GmailClientConfig:
    # Contents of the OAuth client credentials downloaded from Google Cloud Console.
    credentials_json: bytes
    # Contents of the authorized user token (may be empty on first local login).
    token_json: bytes = b""
    # Where a refreshed/new token is cached. None for read-only sources like SSM.
    token_path: Optional[Path] = None
    # Gmail userId, "me" refers to the authenticated user.
    user_id: str = "me"
    # Allow the interactive browser login when no usable token exists.
    interactive: bool = False


def _client_info(credentials_json: bytes) -> Dict[str, Any]:
    data = json.loads(credentials_json)
    # Client secrets files nest everything under "installed" or "web".
    return data.get("installed") or data.get("web") or data


def credentials_from_json(credentials_json: bytes, token_json: bytes) -> Credentials:
    """Build user credentials from a client secrets file and a token file."""
    token_info = json.loads(token_json)
    client = _client_info(credentials_json)
    token_info.setdefault("client_id", client.get("client_id"))
    token_info.setdefault("client_secret", client.get("client_secret"))
    if "access_token" in token_info and "token" not in token_info:
        # Tokens written by other OAuth tooling use the oauth2 field names and an
        # expiry format google-auth cannot parse; dropping it forces a refresh.
        token_info["token"] = token_info.pop("access_token")
        token_info.pop("expiry", None)
    return Credentials.from_authorized_user_info(token_info, SCOPES)


class GmailClient:
    def __init__(self, cfg: GmailClientConfig):
        self._cfg = cfg
        self._creds: Optional[Credentials] = None
        self._service = None

    def connect(self) -> None:
        """Create an authenticated Gmail API service client."""
        creds = None

        if self._cfg.token_json:
            creds = credentials_from_json(self._cfg.credentials_json, self._cfg.token_json)

        if not creds or not creds.valid:
            if creds and creds.expired and creds.refresh_token:
                creds.refresh(Request())
            elif self._cfg.interactive:
                flow = InstalledAppFlow.from_client_config(
                    json.loads(self._cfg.credentials_json),
                    SCOPES,
                )
                creds = flow.run_local_server(port=0)
            else:
                raise RuntimeError("No usable Gmail token and interactive login is disabled.")

            # Save the credentials for the next run.
            if self._cfg.token_path is not None:
                self._cfg.token_path.parent.mkdir(parents=True, exist_ok=True)
                self._cfg.token_path.write_text(creds.to_json(), encoding="utf-8")
                logger.info("Cached Gmail token at %s", self._cfg.token_path)

        self._creds = creds
        self._service = build("gmail", "v1", credentials=creds, cache_discovery=False)

    @property
    def service(self):
        if self._service is None:
            raise RuntimeError("GmailClient is not connected. Call connect() first.")
        return self._service

    def list_message_ids(self, query: str = "", max_results: Optional[int] = None) -> List[str]:
        """
        List message IDs matching a Gmail search query.
        Example query: 'is:unread label:forward-to-line after:1700000000'
        """
        params: Dict[str, Any] = {
            "userId": self._cfg.user_id,
            "q": query,
            "fields": "messages/id",
        }
        if max_results is not None:
            params["maxResults"] = max_results
        resp = self.service.users().messages().list(**params).execute()
        msgs = resp.get("messages", [])
        return [m["id"] for m in msgs]

    def get_message(self, message_id: str, fmt: str = "full") -> Dict[str, Any]:
        """
        Fetch a full message resource.
        fmt: 'full' | 'metadata' | 'minimal' | 'raw'
        """
        return (
            self.service.users()
            .messages()
            .get(userId=self._cfg.user_id, id=message_id, format=fmt)
            .execute()
        )

    def remove_labels(self, message_id: str, label_ids: List[str]) -> Dict[str, Any]:
        return (
            self.service.users()
            .messages()
            .modify(
                userId=self._cfg.user_id,
                id=message_id,
                body={"removeLabelIds": label_ids},
            )
            .execute()
        )

    def mark_read(self, message_id: str) -> None:
        self.remove_labels(message_id, [UNREAD_LABEL])
