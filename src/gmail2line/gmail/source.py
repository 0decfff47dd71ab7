from __future__ import annotations

import logging
from typing import List

import httplib2
from google.auth.exceptions import GoogleAuthError
from googleapiclient.errors import HttpError

from gmail2line.errors import AcknowledgeError, DecodeError, FetchError, ListError, NoMatchError
from gmail2line.gmail.client import GmailClient
from gmail2line.models import MailRecord, TimeWindow
from gmail2line.parsing.parser import decode_body, header_value, part_from_payload


logger = logging.getLogger(__name__)

DEFAULT_FORWARD_LABEL = "forward-to-line"
UNREAD_FILTER = "is:unread"

# Transport and auth failures surface as one of these from googleapiclient.
_API_ERRORS = (HttpError, GoogleAuthError, httplib2.HttpLib2Error, OSError)


def build_query(window: TimeWindow, forward_label: str = DEFAULT_FORWARD_LABEL) -> str:
    # Gmail "after:" expects seconds since epoch.
    epoch_seconds = int(window.lower_bound.timestamp())
    return f"{UNREAD_FILTER} label:{forward_label} after:{epoch_seconds}"


class GmailMailSource:
    """Query, fetch and acknowledge forwarding candidates in a Gmail inbox."""

    def __init__(self, client: GmailClient, forward_label: str = DEFAULT_FORWARD_LABEL):
        self._client = client
        self._forward_label = forward_label

    def list_candidates(self, window: TimeWindow) -> List[str]:
        query = build_query(window, self._forward_label)
        logger.debug("Listing messages with query %r", query)
        try:
            message_ids = self._client.list_message_ids(query=query)
        except _API_ERRORS as exc:
            raise ListError(f"unable to list messages for query {query!r}: {exc}") from exc

        if not message_ids:
            raise NoMatchError(f"no message found for query {query!r}")
        return message_ids

    def fetch(self, message_id: str) -> MailRecord:
        try:
            msg = self._client.get_message(message_id, fmt="full")
        except _API_ERRORS as exc:
            raise FetchError(message_id, f"unable to get message: {exc}") from exc

        payload = msg.get("payload") or {}
        headers = payload.get("headers", []) or []
        try:
            body = decode_body(part_from_payload(payload))
        except ValueError as exc:
            raise DecodeError(message_id, str(exc)) from exc

        return MailRecord(
            message_id=message_id,
            from_=header_value(headers, "From"),
            subject=header_value(headers, "Subject"),
            body=body,
        )

    def mark_read(self, message_id: str) -> None:
        try:
            self._client.mark_read(message_id)
        except _API_ERRORS as exc:
            raise AcknowledgeError(message_id, f"failed to remove unread: {exc}") from exc
