from __future__ import annotations

import base64
import binascii
import re
from typing import Any, Dict, List

from gmail2line.models import MailPart


PLAIN_TEXT = "text/plain"

_BASE64URL = re.compile(r"[A-Za-z0-9_-]*={0,2}")


def part_from_payload(payload: Dict[str, Any]) -> MailPart:
    """Convert a Gmail API ``payload`` dict into a MailPart tree."""
    children = [part_from_payload(child) for child in payload.get("parts", []) or []]
    return MailPart(
        mime_type=payload.get("mimeType", ""),
        data=(payload.get("body") or {}).get("data"),
        children=children,
    )


def decode_payload(data: str) -> str:
    """
    Decode one base64url payload to text.
    Raises ValueError on characters outside the alphabet or a bad length.
    """
    # Gmail sometimes strips the "=" padding.
    padded = data + "=" * (-len(data) % 4)
    # Only the url-safe alphabet; "+" and "/" are rejected.
    if not _BASE64URL.fullmatch(padded):
        raise ValueError("invalid base64url payload: character outside the url-safe alphabet")
    try:
        raw = base64.b64decode(padded, altchars=b"-_", validate=True)
    except binascii.Error as exc:
        raise ValueError(f"invalid base64url payload: {exc}") from exc
    return raw.decode("utf-8", errors="replace")


def decode_body(part: MailPart) -> str:
    # Plain text leaves carry the payload; every other part is a container.
    if part.mime_type == PLAIN_TEXT:
        if not part.data:
            return ""
        return decode_payload(part.data)

    return "".join(decode_body(child) for child in part.children)


def header_value(headers: List[Dict[str, str]], name: str) -> str:
    """Return the first header called ``name``, or an empty string."""
    for header in headers:
        if header.get("name") == name:
            return header.get("value", "")
    return ""
