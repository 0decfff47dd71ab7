from __future__ import annotations

import base64

import pytest

from gmail2line.models import MailPart
from gmail2line.parsing.parser import (
    decode_body,
    decode_payload,
    header_value,
    part_from_payload,
)


def _b64(text: str) -> str:
    return base64.urlsafe_b64encode(text.encode("utf-8")).decode("ascii")


def test_plain_text_part_decodes_payload() -> None:
    part = MailPart(mime_type="text/plain", data=_b64("Hello\n"))

    assert decode_body(part) == "Hello\n"


def test_multipart_concatenates_children_without_separator() -> None:
    part = MailPart(
        mime_type="multipart/mixed",
        children=[
            MailPart(mime_type="text/plain", data=_b64("first")),
            MailPart(mime_type="text/plain", data=_b64("second")),
        ],
    )

    assert decode_body(part) == "firstsecond"


def test_nested_multipart_walks_depth_first_in_order() -> None:
    payload = {
        "mimeType": "multipart/mixed",
        "parts": [
            {
                "mimeType": "multipart/alternative",
                "parts": [
                    {"mimeType": "text/plain", "body": {"data": _b64("a")}},
                    {"mimeType": "text/html", "body": {"data": _b64("<p>a</p>")}},
                ],
            },
            {"mimeType": "text/plain", "body": {"data": _b64("b")}},
        ],
    }

    assert decode_body(part_from_payload(payload)) == "ab"


def test_non_text_leaf_and_empty_plain_part_contribute_nothing() -> None:
    part = MailPart(
        mime_type="multipart/mixed",
        children=[
            MailPart(mime_type="application/pdf", data=_b64("%PDF")),
            MailPart(mime_type="text/plain", data=None),
        ],
    )

    assert decode_body(part) == ""


def test_unicode_body_round_trips() -> None:
    part = MailPart(mime_type="text/plain", data=_b64("こんにちは"))

    assert decode_body(part) == "こんにちは"


def test_missing_padding_is_tolerated() -> None:
    assert decode_payload(_b64("ab").rstrip("=")) == "ab"


@pytest.mark.parametrize("data", ["!!!not-base64!!!", "abcde", "a+/b", "YQ==YQ=="])
def test_malformed_payload_raises(data: str) -> None:
    with pytest.raises(ValueError):
        decode_payload(data)


def test_malformed_payload_deep_in_tree_fails_whole_body() -> None:
    part = MailPart(
        mime_type="multipart/mixed",
        children=[
            MailPart(mime_type="text/plain", data=_b64("ok")),
            MailPart(
                mime_type="multipart/alternative",
                children=[MailPart(mime_type="text/plain", data="***")],
            ),
        ],
    )

    with pytest.raises(ValueError):
        decode_body(part)


def test_header_value_first_occurrence_wins_and_missing_is_empty() -> None:
    headers = [
        {"name": "Subject", "value": "first"},
        {"name": "Subject", "value": "second"},
    ]

    assert header_value(headers, "Subject") == "first"
    assert header_value(headers, "From") == ""
