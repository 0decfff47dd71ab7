from __future__ import annotations

from gmail2line.models import MailRecord
from gmail2line.pipeline.formatter import render, render_batch


def test_render_produces_exact_template() -> None:
    record = MailRecord(message_id="m1", from_="a@x.com", subject="Hi", body="Hello\n")

    assert render(record) == "[From]\na@x.com\n[Subject]\nHi\n[Body]\nHello\n\n"


def test_render_is_pure() -> None:
    record = MailRecord(message_id="m1", from_="a@x.com", subject="{braces}", body="<b>x</b>")

    assert render(record) == render(record)
    assert "{braces}" in render(record)
    assert "<b>x</b>" in render(record)


def test_render_batch_keeps_order() -> None:
    records = [
        MailRecord(message_id=str(i), from_=f"s{i}", subject="", body="") for i in range(3)
    ]

    rendered = render_batch(records)

    assert [r.split("\n")[1] for r in rendered] == ["s0", "s1", "s2"]
