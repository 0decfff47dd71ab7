from __future__ import annotations

from typing import List, Sequence

from gmail2line.models import MailRecord


MESSAGE_TEMPLATE = "[From]\n{sender}\n[Subject]\n{subject}\n[Body]\n{body}\n"


def render(record: MailRecord) -> str:
    """Render one mail as a chat text message. User content is not escaped."""
    return MESSAGE_TEMPLATE.format(sender=record.from_, subject=record.subject, body=record.body)


def render_batch(records: Sequence[MailRecord]) -> List[str]:
    return [render(r) for r in records]
