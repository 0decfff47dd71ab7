from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import List, Optional


@dataclass(frozen=True)
class TimeWindow:
    reference_instant: datetime
    lookback: timedelta

    def __post_init__(self) -> None:
        if self.lookback < timedelta(0):
            raise ValueError(f"lookback must not be negative, got {self.lookback}")
        # Naive instants are treated as UTC so epoch conversion is stable.
        if self.reference_instant.tzinfo is None:
            object.__setattr__(
                self, "reference_instant", self.reference_instant.replace(tzinfo=timezone.utc)
            )

    @property
    def lower_bound(self) -> datetime:
        return self.reference_instant - self.lookback


@dataclass(frozen=True)
class MailRecord:
    message_id: str
    from_: str
    subject: str
    body: str


@dataclass(frozen=True)
class MailPart:
    mime_type: str
    # Still base64url-encoded, as delivered by the Gmail API.
    data: Optional[str] = None
    children: List["MailPart"] = field(default_factory=list)


@dataclass
class RunSummary:
    listed: int = 0
    fetched: int = 0
    failed: int = 0
    acknowledged: int = 0
    acknowledge_failures: int = 0
    forwarded: int = 0
