from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from gmail2line.models import TimeWindow


def test_lower_bound_is_reference_minus_lookback() -> None:
    now = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
    window = TimeWindow(reference_instant=now, lookback=timedelta(minutes=5))

    assert window.lower_bound == datetime(2024, 1, 1, 11, 55, tzinfo=timezone.utc)


def test_zero_lookback_is_allowed() -> None:
    now = datetime(2024, 1, 1, tzinfo=timezone.utc)

    assert TimeWindow(reference_instant=now, lookback=timedelta(0)).lower_bound == now


def test_negative_lookback_is_rejected() -> None:
    with pytest.raises(ValueError):
        TimeWindow(reference_instant=datetime.now(timezone.utc), lookback=timedelta(minutes=-1))


def test_naive_reference_instant_is_utc() -> None:
    window = TimeWindow(reference_instant=datetime(2024, 1, 1), lookback=timedelta(0))

    assert window.reference_instant.tzinfo is timezone.utc
