from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any, List, Protocol, Sequence

from gmail2line.errors import AcknowledgeError, FetchError, NoMatchError
from gmail2line.models import MailRecord, RunSummary, TimeWindow
from gmail2line.pipeline.formatter import render_batch


logger = logging.getLogger(__name__)


class MailSource(Protocol):
    def list_candidates(self, window: TimeWindow) -> List[str]: ...
    def fetch(self, message_id: str) -> MailRecord: ...
    def mark_read(self, message_id: str) -> None: ...


class ChatSink(Protocol):
    def push(self, destination_id: str, payloads: Sequence[str]) -> Any: ...


class Forwarder:
    """
    One pass of the mail -> chat relay.

    Each candidate is acknowledged (marked read) right after it is fetched and
    before the batch is pushed. A push failure therefore leaves those messages
    read but unforwarded; they are not re-matched by later runs.
    """

    def __init__(
        self,
        source: MailSource,
        sink: ChatSink,
        *,
        destination_id: str,
        interval: timedelta,
    ):
        self._source = source
        self._sink = sink
        self._destination_id = destination_id
        self._interval = interval

    def run(self, now: datetime) -> RunSummary:
        """
        Forward matching mail received within ``interval`` before ``now``.

        Raises:
            ListError: the mailbox query itself failed.
            SinkError: the push of the collected batch failed.
        """
        summary = RunSummary()
        window = TimeWindow(reference_instant=now, lookback=self._interval)

        try:
            message_ids = self._source.list_candidates(window)
        except NoMatchError as exc:
            logger.info("%s", exc)
            return summary
        summary.listed = len(message_ids)
        logger.info("Found %d candidate message(s) since %s", summary.listed, window.lower_bound)

        records = self._collect(message_ids, summary)

        if not records:
            logger.info("Nothing to forward (listed=%d failed=%d)", summary.listed, summary.failed)
            return summary

        self._sink.push(self._destination_id, render_batch(records))
        summary.forwarded = len(records)
        return summary

    def _collect(self, message_ids: List[str], summary: RunSummary) -> List[MailRecord]:
        records: List[MailRecord] = []
        for mid in message_ids:
            try:
                record = self._source.fetch(mid)
            except FetchError as exc:
                summary.failed += 1
                logger.error("Unable to get message, skipping: %s", exc)
                continue

            records.append(record)
            summary.fetched += 1

            try:
                self._source.mark_read(mid)
                summary.acknowledged += 1
            except AcknowledgeError as exc:
                summary.acknowledge_failures += 1
                logger.error("Failed to mark message read: %s", exc)
        return records
