"""Fold daily sentiment payloads into per-ticker aggregates."""
from __future__ import annotations

import logging
import threading
from typing import Any, MutableMapping, Optional

import orjson

from sentibatch.core.sinks import ProgressSink
from sentibatch.services.sentiment.types import BatchResult, TickerRecord

log = logging.getLogger("sentibatch.aggregate")


class EntryError(ValueError):
    """An entry that cannot be turned into a ``TickerRecord``."""


def _comment_count(value: Any) -> int:
    if value is None:
        return 0
    if isinstance(value, bool):
        raise EntryError(f"no_of_comments is not an integer: {value!r}")
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if not isinstance(value, int):
        raise EntryError(f"no_of_comments is not an integer: {value!r}")
    if value < 0:
        raise EntryError(f"no_of_comments is negative: {value}")
    return value


def record_from_entry(entry: Any) -> TickerRecord:
    """Build a ``TickerRecord`` from one decoded payload object."""

    if not isinstance(entry, dict):
        raise EntryError(f"entry is not an object: {entry!r}")
    ticker = entry.get("ticker")
    if isinstance(ticker, str):
        ticker = ticker.strip()
    sentiment: Optional[Any] = entry.get("sentiment")
    if sentiment is not None and not isinstance(sentiment, str):
        sentiment = str(sentiment)
    return TickerRecord(
        ticker=ticker,
        sentiment=sentiment,
        comment_count=_comment_count(entry.get("no_of_comments")),
    )


class SentimentAggregator:
    """Maintains ticker counts and latest-sentiment records across batches.

    Both maps are caller-owned and only ever grow or update in place. A
    malformed payload leaves them untouched; a bad entry is skipped and the
    rest of its batch still applies.
    """

    def __init__(self, sink: ProgressSink) -> None:
        self.sink = sink
        self._lock = threading.Lock()

    def process_batch(
        self,
        json_text: str,
        ticker_counts: MutableMapping[str, int],
        records: MutableMapping[str, TickerRecord],
    ) -> BatchResult:
        result = BatchResult()
        try:
            data = orjson.loads(json_text)
        except orjson.JSONDecodeError as exc:
            self._reject(result, str(exc))
            return result

        if data is None:
            return result
        if not isinstance(data, list):
            self._reject(result, f"expected a JSON array, got {type(data).__name__}")
            return result

        for entry in data:
            if entry is None:
                continue
            try:
                record = record_from_entry(entry)
            except ValueError as exc:
                result.skipped += 1
                self.sink.log(f"Skipped entry: {exc}")
                log.warning("aggregate.entry_skipped", extra={"reason": str(exc)})
                continue
            self.save_ticker(record.ticker, ticker_counts)
            self.save_record(record, records)
            result.applied += 1
        return result

    def save_ticker(self, ticker: str, ticker_counts: MutableMapping[str, int]) -> None:
        with self._lock:
            ticker_counts[ticker] = ticker_counts.get(ticker, 0) + 1
        self.sink.log(f"Saved Ticker: {ticker}")

    def save_record(self, record: TickerRecord, records: MutableMapping[str, TickerRecord]) -> None:
        sentiment, comments = record.sentiment, record.comment_count
        with self._lock:
            existing = records.get(record.ticker)
            if existing is None:
                records[record.ticker] = record
            else:
                existing.merge(record)
        self.sink.log(
            f"Saved Record: Ticker - {record.ticker}, Sentiment - {sentiment}, Comments - {comments}"
        )

    def _reject(self, result: BatchResult, reason: str) -> None:
        result.rejected = True
        self.sink.log(f"Error deserializing response: {reason}")
        log.warning("aggregate.batch_rejected", extra={"reason": reason})


__all__ = ["EntryError", "SentimentAggregator", "record_from_entry"]
