"""Sequential backfill of daily Reddit sentiment over a fixed date range."""
from __future__ import annotations

import calendar
import datetime as dt
import logging
from typing import Dict, Iterator, Sequence

from sentibatch.core.sinks import ProgressSink
from sentibatch.services.sentiment.fetchers import TradestieFetcher, build_url
from sentibatch.services.sentiment.store import SentimentAggregator
from sentibatch.services.sentiment.types import BackfillSummary, TickerRecord

YEAR = 2023
MONTHS: Sequence[int] = (4, 5, 6)


def iter_days(year: int = YEAR, months: Sequence[int] = MONTHS) -> Iterator[dt.date]:
    """Yield every calendar day of ``months`` in ``year``, in order."""

    for month in months:
        _, days_in_month = calendar.monthrange(year, month)
        for day in range(1, days_in_month + 1):
            yield dt.date(year, month, day)


class SentimentBackfill:
    """Fetch and aggregate each day in turn, then report the totals.

    Days are processed one at a time so progress lines stay in date order.
    """

    def __init__(
        self,
        fetcher: TradestieFetcher,
        aggregator: SentimentAggregator,
        sink: ProgressSink,
        base_url: str,
    ) -> None:
        self.fetcher = fetcher
        self.aggregator = aggregator
        self.sink = sink
        self.base_url = base_url
        self.ticker_counts: Dict[str, int] = {}
        self.records: Dict[str, TickerRecord] = {}
        self.log = logging.getLogger("sentibatch.backfill")

    def process_day(self, day: dt.date, summary: BackfillSummary) -> None:
        url = build_url(self.base_url, day)
        body = self.fetcher.fetch(url)
        result = self.aggregator.process_batch(body, self.ticker_counts, self.records)
        summary.add(result)
        self.log.debug(
            "backfill.day",
            extra={"day": day.isoformat(), "applied": result.applied, "skipped": result.skipped},
        )

    def run(self) -> BackfillSummary:
        summary = BackfillSummary()
        for day in iter_days():
            self.process_day(day, summary)
        self.display_collections()
        self.store_in_database()
        self.log.info(
            "backfill.complete",
            extra={
                "days": summary.days,
                "applied": summary.applied,
                "skipped": summary.skipped,
                "rejected": summary.rejected,
                "tickers": len(self.ticker_counts),
            },
        )
        return summary

    def display_collections(self) -> None:
        self.sink.log("")
        self.sink.log("Ticker Collection:")
        for ticker, count in self.ticker_counts.items():
            self.sink.log(f"Ticker: {ticker}, Records Count: {count}")

        self.sink.log("")
        self.sink.log("Record Collection:")
        for record in self.records.values():
            self.sink.log(
                f"Ticker: {record.ticker}, Sentiment: {record.sentiment}, "
                f"Comments: {record.comment_count}"
            )

    def store_in_database(self) -> None:
        # placeholder: nothing is persisted
        self.sink.log("")
        self.sink.log(
            f"Placeholder store: skipping database write for {len(self.ticker_counts)} tickers "
            f"and {len(self.records)} records."
        )


__all__ = ["MONTHS", "YEAR", "SentimentBackfill", "iter_days"]
