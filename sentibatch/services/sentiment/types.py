"""Dataclasses for sentiment aggregation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


class InvalidTickerError(ValueError):
    """Raised when an entry carries no usable ticker symbol."""


@dataclass(slots=True)
class TickerRecord:
    """Latest sentiment and cumulative comment count for one ticker."""

    ticker: str
    sentiment: Optional[str] = None
    comment_count: int = 0

    def __post_init__(self) -> None:
        if not isinstance(self.ticker, str) or not self.ticker.strip():
            raise InvalidTickerError("ticker must be a non-empty string")
        if self.comment_count < 0:
            raise ValueError("comment_count must be non-negative")

    def merge(self, other: "TickerRecord") -> None:
        """Fold a newer record for the same ticker into this one."""

        self.sentiment = other.sentiment
        self.comment_count += other.comment_count


@dataclass(slots=True)
class BatchResult:
    """Outcome of folding one day's payload."""

    applied: int = 0
    skipped: int = 0
    rejected: bool = False


@dataclass(slots=True)
class BackfillSummary:
    """Totals for a complete backfill run."""

    days: int = 0
    applied: int = 0
    skipped: int = 0
    rejected: int = 0

    def add(self, result: BatchResult) -> None:
        self.days += 1
        self.applied += result.applied
        self.skipped += result.skipped
        if result.rejected:
            self.rejected += 1
