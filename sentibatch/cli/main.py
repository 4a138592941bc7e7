"""Entry-point for the sentiment backfill."""

from __future__ import annotations

import argparse
import sys
from typing import Optional, Sequence

import requests
from dotenv import load_dotenv

from sentibatch.core.config import BackfillSettings, get_settings
from sentibatch.core.logging import setup_logging
from sentibatch.core.rate_limiter import RequestRateLimiter
from sentibatch.core.sinks import build_sink
from sentibatch.services.sentiment.fetchers import TradestieFetcher
from sentibatch.services.sentiment.runner import MONTHS, YEAR, SentimentBackfill
from sentibatch.services.sentiment.store import SentimentAggregator


def build_backfill(
    settings: BackfillSettings, session: Optional[requests.Session] = None
) -> SentimentBackfill:
    """Wire the sink, limiter, fetcher and aggregator from ``settings``."""

    sink = build_sink(settings.sink, settings.log_path)
    limiter = RequestRateLimiter(
        sink,
        limit=settings.rate_limit,
        window=settings.rate_window_sec,
    )
    fetcher = TradestieFetcher(
        limiter,
        sink,
        session=session,
        timeout=settings.request_timeout_sec,
        default_retry_after=settings.default_retry_after_sec,
        max_retries=settings.max_retries,
    )
    return SentimentBackfill(
        fetcher,
        SentimentAggregator(sink),
        sink,
        base_url=settings.api_base_url,
    )


def build_parser() -> argparse.ArgumentParser:
    months = ", ".join(str(m) for m in MONTHS)
    return argparse.ArgumentParser(
        prog="sentibatch",
        description=(
            f"Backfill daily Reddit ticker sentiment for months {months} of {YEAR}. "
            "Configured through SENTI_* environment variables."
        ),
    )


def main(argv: Sequence[str] | None = None) -> int:
    build_parser().parse_args(argv)
    load_dotenv(override=False)
    settings = get_settings()
    setup_logging(settings.log_level)
    backfill = build_backfill(settings)
    try:
        backfill.run()
    except KeyboardInterrupt:  # pragma: no cover - manual interruption
        return 130
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())
