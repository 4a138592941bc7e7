"""Daily Reddit sentiment backfill for stock tickers."""

__version__ = "0.1.0"
