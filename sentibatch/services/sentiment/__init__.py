"""Sentiment backfill package initialization."""

__all__ = [
    "types",
    "fetchers",
    "store",
    "runner",
]
