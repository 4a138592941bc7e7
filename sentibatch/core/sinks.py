"""Append-only progress sinks for human-readable run output."""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Protocol, Union


class ProgressSink(Protocol):
    """Anything that can record a single progress line."""

    def log(self, message: str) -> None:
        ...


class ConsoleSink:
    """Write progress lines to standard output."""

    def __init__(self) -> None:
        self._lock = threading.Lock()

    def log(self, message: str) -> None:
        with self._lock:
            print(message, flush=True)


class FileSink:
    """Append progress lines to ``path``, creating it on first use."""

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.touch(exist_ok=True)

    def log(self, message: str) -> None:
        # text mode translates "\n" to the platform line separator
        with self._lock:
            with self.path.open("a", encoding="utf-8") as handle:
                handle.write(message + "\n")


def build_sink(kind: str, path: Union[str, Path, None] = None) -> ProgressSink:
    """Return the sink selected by ``kind`` (``console`` or ``file``)."""

    if kind == "console":
        return ConsoleSink()
    if kind == "file":
        if path is None:
            raise ValueError("file sink requires a path")
        return FileSink(path)
    raise ValueError(f"unknown sink kind: {kind!r}")


__all__ = ["ProgressSink", "ConsoleSink", "FileSink", "build_sink"]
