from __future__ import annotations

import os
from typing import Dict, List, Optional

import pytest

from sentibatch.core.config import reset_settings


class RecordingSink:
    """Progress sink that keeps every line in memory."""

    def __init__(self) -> None:
        self.lines: List[str] = []

    def log(self, message: str) -> None:
        self.lines.append(message)


class FakeClock:
    """Monotonic clock whose ``sleep`` advances time instantly."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start
        self.sleeps: List[float] = []

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class FakeResponse:
    def __init__(
        self,
        status_code: int = 200,
        text: str = "[]",
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        self.status_code = status_code
        self.text = text
        self.headers = headers or {}


class FakeSession:
    """Replays queued responses (or raises queued exceptions) for ``get``."""

    def __init__(self, responses=None, default: Optional[FakeResponse] = None) -> None:
        self.responses = list(responses or [])
        self.default = default
        self.calls: List[Dict[str, object]] = []

    def get(self, url, timeout=None):
        self.calls.append({"url": url, "timeout": timeout})
        if self.responses:
            item = self.responses.pop(0)
        elif self.default is not None:
            item = self.default
        else:
            raise AssertionError(f"unexpected request for {url}")
        if isinstance(item, Exception):
            raise item
        return item


@pytest.fixture(autouse=True)
def clean_settings_env(monkeypatch):
    for name in list(os.environ):
        if name.startswith("SENTI_"):
            monkeypatch.delenv(name, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_session():
    return FakeSession


@pytest.fixture
def fake_response():
    return FakeResponse
