"""Shared fixtures: isolated global state, fake clock, captured logs."""

from __future__ import annotations

from dataclasses import dataclass, field

import pytest

from optionkit import clear_settings_cache, reset_cache, reset_service
from optionkit.runtime.observability.logging import BoundLogger, LogEntry, configure_logging


@dataclass
class FakeClock:
    """Manually advanced time source."""
    now: float = 1_000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@dataclass
class CaptureRenderer:
    """Renderer that keeps entries for assertions."""
    entries: list[LogEntry] = field(default_factory=list)

    def render(self, entry: LogEntry) -> None:
        self.entries.append(entry)

    def events(self, level: str | None = None) -> list[str]:
        return [e.event for e in self.entries if level is None or e.level == level]


@pytest.fixture(autouse=True)
def clean_state() -> object:
    """Reset default service, cache and settings around each test."""
    configure_logging(format="none")
    clear_settings_cache()
    reset_cache()
    reset_service()
    yield
    reset_service()
    reset_cache()
    clear_settings_cache()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def capture() -> CaptureRenderer:
    return CaptureRenderer()


@pytest.fixture
def logger(capture: CaptureRenderer) -> BoundLogger:
    return BoundLogger(context={"logger": "test"}, _renderer=capture)


@pytest.fixture
def status_items() -> list[dict[str, str]]:
    return [
        {"label": "啟用", "value": "ACTIVE"},
        {"label": "停用", "value": "INACTIVE"},
    ]
