"""Shared test fixtures for Musitype tests."""

import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PySide6.QtWidgets import QApplication  # noqa: E402

from musitype.services.typing_engine import TypingEngine  # noqa: E402


class FakeClock:
    """Monotonic clock the tests move by hand."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_engine(clock):
    """Build a playing engine on the fake clock."""

    def _make(text: str, playing: bool = True) -> TypingEngine:
        return TypingEngine(text, clock=clock, playing=playing)

    return _make


@pytest.fixture(scope="session")
def qapp():
    """One QApplication for widget and timer tests, on the offscreen platform."""
    app = QApplication.instance() or QApplication([])
    yield app
