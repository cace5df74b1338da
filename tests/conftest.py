"""
conftest.py — Shared fixtures: offscreen QApplication, fake clock, engines.
"""

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PyQt6.QtWidgets import QApplication

from config import MenuConfig
from engine import BubbleMenuEngine


class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float):
        self.now += ms


@pytest.fixture(scope="session", autouse=True)
def qapp():
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def five_items():
    return [
        {"id": "center", "text": "Menu"},
        {"id": "a1", "text": "One"},
        {"id": "a2", "text": "Two"},
        {"id": "a3", "text": "Three"},
        {"id": "a4", "text": "Four"},
    ]


@pytest.fixture
def make_engine(clock):
    engines = []

    def factory(items, width=800, height=600, config=None):
        engine = BubbleMenuEngine(items, width=width, height=height,
                                  config=config or MenuConfig(), clock=clock)
        engines.append(engine)
        return engine

    yield factory
    for engine in engines:
        engine.unmount()


@pytest.fixture
def engine(make_engine, five_items):
    return make_engine(five_items)
