"""Shared pytest fixtures for PomoTimer tests."""

import os
import sys
from datetime import datetime

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtWidgets import QApplication

from pomotimer.timer.driver import TimerDriver
from pomotimer.timer.engine import TimerEngine

from helpers import FakeClock


T0 = datetime(2026, 3, 2, 9, 0, 0)


@pytest.fixture(scope="session")
def qapp():
    """A single QApplication instance shared across the entire test run."""
    app = QApplication.instance() or QApplication(sys.argv)
    yield app


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Point every test at a throwaway settings file."""
    path = tmp_path / "settings.json"
    monkeypatch.setattr("pomotimer.settings.SETTINGS_PATH", path)
    yield path


@pytest.fixture
def clock():
    """Controllable clock starting at 09:00:00."""
    return FakeClock(T0)


@pytest.fixture
def engine(clock):
    """Fresh TimerEngine reading the fake clock."""
    return TimerEngine(clock=clock)


@pytest.fixture
def driver(qapp, clock):
    """Fresh TimerDriver reading the fake clock."""
    return TimerDriver(parent=None, clock=clock)
