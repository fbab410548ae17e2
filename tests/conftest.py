from datetime import date
from pathlib import Path

import pytest

from tripanalysis.models import CalendarWindow, InputSnapshot
from tripanalysis.processing.base import load_calendar, load_fare_table
from tripanalysis.processing.calendar_annotator import CalendarAnnotator

DATA_DIR = Path(__file__).resolve().parents[1] / "data"


@pytest.fixture()
def window() -> CalendarWindow:
    return CalendarWindow(date(2025, 4, 1), date(2025, 5, 10))


@pytest.fixture()
def fares(window):
    return load_fare_table(DATA_DIR / "fares.json", window)


@pytest.fixture()
def calendar():
    return load_calendar(DATA_DIR / "calendar.json")


@pytest.fixture()
def annotator(calendar) -> CalendarAnnotator:
    return CalendarAnnotator(calendar)


@pytest.fixture()
def snapshot() -> InputSnapshot:
    return InputSnapshot(durations=frozenset({6, 7, 8, 9, 10}))
