from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Collection, Iterator

from ..models import CalendarData, DayAnnotation

WEEKEND_DAYS = {5, 6}  # Sat, Sun
ISO_FORMAT = "%Y-%m-%d"
NOON = 12


def canonical_date(value: date | datetime | str) -> date:
    """Normalize to a plain calendar date.

    datetimes are pinned to noon first so a late-evening or UTC-shifted timestamp can never
    roll into the neighbouring day.
    """
    if isinstance(value, datetime):
        return value.replace(hour=NOON, minute=0, second=0, microsecond=0).date()
    if isinstance(value, date):
        return value
    return datetime.strptime(value, ISO_FORMAT).date()


def date_key(value: date | datetime | str) -> str:
    return canonical_date(value).strftime(ISO_FORMAT)


def iter_days(start: date | datetime | str, end: date | datetime | str) -> Iterator[date]:
    current = canonical_date(start)
    last = canonical_date(end)
    while current <= last:
        yield current
        current += timedelta(days=1)


def is_weekend(day: date | datetime | str) -> bool:
    return canonical_date(day).weekday() in WEEKEND_DAYS


def working_days(start, end, holidays: Collection[str] = (), hybrid_days: Collection[str] = ()) -> float:
    """Weekdays in ``[start, end]``: holidays count 0, hybrid days 0.5, the rest 1."""
    count = 0.0
    for day in iter_days(start, end):
        if day.weekday() in WEEKEND_DAYS:
            continue
        key = date_key(day)
        if key in holidays:
            continue
        count += 0.5 if key in hybrid_days else 1
    return count


def weekend_count(start, end) -> int:
    return sum(1 for day in iter_days(start, end) if day.weekday() in WEEKEND_DAYS)


class CalendarAnnotator:
    """Weekend / holiday / hybrid-day classification over a fixed ``CalendarData``."""

    def __init__(self, calendar: CalendarData):
        self.calendar = calendar
        self._holiday_sets = {name: frozenset(days) for name, days in calendar.holidays.items()}
        self._hybrid_set = frozenset(calendar.hybrid_days)

    @property
    def jurisdictions(self) -> tuple[str, ...]:
        return self.calendar.jurisdictions

    def classify_day(self, day: date | datetime | str) -> DayAnnotation:
        day = canonical_date(day)
        key = date_key(day)
        holiday_in = tuple(name for name, days in self._holiday_sets.items() if key in days)
        annotation = DayAnnotation(
            day=day,
            is_weekend=day.weekday() in WEEKEND_DAYS,
            holiday_in=holiday_in,
            hybrid=key in self._hybrid_set,
        )
        return replace(annotation, label=self.day_label(annotation))

    def day_label(self, annotation: DayAnnotation) -> str:
        # weekend > holiday everywhere > single jurisdiction (in jurisdiction order) > hybrid
        if annotation.is_weekend:
            return "Weekend"
        if annotation.holiday_in and len(annotation.holiday_in) == len(self.jurisdictions) > 1:
            return f"{' & '.join(name.title() for name in annotation.holiday_in)} Holiday"
        if annotation.holiday_in:
            return f"{annotation.holiday_in[0].title()} Holiday"
        if annotation.hybrid:
            return "Hybrid Day"
        return ""

    def holidays_in_range(self, start, end) -> tuple[dict[str, tuple[str, ...]], tuple[str, ...]]:
        """Holiday dates per jurisdiction and hybrid dates falling inside ``[start, end]``.

        Comparison is on the ISO strings, which order chronologically because they are fixed width.
        """
        start_key, end_key = date_key(start), date_key(end)
        holidays = {
            name: tuple(day for day in days if start_key <= day <= end_key)
            for name, days in self.calendar.holidays.items()
        }
        hybrid = tuple(day for day in self.calendar.hybrid_days if start_key <= day <= end_key)
        return holidays, hybrid

    def leave_days(self, start, end) -> dict[str, float]:
        holidays, hybrid = self.holidays_in_range(start, end)
        return {
            name: working_days(start, end, days, hybrid if name == self.calendar.hybrid_jurisdiction else ())
            for name, days in holidays.items()
        }

    def day_schedule(self, start, end) -> list[DayAnnotation]:
        return [self.classify_day(day) for day in iter_days(start, end)]
