import logging
from types import MappingProxyType
from typing import Iterator

from tqdm import tqdm

from ..models import CalendarWindow, InputSnapshot, Option, TravelerCosts
from .calendar_annotator import CalendarAnnotator, weekend_count
from .fares import FareTable

DEFAULT_DURATIONS = (6, 7, 8, 9, 10)


def valid_pairs(window: CalendarWindow, durations) -> Iterator[tuple[int, int]]:
    """(start_day, duration) pairs whose last day still falls inside the window.

    Durations are walked in ascending order for every start day, which fixes generation order.
    """
    ordered = sorted(d for d in set(durations) if d > 0)
    for start_day in window.ordinals():
        for duration in ordered:
            if window.contains(start_day + duration - 1):
                yield start_day, duration


def build_option(start_day: int, duration: int, window: CalendarWindow, fares: FareTable,
                 annotator: CalendarAnnotator, round_increment: int | None = None) -> Option:
    end_day = start_day + duration - 1
    start_date, end_date = window.to_date(start_day), window.to_date(end_day)

    costs = {traveler: fares.trip_cost(traveler, start_day, end_day, round_increment)
             for traveler in fares.travelers}
    holidays, hybrid = annotator.holidays_in_range(start_date, end_date)

    return Option(
        start_day=start_day,
        end_day=end_day,
        duration=duration,
        start_date=start_date,
        end_date=end_date,
        costs=TravelerCosts.from_amounts(costs),
        weekend_count=weekend_count(start_date, end_date),
        holiday_overlap=MappingProxyType(holidays),
        hybrid_overlap=hybrid,
        leave_days=MappingProxyType(annotator.leave_days(start_date, end_date)),
    )


def generate(snapshot: InputSnapshot, window: CalendarWindow, fares: FareTable, annotator: CalendarAnnotator,
             progress: bool = False) -> list[Option]:
    """Build one Option per valid (start_day, duration) pair.

    An empty duration selection means nothing to show, not every duration.
    """
    if not snapshot.durations:
        logging.info("No durations selected, nothing to generate")
        return []
    round_increment = snapshot.round_increment if snapshot.round_fares else None
    pairs = list(valid_pairs(window, snapshot.durations))
    options = [
        build_option(start_day, duration, window, fares, annotator, round_increment)
        for start_day, duration in tqdm(pairs, desc="Generating options", leave=False, disable=not progress)
    ]
    logging.info("Generated %d options for durations %s", len(options), sorted(snapshot.durations))
    return options
