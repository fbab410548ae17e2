import logging
import math
from typing import Any, Callable, Iterable, Mapping

from ..models import FilterState, Option, SortState

STATIC_SORT_KEYS = ("dates", "leaves", "duration")


def convert(amount: float, rate: float | None) -> float:
    """Base-currency amount in display currency; without a rate the amount passes through unchanged."""
    return amount * rate if rate else amount


def parse_ceiling(raw: str | float | int | None) -> float | None:
    """Ceiling text to a number. Empty or non-numeric input means no limit."""
    if raw is None:
        return None
    if isinstance(raw, (int, float)):
        return float(raw)
    raw = raw.strip()
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError:
        logging.debug("Ignoring non-numeric price ceiling %r", raw)
        return None
    return None if math.isnan(value) else value


def filter_state_from_inputs(inputs: Mapping[str, str | float | None]) -> FilterState:
    return FilterState({name: parse_ceiling(value) for name, value in inputs.items()})


def passes_ceilings(option: Option, filters: FilterState, rate: float | None = None) -> bool:
    for traveler, ceiling in filters.active().items():
        if traveler not in option.costs:
            continue
        if convert(option.costs[traveler], rate) > ceiling:
            return False
    return True


def filter_options(options: Iterable[Option], filters: FilterState, rate: float | None = None) -> list[Option]:
    return [option for option in options if passes_ceilings(option, filters, rate)]


def leaves_key(option: Option) -> float:
    # total leave first, ties broken by the first jurisdiction's leave
    values = list(option.leave_days.values())
    if not values:
        return 0
    return sum(values) * 100 + values[0]


def sort_key_for(key: str, rate: float | None = None) -> Callable[[Option], Any]:
    if key == "dates":
        # label string, so "May 1" sorts before "April 9"; kept as-is on purpose
        return lambda option: option.start_label
    if key == "leaves":
        return leaves_key
    if key == "duration":
        return lambda option: option.duration
    return lambda option: convert(option.costs[key], rate)


def available_sort_keys(travelers: Iterable[str]) -> tuple[str, ...]:
    return STATIC_SORT_KEYS + tuple(travelers) + ("total",)


def sort_options(options: Iterable[Option], sort: SortState, rate: float | None = None) -> list[Option]:
    """Stable sort; equal keys keep generation order in both directions."""
    options = list(options)
    if options and sort.key not in STATIC_SORT_KEYS and sort.key not in options[0].costs:
        raise ValueError(f"Unknown sort key {sort.key!r}, expected one of "
                         f"{available_sort_keys(options[0].travelers)}")
    return sorted(options, key=sort_key_for(sort.key, rate), reverse=sort.direction == "desc")
