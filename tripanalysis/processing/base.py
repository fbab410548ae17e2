"""Loading of the static fare table and calendar annotations from JSON."""
import json
import logging
from datetime import date, datetime, timedelta
from pathlib import Path

import dacite

from ..models import CalendarData, CalendarWindow, FareData
from .fares import FareTable


def parse_date(date_str: str, formats: list[str] | None = None) -> date:
    if formats is None:
        formats = ["%Y-%m-%d", "%Y/%m/%d", "%d.%m.%Y"]
    for date_format in formats:
        try:
            return datetime.strptime(date_str, date_format).date()
        except ValueError:
            continue
    raise ValueError(f"Date string '{date_str}' not in formats {formats}")


def _read_json(path: Path | str) -> dict:
    with open(path, 'rt', encoding='utf-8') as f:
        return json.load(f)


def _iso_dates(values: list[str]) -> tuple[str, ...]:
    return tuple(sorted({parse_date(value).isoformat() for value in values}))


def load_fare_table(path: Path | str, window: CalendarWindow, base_currency: str | None = None) -> FareTable:
    """Read the fare file and cut each dense fare list down to ``window``.

    The file may cover more days than the window, never fewer. When ``base_currency`` is given the
    file must be priced in it.
    """
    fare_data = dacite.from_dict(data=_read_json(path), data_class=FareData)
    if base_currency and fare_data.currency.upper() != base_currency.upper():
        raise ValueError(f"Fares in {path} are priced in {fare_data.currency}, expected {base_currency}")
    data_start = parse_date(fare_data.start_date)
    offset = (window.start - data_start).days
    if offset < 0:
        raise ValueError(f"Fare data starts {data_start}, after window start {window.start}")
    sliced: dict[str, dict[str, list[int]]] = {}
    for traveler, legs in fare_data.travelers.items():
        sliced[traveler] = {}
        for leg, amounts in legs.items():
            data_end = data_start + timedelta(days=len(amounts) - 1)
            if data_end < window.end:
                raise ValueError(f"{traveler}/{leg} fares end {data_end}, before window end {window.end}")
            sliced[traveler][leg] = amounts[offset:offset + len(window)]
    logging.debug("Loaded fares for %s from %s", list(sliced), path)
    return FareTable(window, sliced, currency=fare_data.currency)


def load_calendar(path: Path | str) -> CalendarData:
    loaded = _read_json(path)
    hybrid = loaded.get('hybrid_days') or {}
    data_to_parse = dict(
        holidays={name: _iso_dates(days) for name, days in loaded['holidays'].items()},
        hybrid_days=_iso_dates(hybrid.get('dates', [])),
        hybrid_owner=hybrid.get('owner'),
        hybrid_jurisdiction=hybrid.get('jurisdiction'),
    )
    calendar = dacite.from_dict(data=data_to_parse, data_class=CalendarData)
    if calendar.hybrid_jurisdiction and calendar.hybrid_jurisdiction not in calendar.holidays:
        raise ValueError(f"Hybrid days refer to unknown jurisdiction {calendar.hybrid_jurisdiction}")
    logging.debug("Loaded calendar with jurisdictions %s from %s", calendar.jurisdictions, path)
    return calendar
