import collections.abc
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Iterator, Literal, Mapping

SortDirection = Literal["asc", "desc"]


@dataclass(frozen=True, slots=True)
class CalendarWindow:
    """Bounded run of consecutive calendar days addressed by ordinal (1-based).

    Ordinal ``k`` is ``start + (k - 1) days``, so ordinals ``k`` and ``k + 1`` are always
    consecutive days and the month boundary needs no special handling.
    """
    start: date
    end: date

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise ValueError(f"Window end {self.end} is before start {self.start}")

    def __len__(self) -> int:
        return (self.end - self.start).days + 1

    def ordinals(self) -> range:
        return range(1, len(self) + 1)

    def contains(self, ordinal: int) -> bool:
        return 1 <= ordinal <= len(self)

    def to_date(self, ordinal: int) -> date:
        if not self.contains(ordinal):
            raise ValueError(f"Ordinal {ordinal} outside window 1..{len(self)}")
        return self.start + timedelta(days=ordinal - 1)

    def to_ordinal(self, day: date) -> int:
        ordinal = (day - self.start).days + 1
        if not self.contains(ordinal):
            raise ValueError(f"Date {day} outside window {self.start}..{self.end}")
        return ordinal


@dataclass(frozen=True, slots=True)
class CalendarData:
    """Holiday dates per jurisdiction plus one traveler's hybrid (half) working days.

    All dates are canonical ISO strings kept sorted. Hybrid days only halve leave in
    ``hybrid_jurisdiction``; every other jurisdiction counts them as full working days.
    """
    holidays: Mapping[str, tuple[str, ...]]
    hybrid_days: tuple[str, ...] = ()
    hybrid_owner: str | None = None
    hybrid_jurisdiction: str | None = None

    @property
    def jurisdictions(self) -> tuple[str, ...]:
        return tuple(self.holidays)


@dataclass(frozen=True, slots=True)
class FareData:
    """Raw fare file content: one dense fare list per traveler and leg, starting at ``start_date``."""
    currency: str
    start_date: str
    travelers: dict[str, dict[str, list[int]]]


@dataclass(frozen=True, slots=True)
class TravelerCosts(collections.abc.Mapping):
    """Per-traveler trip cost (outbound + return) plus the group total.

    Reads like a mapping keyed by traveler name, with ``"total"`` as the last key.
    """
    amounts: tuple[tuple[str, int], ...]
    total: int

    @classmethod
    def from_amounts(cls, amounts: Mapping[str, int]) -> "TravelerCosts":
        return cls(tuple(amounts.items()), sum(amounts.values()))

    @property
    def travelers(self) -> tuple[str, ...]:
        return tuple(name for name, _ in self.amounts)

    def __getitem__(self, key: str) -> int:
        if key == "total":
            return self.total
        for name, amount in self.amounts:
            if name == key:
                return amount
        raise KeyError(key)

    def __iter__(self) -> Iterator[str]:
        yield from self.travelers
        yield "total"

    def __len__(self) -> int:
        return len(self.amounts) + 1


@dataclass(frozen=True, slots=True)
class Option:
    """One candidate itinerary. Built fresh on every generation pass, never mutated."""
    start_day: int
    end_day: int
    duration: int
    start_date: date
    end_date: date
    costs: TravelerCosts
    weekend_count: int
    holiday_overlap: Mapping[str, tuple[str, ...]]
    hybrid_overlap: tuple[str, ...]
    leave_days: Mapping[str, float]

    @property
    def total(self) -> int:
        return self.costs.total

    @property
    def start_label(self) -> str:
        return f"{self.start_date:%B} {self.start_date.day}"

    @property
    def end_label(self) -> str:
        return f"{self.end_date:%B} {self.end_date.day}"

    @property
    def travelers(self) -> tuple[str, ...]:
        return self.costs.travelers

    def __hash__(self) -> int:
        # a (start, end) pair identifies an Option within one generation pass
        return hash((self.start_day, self.end_day))


@dataclass(frozen=True, slots=True)
class FilterState:
    """Per-traveler price ceilings in display currency; ``None`` means unconstrained."""
    ceilings: Mapping[str, float | None] = field(default_factory=dict)

    def active(self) -> dict[str, float]:
        return {name: limit for name, limit in self.ceilings.items() if limit is not None}


@dataclass(frozen=True, slots=True)
class SortState:
    key: str = "total"
    direction: SortDirection = "asc"

    def __post_init__(self) -> None:
        if self.direction not in ("asc", "desc"):
            raise ValueError(f"Unknown sort direction: {self.direction}")

    def select(self, key: str) -> "SortState":
        """Clicking the active column flips direction, any other column starts ascending."""
        if key == self.key:
            return SortState(key, "desc" if self.direction == "asc" else "asc")
        return SortState(key, "asc")


@dataclass(frozen=True, slots=True)
class InputSnapshot:
    """Everything the engine reads for one generate -> filter -> sort pass."""
    durations: frozenset[int] = frozenset()
    filters: FilterState = field(default_factory=FilterState)
    round_fares: bool = True
    round_increment: int = 500
    sort: SortState = field(default_factory=SortState)
    display_currency: str = "INR"


@dataclass(frozen=True, slots=True)
class DayAnnotation:
    day: date
    is_weekend: bool
    holiday_in: tuple[str, ...]
    hybrid: bool
    label: str = ""

    @property
    def iso(self) -> str:
        return self.day.isoformat()

    def is_holiday(self, jurisdiction: str) -> bool:
        return jurisdiction in self.holiday_in
