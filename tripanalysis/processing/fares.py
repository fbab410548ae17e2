import math
from typing import Literal

from ..models import CalendarWindow

Leg = Literal["outbound", "return"]
LEGS: tuple[str, ...] = ("outbound", "return")


def round_to(amount: int | float, increment: int) -> int:
    """Nearest multiple of ``increment``; halves go up (4750 -> 5000 for 500), not to even."""
    if increment <= 0:
        raise ValueError(f"Rounding increment must be positive, got {increment}")
    return int(math.floor(amount / increment + 0.5)) * increment


class FareTable:
    """Read-only per-traveler, per-leg fare lookup indexed by window ordinal."""

    def __init__(self, window: CalendarWindow, fares: dict[str, dict[str, list[int]]], currency: str = "INR"):
        self.window = window
        self.currency = currency
        self._fares: dict[str, dict[str, tuple[int, ...]]] = {}
        for traveler, legs in fares.items():
            if set(legs) != set(LEGS):
                raise ValueError(f"Traveler {traveler} must have exactly legs {LEGS}, got {sorted(legs)}")
            self._fares[traveler] = {}
            for leg, amounts in legs.items():
                if len(amounts) != len(window):
                    raise ValueError(
                        f"{traveler}/{leg}: {len(amounts)} fares for a {len(window)}-day window")
                if any(amount <= 0 for amount in amounts):
                    raise ValueError(f"{traveler}/{leg}: fares must be positive")
                self._fares[traveler][leg] = tuple(amounts)

    @property
    def travelers(self) -> tuple[str, ...]:
        return tuple(self._fares)

    def fare(self, traveler: str, leg: Leg, ordinal: int, round_increment: int | None = None) -> int:
        if not self.window.contains(ordinal):
            raise ValueError(f"Ordinal {ordinal} outside window 1..{len(self.window)}")
        amount = self._fares[traveler][leg][ordinal - 1]
        return round_to(amount, round_increment) if round_increment is not None else amount

    def trip_cost(self, traveler: str, start_day: int, end_day: int, round_increment: int | None = None) -> int:
        # each leg is rounded on its own before summing
        return (self.fare(traveler, "outbound", start_day, round_increment)
                + self.fare(traveler, "return", end_day, round_increment))
