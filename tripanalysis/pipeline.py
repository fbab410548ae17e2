"""Generate -> filter -> sort orchestration plus the command line entry point.

Usage patterns:

1. One-off report for 7 and 8 day trips, cheapest total first:
   trip-analysis --durations 7 8

2. Cap two travelers and show amounts in EUR once the rate arrives:
   trip-analysis --durations 6 7 --max-price hasan=12000 --max-price hatim=30000 --currency EUR
"""
import argparse
import dataclasses
import enum
import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Sequence

from tripanalysis.config import settings
from tripanalysis.emailer import send_report
from tripanalysis.logging_config import setup_logging
from tripanalysis.models import CalendarWindow, InputSnapshot, Option, SortState
from tripanalysis.processing.base import load_calendar, load_fare_table
from tripanalysis.processing.calendar_annotator import CalendarAnnotator
from tripanalysis.processing.fares import FareTable
from tripanalysis.processing.generator import DEFAULT_DURATIONS, generate
from tripanalysis.processing.ranking import filter_options, filter_state_from_inputs, sort_options
from tripanalysis.rates.exchange_rate import ExchangeRateProvider, RateStatus
from tripanalysis.report.html_report import render_report


class PipelineStage(enum.Enum):
    IDLE = "idle"
    GENERATED = "generated"
    FILTERED = "filtered"
    SORTED = "sorted"
    RENDERED = "rendered"


@dataclass(frozen=True, slots=True)
class PipelineResult:
    stage: PipelineStage
    options: tuple[Option, ...] = ()
    generated_count: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.options


def run_pipeline(snapshot: InputSnapshot, window: CalendarWindow, fares: FareTable, annotator: CalendarAnnotator,
                 rate: float | None = None, progress: bool = False) -> PipelineResult:
    if not snapshot.durations:
        return PipelineResult(PipelineStage.IDLE)
    generated = generate(snapshot, window, fares, annotator, progress=progress)
    filtered = filter_options(generated, snapshot.filters, rate)
    logging.debug("%d of %d options within price ceilings", len(filtered), len(generated))
    ordered = sort_options(filtered, snapshot.sort, rate)
    logging.debug("Sorted by %s (%s)", snapshot.sort.key, snapshot.sort.direction)
    return PipelineResult(PipelineStage.SORTED, tuple(ordered), len(generated))


class TripAnalysisSession:
    """Holds the current input snapshot and recomputes the whole pipeline on every change."""

    def __init__(self, snapshot: InputSnapshot, window: CalendarWindow, fares: FareTable,
                 annotator: CalendarAnnotator, rate_provider: ExchangeRateProvider | None = None,
                 on_refresh: Callable[["TripAnalysisSession"], None] | None = None, progress: bool = False):
        self.snapshot = snapshot
        self.window = window
        self.fares = fares
        self.annotator = annotator
        self.rate_provider = rate_provider
        self.on_refresh = on_refresh
        self.progress = progress
        self.result = PipelineResult(PipelineStage.IDLE)
        self._lock = threading.Lock()
        if rate_provider is not None:
            rate_provider.on_ready = self._on_rate_ready

    @property
    def rate(self) -> float | None:
        provider = self.rate_provider
        if provider is None or provider.target != self.snapshot.display_currency.upper():
            return None
        return provider.rate

    @property
    def rate_status(self) -> RateStatus:
        return self.rate_provider.status if self.rate_provider else RateStatus.NOT_NEEDED

    def start(self) -> PipelineResult:
        result = self.refresh()
        if self.rate_provider is not None:
            self.rate_provider.start()
        return result

    def update(self, **changes) -> PipelineResult:
        self.snapshot = dataclasses.replace(self.snapshot, **changes)
        return self.refresh()

    def refresh(self) -> PipelineResult:
        with self._lock:
            self.result = run_pipeline(self.snapshot, self.window, self.fares, self.annotator, self.rate,
                                       progress=self.progress)
            if self.on_refresh:
                self.on_refresh(self)
        return self.result

    def render(self) -> str:
        html = render_report(
            list(self.result.options), self.annotator, self.fares.travelers,
            base_currency=self.fares.currency, display_currency=self.snapshot.display_currency,
            rate=self.rate, rate_status=self.rate_status,
        )
        self.result = dataclasses.replace(self.result, stage=PipelineStage.RENDERED)
        return html

    def _on_rate_ready(self, rate: float) -> None:
        logging.info("Conversion rate available, refreshing options")
        self.refresh()


def _price_ceiling(value: str) -> tuple[str, str]:
    name, sep, limit = value.partition("=")
    if not sep or not name:
        raise argparse.ArgumentTypeError(f"Expected NAME=VALUE, got {value!r}")
    return name.strip().lower(), limit


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Trip option analysis for a group of travelers")
    p.add_argument("--durations", type=int, nargs="*", default=list(DEFAULT_DURATIONS),
                   help="Trip durations in days (no values = nothing to show)")
    p.add_argument("--max-price", type=_price_ceiling, action="append", default=[], metavar="NAME=VALUE",
                   help="Per-traveler price ceiling in display currency, repeatable")
    p.add_argument("--no-round", action="store_true", help="Use exact fares instead of rounded ones")
    p.add_argument("--round-increment", type=int, default=settings.round_increment)
    p.add_argument("--sort", default="total", help="dates, leaves, duration, total or a traveler name")
    p.add_argument("--desc", action="store_true", help="Sort descending")
    p.add_argument("--currency", default=settings.display_currency, help="Display currency code")
    p.add_argument("--wait-rate", type=float, default=5.0, metavar="SECONDS",
                   help="How long to wait for the conversion rate before finishing")
    p.add_argument("--output", type=Path, default=settings.output_html)
    p.add_argument("--email", action="store_true", help="Send email if credentials configured")
    p.add_argument("--progress", action="store_true", help="Show a progress bar while generating")
    p.add_argument("--log-level", default="INFO")
    return p


def main_cli(argv: Sequence[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    setup_logging(args.log_level)

    try:
        window = settings.window()
        fares = load_fare_table(settings.fares_file, window, base_currency=settings.base_currency)
        annotator = CalendarAnnotator(load_calendar(settings.calendar_file))
        snapshot = InputSnapshot(
            durations=frozenset(args.durations),
            filters=filter_state_from_inputs(dict(args.max_price)),
            round_fares=not args.no_round,
            round_increment=args.round_increment,
            sort=SortState(args.sort, "desc" if args.desc else "asc"),
            display_currency=args.currency.upper(),
        )
        provider = ExchangeRateProvider(fares.currency, snapshot.display_currency)

        def _write_report(session: TripAnalysisSession) -> None:
            args.output.write_text(session.render(), encoding="utf-8")
            logging.info("%d options written to %s", len(session.result.options), args.output)

        session = TripAnalysisSession(snapshot, window, fares, annotator, provider,
                                      on_refresh=_write_report, progress=args.progress)
        session.start()
        if not provider.wait(args.wait_rate):
            logging.warning("Conversion rate not received within %ss, report stays in %s",
                            args.wait_rate, fares.currency)

        if args.email:
            send_report(args.output)
    except Exception:  # noqa: BLE001
        logging.exception("Pipeline failed")
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main_cli())
