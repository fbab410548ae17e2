from datetime import datetime
from pathlib import Path

from bs4 import BeautifulSoup
from jinja2 import Environment, FileSystemLoader, select_autoescape

from ..models import Option
from ..processing.calendar_annotator import CalendarAnnotator
from ..processing.ranking import convert
from ..rates.exchange_rate import RateStatus

EMPTY_MESSAGE = "No trip options match the current constraints."
TEMPLATES_DIR = Path(__file__).resolve().parents[2] / 'templates'


def highlight_category(option: Option, jurisdictions: tuple[str, ...]) -> str:
    """'both' when every jurisdiction has a holiday in range, else the first one that has, else hybrid/plain."""
    with_holidays = [name for name in jurisdictions if option.holiday_overlap.get(name)]
    if len(jurisdictions) > 1 and len(with_holidays) == len(jurisdictions):
        return 'both'
    if with_holidays:
        return with_holidays[0]
    if option.hybrid_overlap:
        return 'hybrid'
    return 'plain'


def _format_amount(amount: float) -> str:
    return f"{amount:,.0f}"


def _format_leave(days: float) -> str:
    return f"{days:g}"


def _option_row(option: Option, annotator: CalendarAnnotator, rate: float | None) -> dict:
    schedule = [
        {'label': f"{day.day:%a, %b} {day.day.day}", 'kind': day.label, 'weekend': day.is_weekend}
        for day in annotator.day_schedule(option.start_date, option.end_date)
    ]
    return {
        'dates': f"{option.start_label} - {option.end_label}",
        'duration': option.duration,
        'costs': {name: _format_amount(convert(amount, rate)) for name, amount in option.costs.items()},
        'leaves': {name: _format_leave(days) for name, days in option.leave_days.items()},
        'category': highlight_category(option, annotator.jurisdictions),
        'schedule': schedule,
    }


def render_report(options: list[Option], annotator: CalendarAnnotator, travelers: tuple[str, ...],
                  base_currency: str, display_currency: str, rate: float | None = None,
                  rate_status: RateStatus = RateStatus.NOT_NEEDED) -> str:
    currency = display_currency if rate else base_currency
    rows = [_option_row(option, annotator, rate) for option in options]

    env = Environment(loader=FileSystemLoader(str(TEMPLATES_DIR)), autoescape=select_autoescape(['html', 'xml']))
    tpl = env.get_template('options_report.html.j2')
    rendered = tpl.render(
        rows=rows,
        travelers=travelers,
        jurisdictions=annotator.jurisdictions,
        currency=currency,
        conversion_unavailable=rate_status is RateStatus.UNAVAILABLE,
        conversion_pending=rate_status is RateStatus.PENDING,
        empty_message=EMPTY_MESSAGE,
        generated_at=datetime.now().strftime("%d.%m.%Y %H:%M"),
    )
    soup = BeautifulSoup(rendered, 'lxml')
    return soup.prettify()
