"""Configuration utilities.

Environment driven settings (data files, calendar window, currencies, email credentials).
Keeps os.getenv calls out of the engine code.
"""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .models import CalendarWindow
from .processing.base import parse_date

# Load .env once on module import
load_dotenv()


@dataclass(slots=True)
class Settings:
    fares_file: Path = Path(os.getenv("FARES_FILE", "data/fares.json"))
    calendar_file: Path = Path(os.getenv("CALENDAR_FILE", "data/calendar.json"))
    window_start: str = os.getenv("WINDOW_START", "2025-04-01")
    window_end: str = os.getenv("WINDOW_END", "2025-05-10")
    base_currency: str = os.getenv("BASE_CURRENCY", "INR")
    display_currency: str = os.getenv("DISPLAY_CURRENCY", "INR")
    round_increment: int = int(os.getenv("ROUND_INCREMENT", "500"))
    rate_url: str = os.getenv("RATE_URL", "https://open.er-api.com/v6/latest/{base}")
    rate_timeout: float = float(os.getenv("RATE_TIMEOUT", "10"))
    output_html: Path = Path(os.getenv("OUTPUT_HTML", "trip_options.html"))
    src_mail: str | None = os.getenv("SRC_MAIL")
    src_pwd: str | None = os.getenv("SRC_PWD")
    dst_mail: str | None = os.getenv("DST_MAIL")

    def email_configured(self) -> bool:
        return all([self.src_mail, self.src_pwd, self.dst_mail])

    def window(self) -> CalendarWindow:
        return CalendarWindow(parse_date(self.window_start), parse_date(self.window_end))


settings = Settings()
