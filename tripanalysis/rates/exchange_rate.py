"""One-shot currency conversion rate lookup.

The request runs once on a background thread. Until it finishes (or when it fails) ``rate`` is
``None`` and callers keep working in the fare table's base currency.
"""
import enum
import logging
import threading
from typing import Callable

import requests

from ..config import settings


class RateStatus(enum.Enum):
    PENDING = "pending"
    READY = "ready"
    UNAVAILABLE = "unavailable"
    NOT_NEEDED = "not_needed"


class ExchangeRateProvider:
    def __init__(self, base: str, target: str, url_template: str | None = None, timeout: float | None = None,
                 on_ready: Callable[[float], None] | None = None):
        self.base = base.upper()
        self.target = target.upper()
        self.url_template = url_template or settings.rate_url
        self.timeout = timeout if timeout is not None else settings.rate_timeout
        self.on_ready = on_ready
        self._rate: float | None = None
        self._done = threading.Event()
        self._thread: threading.Thread | None = None
        self.status = RateStatus.PENDING
        if self.base == self.target:
            self.status = RateStatus.NOT_NEEDED
            self._done.set()

    @property
    def rate(self) -> float | None:
        return self._rate if self.status is RateStatus.READY else None

    @property
    def url(self) -> str:
        return self.url_template.format(base=self.base)

    def start(self) -> None:
        """Fire the single request; later calls are no-ops."""
        if self._done.is_set() or self._thread is not None:
            return
        self._thread = threading.Thread(target=self._fetch, name=f"rate-{self.base}-{self.target}", daemon=True)
        self._thread.start()

    def wait(self, timeout: float | None = None) -> bool:
        return self._done.wait(timeout)

    def _request_rate(self) -> float:
        response = requests.get(self.url, timeout=self.timeout)
        response.raise_for_status()
        payload = response.json()
        rate = float(payload['rates'][self.target])
        if rate <= 0:
            raise ValueError(f"Non-positive rate {rate}")
        return rate

    def _fetch(self) -> None:
        try:
            rate = self._request_rate()
        except (requests.RequestException, ValueError, KeyError, TypeError) as exc:
            logging.warning("Currency conversion %s -> %s unavailable: %s", self.base, self.target, exc)
            self.status = RateStatus.UNAVAILABLE
            self._done.set()
            return
        self._rate = rate
        self.status = RateStatus.READY
        logging.info("Conversion rate %s -> %s: %s", self.base, self.target, rate)
        try:
            if self.on_ready:
                self.on_ready(rate)
        except Exception:  # noqa: BLE001
            logging.exception("Refresh after rate update failed")
        finally:
            self._done.set()
