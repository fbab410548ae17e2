import logging
import sys
from typing import TextIO

_QUIET_LOGGERS = ('urllib3', 'requests')


class _LevelColorFormatter(logging.Formatter):
    _COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
    }
    _RESET = '\033[0m'

    def format(self, record: logging.LogRecord) -> str:
        color = self._COLORS.get(record.levelname)
        if not color:
            return super().format(record)
        original = record.levelname
        record.levelname = f"{color}{original}{self._RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = original


def setup_logging(level: int | str = logging.INFO, stream: TextIO | None = None) -> logging.Handler:
    """Console logging with level colors on a terminal, plain text otherwise."""
    if isinstance(level, str):
        level = getattr(logging, level.upper())
    stream = stream or sys.stdout

    log_format = '%(asctime)s [%(levelname)s] %(name)s %(funcName)s():%(lineno)d - %(message)s'
    date_format = '%Y-%m-%d %H:%M:%S'
    formatter_cls = _LevelColorFormatter if stream.isatty() else logging.Formatter

    handler = logging.StreamHandler(stream)
    handler.setLevel(level)
    handler.setFormatter(formatter_cls(log_format, datefmt=date_format))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return handler
