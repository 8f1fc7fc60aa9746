import logging
import sys
from typing import List, Optional

_CLI_FORMAT = "%(name)s - %(levelname)s - %(message)s"
_SERVER_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class _MaxLevelFilter(logging.Filter):
    def __init__(self, max_level: int) -> None:
        super().__init__()
        self._max_level = max_level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno <= self._max_level


def _install(level: int, formatter: logging.Formatter, handlers: List[logging.Handler]) -> None:
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)


def configure_split_stream_logging(
    *,
    level: int = logging.INFO,
    stderr_level: int = logging.WARNING,
    formatter: Optional[logging.Formatter] = None,
) -> None:
    """Route records below ``stderr_level`` to stdout and the rest to stderr.

    The lint CLI prints its report on stdout; schema loading problems stay
    visible on stderr.
    """
    stderr_level = max(stderr_level, logging.DEBUG)

    stdout_handler = logging.StreamHandler(stream=sys.stdout)
    stdout_handler.addFilter(_MaxLevelFilter(stderr_level - 1))

    stderr_handler = logging.StreamHandler(stream=sys.stderr)
    stderr_handler.setLevel(stderr_level)

    _install(level, formatter or logging.Formatter(_CLI_FORMAT), [stdout_handler, stderr_handler])


def configure_stderr_logging(
    *,
    level: int = logging.INFO,
    formatter: Optional[logging.Formatter] = None,
    log_file: Optional[str] = None,
) -> None:
    """Send every record to stderr, and to ``log_file`` when given.

    stdout carries the language server protocol stream.
    """
    handlers: List[logging.Handler] = [logging.StreamHandler(stream=sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    _install(level, formatter or logging.Formatter(_SERVER_FORMAT), handlers)
