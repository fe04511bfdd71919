import logging
import sys
from os import getenv
from pathlib import Path
from typing import Final, TextIO

from dotenv import load_dotenv

LEVEL_COLORS: Final = {
    logging.DEBUG: "\x1b[38;5;40m",
    logging.INFO: "\x1b[38;5;39m",
    logging.WARNING: "\x1b[38;5;214m",
    logging.ERROR: "\x1b[38;5;196m",
    logging.CRITICAL: "\x1b[1m\x1b[48;5;196m",
}
RESET: Final = "\x1b[0m"

LOG_FORMAT: Final = "[%(asctime)s.%(msecs)03d] [%(levelname)s] [%(source)s] %(message)s"
DATE_FORMAT: Final = "%Y-%m-%dT%H:%M:%S"

PACKAGE_ROOT = Path(__file__).parent


class FamcalFormatter(logging.Formatter):
    """
    Log lines look like `[time] [LEVEL] [api/main.py:42] message`. Paths are
    shown relative to the `famcal` package. With `use_color` the level name
    is colored, which only makes sense when writing to a terminal.
    """

    def __init__(self, *, use_color: bool = False) -> None:
        super().__init__(LOG_FORMAT, datefmt=DATE_FORMAT)

        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        path = Path(record.pathname)

        if path.is_relative_to(PACKAGE_ROOT):
            path = path.relative_to(PACKAGE_ROOT)

        record.source = f"{path}:{record.lineno}"  # type: ignore[attr-defined]

        line = super().format(record)

        if self.use_color and (color := LEVEL_COLORS.get(record.levelno)):
            line = line.replace(
                f"[{record.levelname}]",
                f"[{color}{record.levelname}{RESET}]",
                1,
            )

        return line


def get_log_level() -> int:
    name = getenv("FAMCAL_LOG_LEVEL", "WARNING").upper()

    level = logging.getLevelName(name)

    if not isinstance(level, int):
        raise ValueError(f"FAMCAL_LOG_LEVEL is not a valid log level: {name}")

    return level


def setup(stream: TextIO | None = None) -> logging.Logger:
    load_dotenv()

    stream = stream or sys.stderr

    handler = logging.StreamHandler(stream)
    handler.setFormatter(FamcalFormatter(use_color=stream.isatty()))

    logger = logging.getLogger("famcal")
    logger.setLevel(get_log_level())
    logger.addHandler(handler)

    return logger
