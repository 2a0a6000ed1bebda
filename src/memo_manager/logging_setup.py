# src/memo_manager/logging_setup.py

from __future__ import annotations

import logging
from pathlib import Path

from tqdm import tqdm

LOG_FILE_NAME = "memo-manager.log"

_OWN_PREFIX = "memo_manager"
_QUIET_LOGGERS = ("httpx", "httpcore", "openai")


class _ConsoleNoiseFilter(logging.Filter):
    """Own records pass at any level; everything else only at ERROR+."""

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if name == _OWN_PREFIX or name.startswith(_OWN_PREFIX + "."):
            return True
        return record.levelno >= logging.ERROR


class _TqdmConsoleHandler(logging.StreamHandler):
    """Writes through tqdm so log lines don't tear an active progress bar."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            tqdm.write(self.format(record), file=self.stream)
        except Exception:
            self.handleError(record)


def _formatter() -> logging.Formatter:
    return logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def setup_logging(
    *,
    log_dir: str | Path = ".local/memo-manager",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Route all logging to a filtered console handler and a full log file.

    Replaces whatever handlers the root logger had, so calling it twice
    does not duplicate output. Returns the log file path.
    """
    log_file = Path(log_dir) / LOG_FILE_NAME
    log_file.parent.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    console = _TqdmConsoleHandler()
    console.setLevel(console_level)
    console.addFilter(_ConsoleNoiseFilter())

    logfile = logging.FileHandler(log_file, encoding="utf-8")
    logfile.setLevel(file_level)

    for handler in (console, logfile):
        handler.setFormatter(_formatter())
        root.addHandler(handler)

    # Warnings land in the file; the console filter keeps them off screen.
    logging.captureWarnings(True)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return log_file
