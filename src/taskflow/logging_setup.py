# src/taskflow/logging_setup.py

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

CONSOLE_FORMAT = "%(levelname)s %(name)s: %(message)s"
FILE_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s [%(threadName)s] %(name)s: %(message)s"


class ConsoleFilter(logging.Filter):
    """
    Keeps stderr readable while the REPL owns the terminal.

    Records from our own package pass, except loggers listed in `quiet`
    (background threads that would interleave with the prompt), which need
    WARNING. Everything else, captured warnings included, needs ERROR.
    """

    def __init__(
        self,
        *,
        package: str = "taskflow",
        quiet: tuple[str, ...] = ("taskflow.tasks.autosave",),
    ) -> None:
        super().__init__()
        self.package = package
        self.quiet = frozenset(quiet)

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name in self.quiet:
            return record.levelno >= logging.WARNING
        if record.name == self.package or record.name.startswith(self.package + "."):
            return True
        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path = ".local/taskflow",
    log_name: str = "taskflow.log",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
    max_bytes: int = 1_000_000,
    backups: int = 3,
) -> Path:
    """Install the stderr and rotating file handlers on the root logger; returns the log file path."""
    log_file = Path(log_dir) / log_name
    log_file.parent.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    for h in list(root.handlers):
        root.removeHandler(h)
    root.setLevel(min(console_level, file_level))

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    console.addFilter(ConsoleFilter())
    root.addHandler(console)

    rotating = RotatingFileHandler(log_file, maxBytes=max_bytes, backupCount=backups, encoding="utf-8")
    rotating.setLevel(file_level)
    rotating.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    root.addHandler(rotating)

    logging.captureWarnings(True)
    return log_file
