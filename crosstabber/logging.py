"""Terminal and log-file handlers for crosstabber runs.

The terminal shows warnings (``-v`` lowers it to DEBUG).  With an output
directory, every run also appends to ``<output_dir>/.crosstabber/crosstabber.log``
at the level named by ``CROSSTABBER_LOG_LEVEL`` (INFO when unset or
unrecognised).  File lines carry the id of the crosstab being analysed,
taken from ``extra={"crosstab": ...}`` on the log call, or ``-``.
"""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_DIR_NAME = ".crosstabber"
LOG_FILENAME = "crosstabber.log"
LOG_LEVEL_ENV = "CROSSTABBER_LOG_LEVEL"

_ROTATE_AT = 5 * 1024 * 1024
_KEEP_ROTATED = 2

_TERMINAL_FORMAT = "%(levelname)s | %(name)s | %(message)s"
_FILE_FORMAT = "%(asctime)s | %(levelname)-7s | %(crosstab)s | %(name)s | %(message)s"


class _CrosstabField(logging.Filter):
    """Give every record a ``crosstab`` attribute for the file format."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "crosstab"):
            record.crosstab = "-"
        return True


def log_file_path(output_dir: Path) -> Path:
    return output_dir / LOG_DIR_NAME / LOG_FILENAME


def _file_level(name: str | None) -> int:
    """Level constant for a name such as ``debug``; INFO otherwise."""
    level = logging.getLevelName((name or "").strip().upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logging(*, output_dir: Path | None = None, verbose: bool = False) -> None:
    """Replace the root handlers with a terminal handler and an optional file."""
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    root.setLevel(logging.DEBUG)

    terminal = logging.StreamHandler()
    terminal.setLevel(logging.DEBUG if verbose else logging.WARNING)
    terminal.setFormatter(logging.Formatter(_TERMINAL_FORMAT))
    root.addHandler(terminal)

    if output_dir is None:
        return

    path = log_file_path(output_dir)
    path.parent.mkdir(parents=True, exist_ok=True)
    log_file = RotatingFileHandler(
        path, maxBytes=_ROTATE_AT, backupCount=_KEEP_ROTATED, encoding="utf-8"
    )
    log_file.setLevel(_file_level(os.environ.get(LOG_LEVEL_ENV)))
    log_file.addFilter(_CrosstabField())
    log_file.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    root.addHandler(log_file)
