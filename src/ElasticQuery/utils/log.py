"""Package logger and its command-line setup.

Library modules only ever write to `log`. Handlers are installed by
`configure_logging`, which the CLI runner calls once per action; records look
like ``10-19 14:03:07 [WARN] Invalid sorting field: nope``.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Final

LOG_FORMAT: Final = "%(asctime)s [%(levelabbr)s] %(message)s"
DATE_FORMAT: Final = "%m-%d %H:%M:%S"

_LEVEL_ABBREV: Final[dict[int, str]] = {
    logging.DEBUG: "DEBG",
    logging.INFO: "INFO",
    logging.WARNING: "WARN",
    logging.ERROR: "ERRO",
    logging.CRITICAL: "ERRO",
}

log = logging.getLogger("ElasticQuery")


class _AbbrevLevelFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # noqa: A003 - record is stdlib name
        record.levelabbr = _LEVEL_ABBREV.get(record.levelno, record.levelname[:4])
        return super().format(record)


def log_file_path(log_dir: str, action: str, now: datetime | None = None) -> Path:
    """Return ``<log_dir>/<action>/<action>_<mmddHHMMSS>.log``."""
    stamp = (now or datetime.now()).strftime("%m%d%H%M%S")
    return Path(log_dir or "log") / action / f"{action}_{stamp}.log"


def configure_logging(
    *,
    level: str = "INFO",
    action: str | None = None,
    log_to_file: bool = False,
    log_dir: str = "log",
) -> None:
    """Install the stream handler (and optionally a file handler) on `log`.

    Args:
        level: Threshold of the stream handler (DEBUG, INFO, ...).
        action: CLI action name; names the log file when one is written.
        log_to_file: Also write every record, DEBUG included, to a file.
        log_dir: Base directory of log files.
    """
    threshold = getattr(logging, (level or "INFO").upper(), logging.INFO)
    formatter = _AbbrevLevelFormatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    # stdout carries the JSON output of the CLI, keep logs on stderr
    console = logging.StreamHandler()
    console.setLevel(threshold)
    console.setFormatter(formatter)
    handlers: list[logging.Handler] = [console]

    if log_to_file and action:
        path = log_file_path(log_dir, action)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    reset_logging()
    for handler in handlers:
        log.addHandler(handler)
    log.setLevel(min(logging.DEBUG, threshold))
    log.propagate = False


def reset_logging() -> None:
    """Remove the handlers installed by `configure_logging` and re-enable propagation."""
    for handler in list(log.handlers):
        log.removeHandler(handler)
        handler.close()
    log.propagate = True
