"""
Logging configuration — one setup call for the bracefence CLI.

Services only do ``logger = logging.getLogger(__name__)``; the CLI calls
``setup_logging`` once before running a command.

Level precedence:
    --debug  >  --verbose  >  --quiet  >  BRACEFENCE_LOG_LEVEL  >  WARNING

A log file can be added with BRACEFENCE_LOG_FILE (and its own level via
BRACEFENCE_LOG_FILE_LEVEL).
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Mapping

ENV_LOG_LEVEL = "BRACEFENCE_LOG_LEVEL"
ENV_LOG_FILE = "BRACEFENCE_LOG_FILE"
ENV_LOG_FILE_LEVEL = "BRACEFENCE_LOG_FILE_LEVEL"

# Console: plain messages at WARNING, timestamps at INFO, file:line at DEBUG
_CONSOLE_FORMATS = {
    logging.DEBUG: ("%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s", "%H:%M:%S"),
    logging.INFO: ("%(asctime)s [%(name)s] %(message)s", "%H:%M:%S"),
}
_FMT_MINIMAL = "%(message)s"

_FMT_FILE = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s"
_DATEFMT_FILE = "%Y-%m-%d %H:%M:%S"

# Loggers that get chatty below WARNING
_NOISY_LOGGERS = ("yaml", "pydantic")


def resolve_level(
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
    environ: Mapping[str, str] | None = None,
) -> str:
    """Pick the console level from CLI flags, then the environment."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    env = os.environ if environ is None else environ
    return env.get(ENV_LOG_LEVEL, "WARNING")


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
    quiet_third_party: bool = True,
) -> None:
    """Configure the root logger for the whole process.

    Args:
        level: Console level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional path to a log file.
        log_file_level: Level for the file handler; defaults to ``level``.
        quiet_third_party: Hold third-party loggers at WARNING unless
            running at DEBUG.
    """
    numeric_level = _parse_level(level)

    fmt, datefmt = _FMT_MINIMAL, None
    for threshold in (logging.DEBUG, logging.INFO):
        if numeric_level <= threshold:
            fmt, datefmt = _CONSOLE_FORMATS[threshold]
            break

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(numeric_level)
    console.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)

    effective_level = numeric_level

    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else numeric_level
        effective_level = min(effective_level, file_level)

        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(logging.Formatter(_FMT_FILE, datefmt=_DATEFMT_FILE))
        root.addHandler(fh)

    root.setLevel(effective_level)

    if quiet_third_party and numeric_level > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    logging.raiseExceptions = False


def _parse_level(level: str | None) -> int:
    """Level name → numeric constant; unknown names fall back to WARNING."""
    if not level:
        return logging.WARNING
    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        return logging.WARNING
    return numeric
