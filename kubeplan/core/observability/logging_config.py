"""
Logging configuration — one setup call per process.

The CLI calls ``setup_logging`` once, before doing any work. Every
module logs through ``logging.getLogger(__name__)`` and inherits it.

Level precedence:
    --debug / --verbose / --quiet  >  KUBEPLAN_LOG_LEVEL  >  WARNING

Optional file output via KUBEPLAN_LOG_FILE / KUBEPLAN_LOG_FILE_LEVEL.

What shows up at each level:
    WARNING  unsupported wait kinds, errors
    INFO     one line per plan step started / succeeded, run summary
    DEBUG    every kubectl argv, graph shape, race settlement
"""

from __future__ import annotations

import logging
import os
import sys

ENV_LEVEL = "KUBEPLAN_LOG_LEVEL"
ENV_FILE = "KUBEPLAN_LOG_FILE"
ENV_FILE_LEVEL = "KUBEPLAN_LOG_FILE_LEVEL"

# (format, datefmt) by console level
_CONSOLE_FORMATS = {
    logging.DEBUG: ("%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s", "%H:%M:%S"),
    logging.INFO: ("%(asctime)s %(message)s", "%H:%M:%S"),
    logging.WARNING: ("%(levelname)s: %(message)s", None),
}

_FMT_FILE = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s"
_DATEFMT_FILE = "%Y-%m-%d %H:%M:%S"

_NOISY_LOGGERS = ("urllib3", "charset_normalizer")


def level_from_flags(debug: bool = False, verbose: bool = False, quiet: bool = False) -> str:
    """Resolve the console level from CLI flags, then the environment."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    return os.environ.get(ENV_LEVEL, "WARNING")


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
    quiet_third_party: bool = True,
) -> None:
    """Configure the root logger.

    Args:
        level: Console level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional path of a log file (defaults to KUBEPLAN_LOG_FILE).
        log_file_level: Level for the file; defaults to ``level``.
        quiet_third_party: Hold noisy library loggers at WARNING unless DEBUG.
    """
    console_level = _parse_level(level)
    log_file = log_file or os.environ.get(ENV_FILE)
    log_file_level = log_file_level or os.environ.get(ENV_FILE_LEVEL)

    fmt, datefmt = _CONSOLE_FORMATS[_bucket(console_level)]
    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)
    root_level = console_level

    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else console_level
        root_level = min(root_level, file_level)

        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(logging.Formatter(_FMT_FILE, datefmt=_DATEFMT_FILE))
        root.addHandler(fh)

    root.setLevel(root_level)

    if quiet_third_party and console_level > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    logging.raiseExceptions = False


def _bucket(level: int) -> int:
    if level <= logging.DEBUG:
        return logging.DEBUG
    if level <= logging.INFO:
        return logging.INFO
    return logging.WARNING


def _parse_level(level: str | None) -> int:
    """Level name → numeric constant; unknown names fall back to WARNING."""
    if not level:
        return logging.WARNING
    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        return logging.WARNING
    return numeric
