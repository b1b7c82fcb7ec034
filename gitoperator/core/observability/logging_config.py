"""
Logging configuration — one-time setup for a hook invocation.

Called once at startup by main.py.  Every module that does
``logger = logging.getLogger(__name__)`` inherits this config.

The hook runs once per event batch, so the default console level is
INFO: each run prints one line per watch event plus the clone, branch,
push and PR steps it took. Levels are resolved in precedence order:

    --debug  >  --verbose  >  --quiet  >  GITOP_LOG_LEVEL  >  INFO

Console output goes to stderr only; stdout carries the ``--config``
descriptor the host operator parses. GITOP_LOG_FILE / GITOP_LOG_FILE_LEVEL
add a file sink that keeps full detail.
"""

from __future__ import annotations

import logging
import sys

DEFAULT_LEVEL = "INFO"

# Console format per threshold: (format, datefmt), first match wins
_CONSOLE_FORMATS = (
    (logging.DEBUG, "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s", "%H:%M:%S"),
    (logging.INFO, "%(asctime)s %(message)s", "%H:%M:%S"),
)
# ERROR/WARNING only: bare messages
_FMT_MINIMAL = "%(message)s"

_FMT_FILE = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s"
_DATEFMT_FILE = "%Y-%m-%d %H:%M:%S"


def resolve_level(
    *,
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
    env_level: str | None = None,
) -> str:
    """Pick the console level from CLI flags, then the env var."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    return env_level or DEFAULT_LEVEL


def console_formatter(numeric_level: int) -> logging.Formatter:
    """Formatter for the stderr handler at ``numeric_level``."""
    for threshold, fmt, datefmt in _CONSOLE_FORMATS:
        if numeric_level <= threshold:
            return logging.Formatter(fmt, datefmt=datefmt)
    return logging.Formatter(_FMT_MINIMAL)


def setup_logging(
    level: str = DEFAULT_LEVEL,
    log_file: str | None = None,
    log_file_level: str | None = None,
) -> None:
    """Configure the root logger for this process.

    Args:
        level: Console level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional path to a log file.
        log_file_level: Level for the file; defaults to ``level``.
    """
    console_level = _parse_level(level)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(console_formatter(console_level))

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
    logging.raiseExceptions = False


def _parse_level(level: str | None) -> int:
    """Level name → numeric constant; unknown names fall back to the default."""
    numeric = getattr(logging, (level or DEFAULT_LEVEL).upper(), None)
    if not isinstance(numeric, int):
        return getattr(logging, DEFAULT_LEVEL)
    return numeric
