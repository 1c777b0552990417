"""Logging setup and the log callback handed to collaborators.

Modules log through ``logging.getLogger(__name__)``. Collaborators that
take a printf-style ``log(format, *args)`` callback get one from
make_log_func(); whether it says anything is decided by the verbose flag
passed in, not by any global.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable

_FMT_MINIMAL = "%(message)s"
_FMT_VERBOSE = "%(asctime)s [%(name)s] %(message)s"
_FMT_DEBUG = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d - %(message)s"
_DATEFMT = "%H:%M:%S"
HANDLER_NAME = "chart_fixtures.console"

LogFunc = Callable[..., None]


def setup_logging(level: str = "WARNING") -> logging.Handler:
    """Send log records to stderr with a format suited to the level.

    Calling it again swaps the handler it installed before. Returns the
    installed handler.
    """
    numeric_level = parse_level(level)

    if numeric_level <= logging.DEBUG:
        fmt, datefmt = _FMT_DEBUG, _DATEFMT
    elif numeric_level <= logging.INFO:
        fmt, datefmt = _FMT_VERBOSE, _DATEFMT
    else:
        fmt, datefmt = _FMT_MINIMAL, None

    console = logging.StreamHandler(sys.stderr)
    console.set_name(HANDLER_NAME)
    console.setLevel(numeric_level)
    console.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    # Handlers installed by anyone else stay put
    root = logging.getLogger()
    for handler in [h for h in root.handlers if h.get_name() == HANDLER_NAME]:
        root.removeHandler(handler)
    root.addHandler(console)
    root.setLevel(numeric_level)
    return console


def parse_level(level: str | None) -> int:
    """Convert a level name to its numeric constant, defaulting to WARNING."""
    if not level:
        return logging.WARNING
    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        return logging.WARNING
    return numeric


def make_log_func(verbose: bool, logger: logging.Logger | None = None) -> LogFunc:
    """Build a ``log(format, *args)`` callback.

    Messages go to ``logger`` at INFO when verbose is set and are dropped
    otherwise.
    """
    target = logger or logging.getLogger("chart_fixtures.action")

    def log(fmt: str, *args: object) -> None:
        if verbose:
            target.info(fmt, *args)

    return log
