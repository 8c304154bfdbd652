"""
Logging helpers for find-reviewers.

Log records go to stderr so they never mix with the report on stdout.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

_LEVELS = (logging.WARNING, logging.INFO, logging.DEBUG)


def verbosity_level(verbosity: int) -> int:
    """
    Map the `-v` count onto a level: none is WARNING, one INFO, more DEBUG.
    """

    return _LEVELS[max(0, min(verbosity, len(_LEVELS) - 1))]


def configure_logging(verbosity: int, stream: Optional[TextIO] = None) -> None:
    """
    Send find-reviewers log records to stream (stderr by default).

    Only the package logger is configured, so libraries that log on the
    root logger are left alone.
    """

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter("find-reviewers: %(levelname)s %(name)s: %(message)s"))

    logger = logging.getLogger("find_reviewers")
    for old in list(logger.handlers):
        logger.removeHandler(old)
    logger.addHandler(handler)
    logger.setLevel(verbosity_level(verbosity))
    logger.propagate = False
