"""Structured logging configuration.

This module builds structlog loggers with a stable JSON format.
Each run passes its verbosity tier explicitly, so loggers are wrapped
per call instead of configuring structlog globally.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, TextIO

import structlog

from core.types import Verbosity

_VERBOSITY_LEVELS = {
    # Nothing in iplog logs at critical, so this mutes the run.
    Verbosity.SILENT: logging.CRITICAL,
    Verbosity.LOG: logging.WARNING,
    Verbosity.GENERAL: logging.INFO,
    Verbosity.ALL: logging.DEBUG,
}


def get_logger(
    name: str,
    verbosity: Verbosity = Verbosity.GENERAL,
    stream: TextIO | None = None,
) -> Any:
    """Return a logger filtered to a verbosity tier.

    Args:
        name: Logger name, usually __name__.
        verbosity: Tier that decides the minimum emitted level.
        stream: Output stream, stderr when omitted.

    Returns:
        A structlog bound logger with structured JSON output.
    """
    wrapper_class = structlog.make_filtering_bound_logger(level_for_verbosity(verbosity))
    logger = structlog.wrap_logger(
        structlog.PrintLogger(file=stream or sys.stderr),
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=wrapper_class,
    )
    return logger.bind(logger=name)


def level_for_verbosity(verbosity: Verbosity) -> int:
    """Map a verbosity tier onto a stdlib logging level."""
    return _VERBOSITY_LEVELS[verbosity]
