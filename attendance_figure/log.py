"""
Logging helpers for attendance_figure.

Library modules only ever call ``get_logger(__name__)``. Entry points (the
``attendance-figure`` CLI, the inspection CLI, the notebook) call
``configure_logging()`` once to get output on stderr.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional, Union

PACKAGE_LOGGER = "attendance_figure"
LOG_LEVEL_ENV = "ATTENDANCE_FIGURE_LOG_LEVEL"

DEFAULT_FMT = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d: %(message)s"
DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"


def configure_logging(
    level: Optional[Union[str, int]] = None,
    *,
    fmt: Optional[str] = None,
    force: bool = False,
) -> None:
    """
    Attach a stderr handler to the package logger (never the root logger).

    Parameters
    ----------
    level:
        Logging level name or number. Defaults to $ATTENDANCE_FIGURE_LOG_LEVEL,
        or INFO when unset.
    fmt:
        Log record format.
    force:
        Replace existing handlers instead of keeping the first one.
    """
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV, "INFO")
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    if force:
        for h in logger.handlers[:]:
            h.close()
            logger.removeHandler(h)
    else:
        for h in logger.handlers:
            if isinstance(h, logging.StreamHandler) and h.stream is sys.stderr:
                h.setLevel(level)
                return

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(level)
    console.setFormatter(logging.Formatter(fmt=fmt or DEFAULT_FMT, datefmt=DEFAULT_DATEFMT))
    logger.addHandler(console)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    if name is None:
        name = PACKAGE_LOGGER
    return logging.getLogger(name)
