"""Logging setup for the cargo-hdk command line"""

import logging
import sys

# -q, default, -v, -vv
LEVELS = [logging.ERROR, logging.WARNING, logging.INFO, logging.DEBUG]


def level_for(verbosity: int) -> int:
    """Map a verbosity count (-1 for quiet) to a logging level"""
    index = min(max(verbosity + 1, 0), len(LEVELS) - 1)
    return LEVELS[index]


def setup_logging(verbosity: int = 0) -> None:
    root_logger = logging.getLogger("cargo_hdk")
    root_logger.setLevel(level_for(verbosity))
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(handler)
    root_logger.propagate = False
