"""Logging setup for the prr command line tool."""

import logging
import os

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def resolve_log_level(verbosity: int = 0, trace: str | None = None) -> int:
    """Map the -v count and $TRACE to a logging level.

    Args:
        verbosity: Number of times -v was given.
        trace: Value of the TRACE environment variable, if any.

    Returns:
        A logging level constant.
    """
    if (trace and trace != "0") or verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    return logging.WARNING


def configure_logging(verbosity: int = 0) -> int:
    """Configure root logging for a prr run and return the chosen level."""
    level = resolve_log_level(verbosity, os.environ.get("TRACE"))
    logging.basicConfig(level=level, format=LOG_FORMAT, force=True)
    # httpx logs every request at INFO, keep it for -vv only
    logging.getLogger("httpx").setLevel(logging.DEBUG if level <= logging.DEBUG else logging.WARNING)
    return level
