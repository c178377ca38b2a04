"""Logging setup for video2gif."""

from __future__ import annotations

import logging
import sys

from .errors import InvalidOption

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


def setup_logging(level: str = "WARNING") -> None:
    """Configure root logging once for a CLI run.

    Log records go to stderr so they never mix with the conversion summary
    printed on stdout.
    """
    level_value = getattr(logging, level.upper(), None)
    if not isinstance(level_value, int):
        raise InvalidOption(f"Unknown log level: {level}")
    logging.basicConfig(
        level=level_value,
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
        force=True,
    )
