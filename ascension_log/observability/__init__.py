"""
Observability Layer

RESPONSIBILITY: Logging configuration for the outer surfaces

The core only creates module loggers; the CLI and the HTTP server decide
where records go by calling configure_logging() once at startup.

WHAT THIS LAYER MUST NOT DO:
============================
- Modify system behavior
- Swallow errors it logs
"""

from __future__ import annotations
from typing import Union
import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def parse_level(level: Union[int, str]) -> int:
    """Numeric level from a number or a level name such as 'debug'."""
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.strip().upper())
    return value if isinstance(value, int) else logging.WARNING


def configure_logging(level: Union[int, str] = logging.WARNING) -> None:
    """Send log records of `level` and above to stderr."""
    logging.basicConfig(
        level=parse_level(level),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True
    )
    # Quiet down noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
