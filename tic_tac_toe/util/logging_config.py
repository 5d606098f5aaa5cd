"""Logging configuration for tic_tac_toe."""

import logging
import sys
from typing import Final

FORMATS: Final = {
    "simple": "%(name)s - %(levelname)s - %(message)s",
    "detailed": "%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s",
}


def setup_logging(level: str = "WARNING", format_style: str = "simple") -> None:
    """Configure the root logger.

    Logs go to stderr so the terminal UI owns stdout.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        format_style: "simple" or "detailed".
    """
    numeric_level = getattr(logging, level.upper(), logging.WARNING)
    log_format = FORMATS.get(format_style, FORMATS["simple"])

    logging.basicConfig(
        level=numeric_level,
        format=log_format,
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )
