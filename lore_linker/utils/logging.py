"""
Logging configuration for the lore linker
"""

import logging
import sys
from typing import Optional


def setup_logging(
    level: Optional[str] = None,
    verbose: bool = False,
    format_string: Optional[str] = None
) -> None:
    """
    Set up logging configuration for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        verbose: If True, enable DEBUG level logging
        format_string: Custom format string for log messages
    """
    if verbose:
        level = "DEBUG"
    elif level is None:
        level = "WARNING"

    if format_string is None:
        format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # stderr keeps log lines out of the linked HTML on stdout
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format=format_string,
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )
