"""
Centralized logging configuration for the task list service.
"""

import logging
import sys


def setup_logging(level: str = "INFO") -> None:
    """
    Configure the root logger with a single stdout handler.

    Call this once, from the entry point, before the server starts.
    """
    root = logging.getLogger()
    root.setLevel(level.upper())

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(root.handlers):
        root.removeHandler(h)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    )
    root.addHandler(handler)
