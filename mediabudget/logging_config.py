"""
MediaBudget - Logging Configuration Module.

Library modules log through `logging.getLogger(__name__)` and never
configure handlers themselves. The CLI calls configure_logging once at
startup; console results are printed separately, so log records go to
stderr.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level: str = "WARNING") -> None:
    """
    Configure root logging settings.

    Args:
        level: "DEBUG", "INFO", "WARNING", "ERROR" or "CRITICAL".
               Unknown names fall back to WARNING.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format=LOG_FORMAT,
        stream=sys.stderr,
    )
    logging.getLogger(__name__).debug("Logging initialised with level %s", level)
