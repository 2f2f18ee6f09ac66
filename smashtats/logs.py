"""
Logging setup shared by the CLI and the API.

Modules log through logging.getLogger(__name__); this only configures
the root handler once per process.
"""

import logging
import os

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | None = None):
    """
    Configure root logging.

    Args:
        level: Level name (defaults to SMASHTATS_LOG_LEVEL, then INFO)
    """
    level_name = (level or os.getenv("SMASHTATS_LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format=LOG_FORMAT,
    )
    logging.getLogger("smashtats").setLevel(getattr(logging, level_name, logging.INFO))
