"""Logging setup for the API process."""

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Send application logs to stdout at the configured level."""
    logging.basicConfig(format=LOG_FORMAT, stream=sys.stdout, level=level.upper())
    logging.getLogger("todo_api").setLevel(level.upper())
