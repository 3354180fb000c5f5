"""Logging configuration."""

import logging
import os


def setup_logging(level: str | None = None) -> None:
    """Configure root logging for the data store and its callers."""
    level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
