"""Logging setup shared by the CLI and the web service."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once; later calls only adjust the level."""
    resolved = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(format=LOG_FORMAT, datefmt=DATE_FORMAT, level=resolved)
    logging.getLogger().setLevel(resolved)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
