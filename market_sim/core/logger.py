"""
Logging for the simulation packages. Everything hangs off the "market_sim"
logger; modules use market_sim.<area> children.
"""

from __future__ import annotations
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
MAX_LOG_BYTES = 5 * 1024 * 1024


def setup_logging(
    level: str = "INFO",
    log_dir: Optional[Path] = None,
    log_file: Optional[str] = None,
    console: bool = True,
) -> logging.Logger:
    """
    Configure the market_sim logger with a stdout handler and, when both
    log_dir and log_file are given, a rotating file handler.
    Calling again replaces the previous handlers.
    """
    sim_logger = logging.getLogger("market_sim")
    sim_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    sim_logger.handlers.clear()
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    if console:
        stream = logging.StreamHandler(sys.stdout)
        stream.setFormatter(formatter)
        sim_logger.addHandler(stream)

    if log_dir and log_file:
        directory = Path(log_dir)
        directory.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            directory / log_file, maxBytes=MAX_LOG_BYTES, backupCount=3, encoding="utf-8"
        )
        file_handler.setFormatter(formatter)
        sim_logger.addHandler(file_handler)

    return sim_logger
