"""Simple logging utilities for remember-cursor."""

import logging
import sys
from pathlib import Path
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def setup_logging(verbose: bool = False, log_file: Optional[Path] = None) -> logging.Logger:
    """Configure the package logger.

    The editor owns the terminal while it runs, so it logs to a file;
    CLI commands log to stderr.
    """
    logger = logging.getLogger("remember_cursor")
    level = logging.DEBUG if verbose else logging.INFO

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(log_file, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))

    logger.addHandler(handler)
    logger.setLevel(level)
    return logger
