"""
Logging setup shared by every module.

    from logger import get_logger
    logger = get_logger(__name__)
"""

import logging
import os
import sys

from config import is_log_level


def _configure_root_logger() -> None:
    root = logging.getLogger()
    if root.handlers:
        # Already configured (uvicorn, pytest) - leave it alone.
        return

    level = (os.getenv("LOG_LEVEL") or "INFO").upper()
    if not is_log_level(level):
        # Settings.validate() reports it at startup.
        level = "INFO"
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root.setLevel(level)
    root.addHandler(handler)

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


_configure_root_logger()


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
