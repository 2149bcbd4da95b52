"""Console and file handlers for the ``btse_adapter`` logger tree.

Adapter modules log through ``logging.getLogger(__name__)`` and never attach
handlers themselves; applications call ``setup_logging`` once.
"""

import logging
import sys
from pathlib import Path

PACKAGE_LOGGER = "btse_adapter"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: int = logging.INFO, log_file: Path | None = None) -> logging.Logger:
    """Attach handlers to the package logger.

    Repeated calls only update the level.

    Args:
        level: Logging level (default: INFO)
        log_file: Also append records to this file

    Returns:
        Package logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    if logger.handlers:
        return logger

    logger.propagate = False
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger
