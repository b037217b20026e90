"""Package logger for pairflow.

Pipelines log at DEBUG when a terminal operation starts evaluating, and, with
``PAIRFLOW_TRACE`` set, whenever a step is appended. The level comes from
``PAIRFLOW_LOG_LEVEL`` (or ``LOG_LEVEL``) and defaults to WARNING, so a
library user sees nothing unless they opt in.
"""

import logging
import sys

from pairflow.core.config import settings

__all__ = ["logger", "setup_logger"]


def setup_logger(
    name: str = "pairflow",
    level: str | None = None,
    format_string: str | None = None,
) -> logging.Logger:
    """
    Configure and return a pairflow logger.

    A logger that already has handlers is returned untouched, so callers who
    configure ``pairflow`` themselves before import keep their setup.

    Args:
        name: Logger name, ``pairflow`` or one of its children
        level: Any level name known to ``logging`` (DEBUG, WARN, ...).
            Defaults to the configured ``settings.LOG_LEVEL``.
        format_string: Custom format string

    Returns:
        Configured logger instance
    """
    level = (level or settings.LOG_LEVEL).upper()
    format_string = format_string or (
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            logging.Formatter(fmt=format_string, datefmt="%Y-%m-%d %H:%M:%S")
        )
        logger.addHandler(handler)
        logger.setLevel(logging.getLevelNamesMapping()[level])
        logger.propagate = False

    return logger


logger = setup_logger()
