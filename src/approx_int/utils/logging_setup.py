"""Apply a LoggingConfig to the approx_int logger hierarchy."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from ..config.loader import load_config
from ..config.schema import LoggingConfig

LOGGER_NAME = "approx_int"


def configure_logging(config: Optional[LoggingConfig] = None) -> logging.Logger:
    """Attach handlers for the package logger.

    Only the ``approx_int`` logger is touched, never the root logger.
    Handlers installed by an earlier call are replaced.

    Args:
        config: Logging settings. When omitted they are loaded from the
            user config file and ``APPROX_INT_LOGGING_*`` variables.

    Returns:
        The configured package logger
    """
    if config is None:
        config = load_config().logging

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(config.level.upper())

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(config.format)

    if config.console:
        console = logging.StreamHandler()
        console.setFormatter(formatter)
        logger.addHandler(console)

    if config.file:
        path = Path(config.file).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    if not logger.handlers:
        logger.addHandler(logging.NullHandler())

    return logger
