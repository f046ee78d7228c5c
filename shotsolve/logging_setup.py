"""Logging configuration for the command-line front end."""

import logging
from pathlib import Path

import coloredlogs

from core.models.config import LoggingConfig

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(config: LoggingConfig, verbose: bool = False) -> None:
    """Configure the root logger once for the whole process.

    Args:
        config: Logging section of the configuration
        verbose: Force DEBUG level
    """
    level = logging.DEBUG if verbose else getattr(logging, config.level.upper(), logging.INFO)
    root = logging.getLogger()

    if config.log_to_console:
        if config.console_colors:
            coloredlogs.install(level=level, fmt=LOG_FORMAT, logger=root)
        else:
            logging.basicConfig(level=level, format=LOG_FORMAT)

    if config.log_to_file:
        log_file = Path(config.log_file).expanduser()
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_file)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)

    root.setLevel(level)
