"""
Logging configuration for the bookmark importer.

This module sets up logging based on configuration settings.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(config=None, log_file: Optional[str] = None, verbose: bool = False) -> None:
    """
    Set up logging configuration.

    Args:
        config: ImporterConfig object; its ``logging`` group supplies the
            level, optional log file and console switch
        log_file: Optional log file path override
        verbose: Force DEBUG level regardless of configuration
    """
    log_level = "INFO"
    console_output = True

    if config is not None:
        log_level = config.logging.level
        console_output = config.logging.console_output
        if log_file is None and config.logging.log_file is not None:
            log_file = str(config.logging.log_file)

    if verbose:
        log_level = "DEBUG"

    handlers = []

    if log_file is not None:
        log_path = Path(log_file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
        handlers.append(file_handler)

    if console_output:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
        handlers.append(console_handler)

    if not handlers:
        handlers.append(logging.NullHandler())

    # Replaces handlers left by an earlier call
    logging.basicConfig(
        level=getattr(logging, log_level.upper()), handlers=handlers, force=True
    )

    logger = logging.getLogger(__name__)
    logger.debug(f"Log level: {log_level}")
    if log_file is not None:
        logger.info(f"Bookmark importer starting - Log file: {log_file}")
