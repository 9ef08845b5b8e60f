"""
Logging configuration for the Pocket Cleaner.

This module sets up logging based on configuration settings.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    level: str = "WARNING",
    log_file: Optional[str] = None,
    log_dir: Optional[Path] = None,
) -> Optional[Path]:
    """
    Set up logging configuration.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional log file name; a timestamped copy is written
            under ``log_dir``
        log_dir: Directory for log files (defaults to ./logs)

    Returns:
        Path of the log file, or None when logging to console only
    """
    handlers = []

    # Console handler goes to stderr so stdout stays for user-facing lines
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    handlers.append(console_handler)

    log_path = None
    if log_file:
        if log_dir is None:
            log_dir = Path.cwd() / "logs"
        log_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_path = log_dir / f"{Path(log_file).stem}_{timestamp}.log"

        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
        handlers.append(file_handler)

    # Configure root logger, replacing handlers from an earlier run in-process
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        handlers=handlers,
        force=True,
    )

    logger = logging.getLogger(__name__)
    logger.debug(f"Log level: {level}")
    if log_path:
        logger.info(f"Pocket Cleaner starting - Log file: {log_path}")

    return log_path
