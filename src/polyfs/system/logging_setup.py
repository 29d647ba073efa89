# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.06.01
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/polyfs/system/logging_setup.py

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from polyfs.config.manager import PolyFSConfig


LOG_FILE_NAME = "polyfs.log"


def setup_logging(config: Optional[PolyFSConfig] = None, debug: bool = False) -> Optional[Path]:
    """Setup loguru logging for the entire application.

    Configures:
    - Console output: WARNING+ only (DEBUG+ when debug is set)
    - File output: DEBUG+ if local_log is configured

    Returns:
        Path of the log file, or None if file logging is not enabled
    """
    logger.remove()

    logger.add(
        sys.stderr,
        level="DEBUG" if debug else "WARNING",
        format="<level>{level}</level>: {message}",
        colorize=True
    )

    if config is None or config.local_log is None:
        return None

    try:
        log_dir = Path(config.local_log)
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / LOG_FILE_NAME

        logger.add(
            log_file,
            level="DEBUG",
            format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}",
            rotation="10 MB",
            retention="30 days",
            compression="gz"
        )
        logger.debug(f"File logging enabled: {log_file}")
        return log_file

    except OSError as e:
        # A broken log directory must not take the tool down
        logger.warning(f"Failed to setup file logging: {e}")
        return None
