"""
Logging Setup
loguru sinks shared by the deploy script and the dealmaker CLI
"""

import os
import sys
from typing import Optional
from loguru import logger


CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function} - {message}"


def setup_logging(level: Optional[str] = None, log_file: Optional[str] = None):
    """
    Route all log output to stderr (and optionally a rotating file)

    stdout stays reserved for command results. The console level is capped
    at ERROR so failure reports always reach stderr.

    Args:
        level: Console level (default: $LOG_LEVEL or INFO)
        log_file: Debug log file path (default: $LOG_FILE, unset = no file)
    """
    level = level or os.getenv('LOG_LEVEL', 'INFO')
    log_file = log_file or os.getenv('LOG_FILE')

    console_level = level.upper()
    if logger.level(console_level).no > logger.level('ERROR').no:
        console_level = 'ERROR'

    logger.remove()
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=console_level)

    if log_file:
        logger.add(
            log_file,
            rotation="1 day",
            retention="7 days",
            format=FILE_FORMAT,
            level="DEBUG"
        )
