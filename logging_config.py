"""
Centralized logging configuration for the Google Fonts downloader
Handles all logging setup and provides convenience functions
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional

from config import LOGS_DIR, DEBUG

# Define log formats
CONSOLE_FORMAT = '(%(filename)s:%(lineno)d) %(levelname)s - %(message)s'
FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s'

# Track if logging has been initialized
_logging_initialized = False

def setup_logging(
    console_level: str = "WARNING",
    file_level: str = "DEBUG",
    console: bool = True,
    log_file: Optional[str] = None,
    force: bool = False
) -> None:
    """
    Set up logging configuration with separate console and file handlers

    Args:
        console_level: Logging level for console output (default: WARNING)
        file_level: Logging level for file output (default: DEBUG)
        console: Whether to enable console logging (default: True)
        log_file: Optional log file name, relative to LOGS_DIR. No file handler when omitted.
        force: Re-run the setup even if logging was already initialized
    """
    global _logging_initialized
    if _logging_initialized and not force:
        return

    # Get the root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # Capture all levels

    # Clear any existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    # Console handler (simpler format)
    if console:
        # stderr keeps diagnostics out of the progress output on stdout
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(getattr(logging, console_level.upper()))
        console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        root_logger.addHandler(console_handler)
    else:
        root_logger.addHandler(logging.NullHandler())

    # File handler (detailed format)
    log_path = None
    if log_file:
        log_path = Path(log_file)
        if not log_path.is_absolute():
            log_path = LOGS_DIR / log_path
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_path,
            maxBytes=DEBUG["log_rotation"]["max_bytes"],
            backupCount=DEBUG["log_rotation"]["backup_count"],
            encoding='utf-8'
        )
        file_handler.setLevel(getattr(logging, file_level.upper()))
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        root_logger.addHandler(file_handler)

    # Disable unnecessary logging
    logging.getLogger('urllib3').setLevel(logging.WARNING)

    # Force UTF-8 encoding for Windows console
    if sys.platform.startswith('win'):
        sys.stdout.reconfigure(encoding='utf-8')
        sys.stderr.reconfigure(encoding='utf-8')

    _logging_initialized = True

    root_logger.debug(f"Logging initialized - Console: {console_level if console else 'off'}, File: {file_level}")
    if log_path:
        root_logger.debug(f"Log file: {log_path}")

def get_logger(name: str) -> logging.Logger:
    """Get a logger with the given name"""
    # setup_logging() must be called explicitly by the entry point.
    return logging.getLogger(name)
