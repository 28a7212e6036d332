"""
Log manage Module

Leveled session logging to the console and a timestamped file, with
call-site attribution and exception/stack recording

Usage example:
    from src.managers.log import Logger, LoggerConfig, Severity

    # Basic Usage
    logger = Logger(True, True, Severity.INFO, "/path/to/project")
    logger.info("Loaded %d cases", 12)
    logger.error("This is an error")
    logger.finish()

    # Use the context manager
    with Logger(True, False, Severity.DEBUG, ".") as logger:
        try:
            run()
        except Exception as e:
            logger.exception(e)

    # From options
    logger = Logger.from_config(LoggerConfig(enable_file=True, root_dir="."))
"""

from .config import LoggerConfig
from .errors import (
    DirectoryCreationError,
    FileOpenError,
    LoggerError,
    SourceLineReadError,
)
from .levels import Severity
from .logger import Logger
from .stack import ExceptionRecord, StackFrame

__all__ = [
    "Logger",
    "LoggerConfig",
    "Severity",
    "ExceptionRecord",
    "StackFrame",
    "LoggerError",
    "DirectoryCreationError",
    "FileOpenError",
    "SourceLineReadError",
]

__version__ = "1.0.0"
__description__ = "Leveled console and file session logger"
