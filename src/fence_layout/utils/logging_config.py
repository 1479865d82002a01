"""
Logging configuration for the fence layout engine.

Provides console logging plus an optional timestamped log file, and a custom
TRACE level below DEBUG for per-cut diagnostics from the panel allocator.

Emit TRACE records with ``logger.log(TRACE, ...)``.
"""

import logging
import os
import sys
from datetime import datetime
from typing import Optional

# Custom TRACE level (between DEBUG and NOTSET)
TRACE = 5
logging.addLevelName(TRACE, "TRACE")


class FenceLayoutLogger:
    """
    Configures logging for the fence layout engine.

    Supports:
    - Standard levels (CRITICAL, ERROR, WARNING, INFO, DEBUG)
    - TRACE for one record per panel cut
    - Console output, with an optional file handler
    """

    TRACE_LEVEL = TRACE

    @staticmethod
    def configure(
        debug_mode: bool = False,
        log_dir: Optional[str] = None,
        trace_mode: bool = False,
    ) -> Optional[str]:
        """
        Configure the logging system for the entire application.

        Args:
            debug_mode: If True, sets DEBUG level for all loggers
            log_dir: Directory to store log files; no file is written when None
            trace_mode: If True, sets TRACE level (implies debug output)

        Returns:
            Path to the created log file, or None
        """
        if trace_mode:
            level = TRACE
        elif debug_mode:
            level = logging.DEBUG
        else:
            level = logging.INFO

        root_logger = logging.getLogger()
        root_logger.setLevel(level)

        # Clear any existing handlers
        if root_logger.handlers:
            root_logger.handlers.clear()

        log_file = None
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            log_file = os.path.join(log_dir, f"fence_layout_{timestamp}.log")

            file_handler = logging.FileHandler(log_file)
            file_handler.setFormatter(logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            ))
            file_handler.setLevel(level)
            root_logger.addHandler(file_handler)

        # Console goes to stderr so stdout stays clean for JSON output
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter('%(name)s - %(levelname)s: %(message)s'))
        console_handler.setLevel(level)
        root_logger.addHandler(console_handler)

        return log_file

    @staticmethod
    def get_logger(name: str, level: Optional[int] = None):
        """
        Get a configured logger for a specific module.

        Args:
            name: Logger name, typically __name__
            level: Optional specific level for this logger

        Returns:
            A configured logger
        """
        logger = logging.getLogger(name)
        if level:
            logger.setLevel(level)
        return logger

# For direct import convenience
def get_logger(name: str, level: Optional[int] = None):
    """
    Get a configured logger for a specific module.

    Convenience function that delegates to FenceLayoutLogger.get_logger.
    """
    return FenceLayoutLogger.get_logger(name, level)
