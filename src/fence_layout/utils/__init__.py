"""Shared utilities."""

from .logging_config import TRACE, FenceLayoutLogger, get_logger

__all__ = ["TRACE", "FenceLayoutLogger", "get_logger"]
