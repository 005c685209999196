"""Utility modules for asinput.

Provides:
- logger: get_logger and configure_logging
"""

from asinput.utils.logger import configure_logging, get_logger

__all__ = ["configure_logging", "get_logger"]
