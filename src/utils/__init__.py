"""
Utility modules for the GeoShard spatial search layer.

This module provides logging setup and timing helpers used throughout
the system.
"""

from .logging_setup import (
    setup_logging, setup_logging_from_config, get_logger, log_performance, JSONFormatter
)

__all__ = ["setup_logging", "setup_logging_from_config", "get_logger", "log_performance", "JSONFormatter"]
