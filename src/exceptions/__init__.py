"""
Custom exceptions for the GeoShard spatial search layer.

This module provides the framework exception classes shared by every
search module.
"""

from .custom_exceptions import (
    GeoShardBaseException,
    GeoShardConfigurationError,
    GeoShardValidationError,
    GeoShardProcessingError,
)

__all__ = [
    "GeoShardBaseException",
    "GeoShardConfigurationError",
    "GeoShardValidationError",
    "GeoShardProcessingError",
]
