"""
Custom exception classes for the GeoShard spatial search layer.

This module defines the framework-level exception hierarchy. Search specific
errors (invalid arguments, WKT parse failures, unavailable shards) extend these
classes in ``modules.shard_search.exceptions``.
"""

from typing import Optional, Dict, Any


class GeoShardBaseException(Exception):
    """Base exception class for all GeoShard exceptions."""
    
    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}
    
    def __str__(self) -> str:
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} (Context: {context_str})"
        return self.message


class GeoShardConfigurationError(GeoShardBaseException):
    """
    Exception raised when configuration loading or validation fails.
    
    This exception is raised when:
    - The search configuration file is missing or not valid JSON
    - An environment is not defined
    - Search settings fail validation
    """
    pass


class GeoShardValidationError(GeoShardBaseException):
    """
    Exception raised when input validation fails.
    
    This exception is raised when:
    - Query arguments are out of range
    - Query shapes cannot be parsed
    - Stored documents carry unsupported field values
    """
    pass


class GeoShardProcessingError(GeoShardBaseException):
    """
    Exception raised when executing a query against a shard fails.
    
    This exception is raised when:
    - A shard index cannot be queried
    - A shard exceeds its time budget
    - Results from several shards cannot be merged
    """
    pass
