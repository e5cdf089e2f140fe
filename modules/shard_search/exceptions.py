"""Shard Search Specific Exceptions

Extends the framework exception hierarchy with the errors a shard query can
raise. All of them are local to the shard and operation that raised them.
"""

from src.exceptions import GeoShardProcessingError, GeoShardValidationError


class InvalidArgumentError(GeoShardValidationError):
    """Raised for a non-positive ``k`` or radius, before any index access."""
    pass


class QueryParseError(GeoShardValidationError):
    """Raised when a query shape is not valid well-known text."""

    def __init__(self, message: str, shape_text: str = ""):
        super().__init__(message, {"shape_text": shape_text} if shape_text else None)
        self.shape_text = shape_text


class InconsistentFieldError(GeoShardValidationError):
    """Raised when a stored field has neither a numeric nor a string value."""

    def __init__(self, message: str, field_name: str = ""):
        super().__init__(message, {"field_name": field_name} if field_name else None)
        self.field_name = field_name


class IndexUnavailableError(GeoShardProcessingError):
    """Raised when a shard's index cannot be queried."""

    def __init__(self, message: str, shard_index: int = -1):
        super().__init__(message, {"shard_index": shard_index})
        self.shard_index = shard_index


class ShardTimeoutError(IndexUnavailableError):
    """Raised when a shard query exceeds its time budget."""

    def __init__(self, message: str, shard_index: int = -1, timeout_seconds: float = 0.0):
        super().__init__(message, shard_index)
        self.context["timeout_seconds"] = timeout_seconds
        self.timeout_seconds = timeout_seconds
