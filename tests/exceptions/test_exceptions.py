"""
Unit tests for custom exceptions module.

This module contains tests for the framework exception classes
and their context handling.
"""

import pytest
from src.exceptions import (
    GeoShardBaseException,
    GeoShardConfigurationError,
    GeoShardValidationError,
    GeoShardProcessingError,
)


class TestGeoShardBaseException:
    """Test suite for GeoShardBaseException class."""

    def test_base_exception_without_context(self):
        """Test GeoShardBaseException without context."""
        exception = GeoShardBaseException("Test error message")

        assert str(exception) == "Test error message"
        assert exception.message == "Test error message"
        assert exception.context == {}

    def test_base_exception_with_context(self):
        """Test GeoShardBaseException with context."""
        context = {"shard_index": 2, "query_kind": "knn"}
        exception = GeoShardBaseException("Test error message", context)

        assert exception.message == "Test error message"
        assert exception.context == context
        assert "shard_index=2" in str(exception)
        assert "query_kind=knn" in str(exception)

    def test_base_exception_with_none_context(self):
        """Test GeoShardBaseException with None context."""
        exception = GeoShardBaseException("Test error message", None)

        assert str(exception) == "Test error message"
        assert exception.context == {}

    def test_base_exception_context_string_representation(self):
        """Test string representation with various context types."""
        context = {
            "string_value": "test",
            "int_value": 42,
            "bool_value": True,
            "none_value": None
        }
        error_str = str(GeoShardBaseException("Test error", context))

        assert error_str.startswith("Test error (Context: ")
        assert "string_value=test" in error_str
        assert "int_value=42" in error_str
        assert "bool_value=True" in error_str
        assert "none_value=None" in error_str


@pytest.mark.parametrize("exception_class", [
    GeoShardConfigurationError,
    GeoShardValidationError,
    GeoShardProcessingError,
])
class TestFrameworkExceptions:
    """Shared behaviour of the framework exception subclasses."""

    def test_inherits_from_base(self, exception_class):
        exception = exception_class("failure")

        assert isinstance(exception, GeoShardBaseException)
        assert isinstance(exception, Exception)

    def test_keeps_context(self, exception_class):
        exception = exception_class("failure", {"environment": "development"})

        assert exception.context["environment"] == "development"
        assert "environment=development" in str(exception)

    def test_can_be_caught_as_base(self, exception_class):
        with pytest.raises(GeoShardBaseException):
            raise exception_class("failure")
