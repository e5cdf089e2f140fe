"""Unit tests for shard search exceptions."""

import pytest

from src.exceptions import GeoShardBaseException, GeoShardProcessingError, GeoShardValidationError
from modules.shard_search.exceptions import (
    InconsistentFieldError, IndexUnavailableError, InvalidArgumentError, QueryParseError, ShardTimeoutError
)


class TestShardSearchExceptions:
    """Test hierarchy and context of the search exceptions."""

    @pytest.mark.parametrize("exception_class", [InvalidArgumentError, QueryParseError, InconsistentFieldError])
    def test_validation_errors(self, exception_class):
        assert issubclass(exception_class, GeoShardValidationError)

    def test_query_parse_error_context(self):
        error = QueryParseError("Malformed well-known text", "POLYGON ((")

        assert error.shape_text == "POLYGON (("
        assert str(error) == "Malformed well-known text (Context: shape_text=POLYGON (()"

    def test_inconsistent_field_without_name(self):
        error = InconsistentFieldError("Payload keys must be non-empty strings")

        assert error.context == {}
        assert str(error) == "Payload keys must be non-empty strings"

    def test_index_unavailable(self):
        error = IndexUnavailableError("Shard index is closed", 3)

        assert isinstance(error, GeoShardProcessingError)
        assert error.shard_index == 3
        assert "shard_index=3" in str(error)

    def test_shard_timeout_is_index_unavailable(self):
        """Test timeouts are retried and reported like other unavailable shards."""
        error = ShardTimeoutError("Shard 2 knn search exceeded 1.5s", 2, 1.5)

        assert isinstance(error, IndexUnavailableError)
        assert isinstance(error, GeoShardBaseException)
        assert error.timeout_seconds == 1.5
        assert error.context == {"shard_index": 2, "timeout_seconds": 1.5}
