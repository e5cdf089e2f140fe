"""Tests for the ShardIndex interface and related models."""

import numpy as np
import pytest
from pydantic import ValidationError

from src.interfaces.shard_index import IndexHit, ShardIndex, StoredDocument, StoredField


class TestStoredField:
    """Test cases for StoredField Pydantic model."""

    def test_string_field(self):
        """Test a field with only a string value."""
        stored_field = StoredField(name="city", string_value="Bern")

        assert stored_field.value == "Bern"
        assert stored_field.numeric_value is None

    def test_numeric_value_preferred(self):
        """Test the numeric representation wins when both are present."""
        stored_field = StoredField(name="code", numeric_value=np.int32(7), string_value="seven")

        assert stored_field.value == 7
        assert isinstance(stored_field.value, np.int32)

    def test_empty_name_invalid(self):
        """Test that an empty field name raises ValidationError."""
        with pytest.raises(ValidationError):
            StoredField(name="", string_value="x")

    def test_field_is_frozen(self):
        stored_field = StoredField(name="city", string_value="Bern")

        with pytest.raises(ValidationError):
            stored_field.string_value = "Zurich"


class TestStoredDocument:
    """Test cases for StoredDocument Pydantic model."""

    @pytest.fixture
    def document(self):
        return StoredDocument(stored_fields=(
            StoredField(name="city", string_value="Bern"),
            StoredField(name="population", numeric_value=np.int64(134_000)),
        ))

    def test_field_order_and_lookup(self, document):
        assert len(document) == 2
        assert document.names() == ["city", "population"]
        assert document.get("population").numeric_value == 134_000
        assert document.get("missing") is None

    def test_text_field(self, document):
        assert document.text_field("city") == "Bern"
        assert document.text_field("population") is None
        assert document.text_field("missing") is None

    def test_empty_document(self):
        assert len(StoredDocument()) == 0


class TestIndexHit:
    """Test cases for IndexHit Pydantic model."""

    def test_valid_hit(self):
        hit = IndexHit(score=12.5, internal_id=3, doc_handle=("segment", 3))

        assert hit.score == 12.5
        assert hit.doc_handle == ("segment", 3)

    @pytest.mark.parametrize("internal_id", [2**31, -2**31 - 1])
    def test_internal_id_must_fit_32_bits(self, internal_id):
        with pytest.raises(ValidationError):
            IndexHit(score=1.0, internal_id=internal_id, doc_handle=0)


class TestShardIndex:
    """Test cases for ShardIndex abstract base class."""

    def test_cannot_instantiate_abstract_class(self):
        """Test that ShardIndex cannot be instantiated directly."""
        with pytest.raises(TypeError):
            ShardIndex()

    def test_abstract_methods_required(self):
        """Test that every abstract member must be implemented."""

        class IncompleteIndex(ShardIndex):
            @property
            def shard_index(self) -> int:
                return 0

            def nearest(self, origin, k):
                return []

        with pytest.raises(TypeError):
            IncompleteIndex()

    def test_concrete_implementation_works(self):
        """Test a minimal single-document implementation."""

        class SingleDocumentIndex(ShardIndex):
            def __init__(self):
                self._open = True
                self._document = StoredDocument(stored_fields=(StoredField(name="n", string_value="only"),))

            @property
            def shard_index(self) -> int:
                return 5

            @property
            def is_open(self) -> bool:
                return self._open

            @property
            def doc_count(self) -> int:
                return 1

            def nearest(self, origin, k):
                return [IndexHit(score=0.0, internal_id=0, doc_handle=0)][:k]

            def intersecting(self, shape, k):
                return self.nearest(shape, k)

            def materialize(self, doc_handle):
                return self._document

            def close(self):
                self._open = False

        index = SingleDocumentIndex()

        assert index.shard_index == 5
        assert index.nearest(None, 1)[0].internal_id == 0
        assert index.materialize(0).text_field("n") == "only"
        index.close()
        assert not index.is_open
