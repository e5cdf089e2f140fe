"""Unit tests for stored document building."""

import numpy as np
import pytest
from pydantic import BaseModel
from shapely.geometry import Point, Polygon

from modules.shard_search.exceptions import InconsistentFieldError, InvalidArgumentError
from modules.shard_search.geometry import SpatialContext
from modules.shard_search.index import SHAPE_FIELD, DocumentBuilder, build_documents, to_stored_field


class CityRecord(BaseModel):
    name: str
    population: int


class TestToStoredField:
    """Test conversion of Python values to width-carrying stored fields."""

    def test_string(self):
        stored_field = to_stored_field("city", "Bern")

        assert stored_field.string_value == "Bern"
        assert stored_field.numeric_value is None

    def test_small_int_is_int32(self):
        assert isinstance(to_stored_field("n", 12).numeric_value, np.int32)

    def test_large_int_is_int64(self):
        assert isinstance(to_stored_field("n", 2**40).numeric_value, np.int64)

    def test_float_is_float64(self):
        assert isinstance(to_stored_field("x", 1.5).numeric_value, np.float64)

    def test_numpy_values_keep_their_type(self):
        assert isinstance(to_stored_field("x", np.float32(1.5)).numeric_value, np.float32)

    @pytest.mark.parametrize("value", [None, True, 2**64, np.uint64(1), {"a": 1}])
    def test_unsupported_values(self, value):
        with pytest.raises(InconsistentFieldError):
            to_stored_field("bad", value)


class TestDocumentBuilder:
    """Test DocumentBuilder geometry resolution and payload flattening."""

    @pytest.fixture
    def builder(self):
        return DocumentBuilder(SpatialContext())

    def test_to_geometry_inputs(self, builder):
        """Test pairs, points, WKT and shapely geometries are all accepted."""
        polygon = Polygon([(0, 0), (1, 0), (1, 1)])

        assert builder.to_geometry((7.0, 46.0)).equals(Point(7, 46))
        assert builder.to_geometry(Point(7, 46)).equals(Point(7, 46))
        assert builder.to_geometry("POINT (7 46)").equals(Point(7, 46))
        assert builder.to_geometry(polygon) is polygon

    def test_circles_are_not_indexable(self, builder):
        with pytest.raises(InvalidArgumentError, match="Circles"):
            builder.to_geometry("BUFFER (POINT (7 46), 1)")

    def test_empty_geometry_rejected(self, builder):
        with pytest.raises(InvalidArgumentError, match="empty"):
            builder.to_geometry(Polygon())

    def test_tuple_payload(self, builder):
        """Test tuple payloads are stored positionally after the shape."""
        document = builder.build(Point(7.4474, 46.948), ("Bern", 134_000))

        assert document.names() == [SHAPE_FIELD, "_1", "_2"]
        assert builder.context.parse_wkt(document.text_field(SHAPE_FIELD)).equals(Point(7.4474, 46.948))
        assert document.text_field("_1") == "Bern"
        assert document.get("_2").numeric_value == 134_000

    def test_scalar_payload(self, builder):
        assert builder.build(Point(0, 0), "Athens").names() == [SHAPE_FIELD, "_1"]

    def test_mapping_and_model_payloads(self, builder):
        from_dict = builder.build(Point(0, 0), {"name": "Bern", "population": 134_000})
        from_model = builder.build(Point(0, 0), CityRecord(name="Bern", population=134_000))

        assert from_dict.names() == [SHAPE_FIELD, "name", "population"]
        assert from_model.names() == from_dict.names()

    def test_no_payload(self, builder):
        assert len(builder.build(Point(0, 0))) == 1

    def test_shape_storage_can_be_disabled(self):
        document = DocumentBuilder(SpatialContext(), store_shape=False).build(Point(0, 0), ("x",))

        assert document.names() == ["_1"]

    @pytest.mark.parametrize("name", ["__docid__", "__score__", "__shardIndex__", SHAPE_FIELD])
    def test_reserved_payload_names(self, builder, name):
        with pytest.raises(InconsistentFieldError, match="reserved"):
            builder.build(Point(0, 0), {name: 1})

    def test_invalid_payload_keys(self, builder):
        with pytest.raises(InconsistentFieldError):
            builder.build(Point(0, 0), {1: "x"})

    def test_build_documents(self):
        built = build_documents(SpatialContext(), [((1.0, 2.0), "a"), ("POINT (3 4)", "b")])

        assert len(built) == 2
        assert built[1][0].equals(Point(3, 4))
        assert built[1][1].text_field("_1") == "b"
