# tests/unit/test_standard_table_definition.py
"""
Unit tests for StandardTableDefinition: builder, equality and wire codec.
"""

import pytest

from tabledef.canonical.partitioning import TimePartitioning
from tabledef.canonical.table_definition import (
    StandardTableDefinition,
    StreamingBuffer,
    TableDefinition,
    TableType,
)
from tabledef.utils.exceptions import InvalidArgumentError


def assert_same_definition(expected, value):
    assert expected == value
    assert expected.schema == value.schema
    assert expected.type == value.type
    assert expected.num_bytes == value.num_bytes
    assert expected.num_long_term_bytes == value.num_long_term_bytes
    assert expected.num_rows == value.num_rows
    assert expected.location == value.location
    assert expected.streaming_buffer == value.streaming_buffer
    assert expected.time_partitioning == value.time_partitioning
    assert expected.range_partitioning == value.range_partitioning
    assert expected.clustering == value.clustering
    assert hash(expected) == hash(value)


@pytest.mark.unit
class TestBuilder:
    """Test building and deriving definitions"""

    def test_builder_sets_every_field(self, table_definition, table_schema, streaming_buffer, time_partitioning, clustering):
        assert table_definition.type == TableType.TABLE
        assert table_definition.schema == table_schema
        assert table_definition.location == "US"
        assert table_definition.num_bytes == 42
        assert table_definition.num_long_term_bytes == 18
        assert table_definition.num_rows == 43
        assert table_definition.streaming_buffer == streaming_buffer
        assert table_definition.time_partitioning == time_partitioning
        assert table_definition.clustering == clustering

    def test_of_leaves_optional_fields_absent(self, table_schema):
        definition = StandardTableDefinition.of(table_schema)

        assert definition.type == TableType.TABLE
        assert definition.schema == table_schema
        assert definition.location is None
        assert definition.num_bytes is None
        assert definition.num_long_term_bytes is None
        assert definition.num_rows is None
        assert definition.streaming_buffer is None
        assert definition.time_partitioning is None
        assert definition.range_partitioning is None
        assert definition.clustering is None

    def test_to_builder_reproduces_value(self, table_definition):
        assert_same_definition(table_definition, table_definition.to_builder().build())

    def test_to_builder_override_and_revert(self, table_definition):
        definition = table_definition.to_builder().set_location("EU").build()
        assert definition.location == "EU"
        assert definition != table_definition

        definition = definition.to_builder().set_location("US").build()
        assert_same_definition(table_definition, definition)

    def test_to_builder_incomplete(self, table_schema):
        definition = StandardTableDefinition.of(table_schema)
        assert definition == definition.to_builder().build()

    def test_values_are_immutable(self, table_definition):
        with pytest.raises(AttributeError):
            table_definition.location = "EU"

    def test_usable_as_dict_key(self, table_definition):
        lookup = {table_definition: "found"}
        assert lookup[table_definition.to_builder().build()] == "found"


@pytest.mark.unit
class TestWireCodec:
    """Test to_pb / from_pb"""

    def test_round_trip_full_definition(self, table_definition):
        decoded = TableDefinition.from_pb(table_definition.to_pb())

        assert isinstance(decoded, StandardTableDefinition)
        assert_same_definition(table_definition, decoded)

    def test_round_trip_schema_only(self, table_schema):
        definition = StandardTableDefinition.of(table_schema)
        decoded = TableDefinition.from_pb(definition.to_pb())

        assert isinstance(decoded, StandardTableDefinition)
        assert_same_definition(definition, decoded)

    def test_to_pb_wire_shape(self, table_definition):
        table_pb = table_definition.to_pb()

        assert table_pb["type"] == "TABLE"
        assert table_pb["location"] == "US"
        assert table_pb["numBytes"] == "42"
        assert table_pb["numLongTermBytes"] == "18"
        assert table_pb["numRows"] == "43"
        assert table_pb["streamingBuffer"] == {
            "estimatedRows": "1",
            "estimatedBytes": "2",
            "oldestEntryTime": "3",
        }
        assert table_pb["timePartitioning"] == {"type": "DAY", "expirationMs": "42"}
        assert table_pb["clustering"] == {"fields": ["Foo", "Bar"]}
        assert [f["name"] for f in table_pb["schema"]["fields"]] == [
            "StringField",
            "IntegerField",
            "RecordField",
        ]

    def test_to_pb_omits_absent_fields(self, table_schema):
        table_pb = StandardTableDefinition.of(table_schema).to_pb()
        assert set(table_pb) == {"type", "schema"}

    def test_from_pb_accepts_integer_counts(self):
        definition = StandardTableDefinition.from_pb({
            "type": "TABLE",
            "numBytes": 42,
            "numRows": "43",
        })
        assert definition.num_bytes == 42
        assert definition.num_rows == 43

    def test_from_pb_with_unexpected_time_partitioning_type(self):
        invalid_table = {
            "type": "TABLE",
            "tableReference": {
                "projectId": "ILLEGAL_ARG_TEST_PROJECT",
                "datasetId": "ILLEGAL_ARG_TEST_DATASET",
                "tableId": "ILLEGAL_ARG_TEST_TABLE",
            },
            "timePartitioning": {"type": "GHURRY"},
        }

        with pytest.raises(InvalidArgumentError) as exc_info:
            StandardTableDefinition.from_pb(invalid_table)

        message = str(exc_info.value)
        assert "Illegal Argument - Got unexpected time partitioning" in message
        assert "GHURRY" in message
        assert "ILLEGAL_ARG_TEST_PROJECT" in message
        assert "ILLEGAL_ARG_TEST_DATASET" in message
        assert "ILLEGAL_ARG_TEST_TABLE" in message

    def test_from_pb_with_missing_time_partitioning_type(self):
        invalid_table = {
            "type": "TABLE",
            "tableReference": {
                "projectId": "NULL_TEST_PROJECT",
                "datasetId": "NULL_TEST_DATASET",
                "tableId": "NULL_TEST_TABLE",
            },
            "timePartitioning": {"type": None},
        }

        with pytest.raises(InvalidArgumentError, match="Got unexpected time partitioning None") as exc_info:
            TableDefinition.from_pb(invalid_table)

        assert "NULL_TEST_TABLE" in str(exc_info.value)

    def test_invalid_argument_is_a_value_error(self):
        with pytest.raises(ValueError):
            StandardTableDefinition.from_pb({"timePartitioning": {"type": "WEEK"}})

    def test_from_pb_with_empty_streaming_buffer(self, table_definition):
        table_pb = table_definition.to_pb()
        table_pb["streamingBuffer"] = {}

        definition = StandardTableDefinition.from_pb(table_pb)

        assert definition.streaming_buffer == StreamingBuffer(None, None, None)

    def test_from_pb_with_partial_streaming_buffer(self, table_definition):
        table_pb = table_definition.to_pb()
        table_pb["streamingBuffer"] = {"oldestEntryTime": "1700000000000"}

        buffer = StandardTableDefinition.from_pb(table_pb).streaming_buffer

        assert buffer.estimated_rows is None
        assert buffer.estimated_bytes is None
        assert buffer.oldest_entry_time == 1700000000000

    def test_streaming_buffer_with_null_fields_to_pb(self):
        assert StreamingBuffer(None, None, None).to_pb() == {}

    def test_time_partitioning_round_trip_with_field(self, table_schema):
        partitioning = TimePartitioning(
            type="HOUR",
            expiration_ms=3600000,
            field="StringField",
            require_partition_filter=True,
        )
        definition = (
            StandardTableDefinition.new_builder()
            .set_schema(table_schema)
            .set_time_partitioning(partitioning)
            .build()
        )

        decoded = TableDefinition.from_pb(definition.to_pb())

        assert decoded.time_partitioning == partitioning


@pytest.mark.unit
class TestInt64Decoding:
    """Test malformed int64 values on the wire"""

    @pytest.mark.parametrize("key", ["numBytes", "numLongTermBytes", "numRows"])
    def test_non_numeric_count_rejected(self, key):
        with pytest.raises(InvalidArgumentError, match="Expected an int64 value, got 'lots'"):
            StandardTableDefinition.from_pb({"type": "TABLE", key: "lots"})

    def test_non_numeric_expiration_carries_table_context(self):
        table_pb = {
            "type": "TABLE",
            "tableReference": {"projectId": "p", "datasetId": "d", "tableId": "t"},
            "timePartitioning": {"type": "DAY", "expirationMs": "soon"},
        }

        with pytest.raises(InvalidArgumentError) as exc_info:
            StandardTableDefinition.from_pb(table_pb)

        message = str(exc_info.value)
        assert "Expected an int64 value, got 'soon'" in message
        assert "in project p in dataset d in table t" in message

    def test_non_numeric_range_bound_rejected(self):
        with pytest.raises(InvalidArgumentError, match="Expected an int64 value"):
            StandardTableDefinition.from_pb({
                "rangePartitioning": {"field": "x", "range": {"start": "zero", "end": "10", "interval": "1"}},
            })
