# tests/conftest.py
"""
Shared pytest fixtures for the table definition test suite.
"""

import pytest

from tabledef.canonical.clustering import Clustering
from tabledef.canonical.field import Field, FieldMode, LegacySQLTypeName
from tabledef.canonical.partitioning import RangePartitioning, TimePartitioning
from tabledef.canonical.schema import Schema
from tabledef.canonical.table_definition import StandardTableDefinition, StreamingBuffer


@pytest.fixture
def string_field():
    return (
        Field.new_builder("StringField", LegacySQLTypeName.STRING)
        .set_mode(FieldMode.NULLABLE)
        .set_description("FieldDescription1")
        .build()
    )


@pytest.fixture
def integer_field():
    return (
        Field.new_builder("IntegerField", LegacySQLTypeName.INTEGER)
        .set_mode(FieldMode.REPEATED)
        .set_description("FieldDescription2")
        .build()
    )


@pytest.fixture
def record_field(string_field, integer_field):
    return (
        Field.new_builder("RecordField", LegacySQLTypeName.RECORD, string_field, integer_field)
        .set_mode(FieldMode.REQUIRED)
        .set_description("FieldDescription3")
        .build()
    )


@pytest.fixture
def table_schema(string_field, integer_field, record_field):
    return Schema.of(string_field, integer_field, record_field)


@pytest.fixture
def streaming_buffer():
    return StreamingBuffer(1, 2, 3)


@pytest.fixture
def time_partitioning():
    return TimePartitioning.of("DAY", 42)


@pytest.fixture
def clustering():
    return Clustering.new_builder().set_fields(["Foo", "Bar"]).build()


@pytest.fixture
def table_definition(table_schema, streaming_buffer, time_partitioning, clustering):
    """Standard table definition with every field populated"""
    return (
        StandardTableDefinition.new_builder()
        .set_location("US")
        .set_num_bytes(42)
        .set_num_rows(43)
        .set_num_long_term_bytes(18)
        .set_streaming_buffer(streaming_buffer)
        .set_schema(table_schema)
        .set_time_partitioning(time_partitioning)
        .set_range_partitioning(RangePartitioning(field="IntegerField", start=0, end=100, interval=10))
        .set_clustering(clustering)
        .build()
    )
