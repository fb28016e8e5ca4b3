from dataclasses import dataclass, fields
from typing import ClassVar, Dict, Optional

from tabledef.canonical.clustering import Clustering
from tabledef.canonical.partitioning import RangePartitioning, TimePartitioning
from tabledef.canonical.schema import Schema
from tabledef.canonical.table_reference import TableReference
from tabledef.observability.logger import log_event
from tabledef.utils.exceptions import InvalidArgumentError
from tabledef.utils.wire import drop_none, int64_from_pb, int64_to_pb

"""
Table definitions and their BigQuery REST (wire) representation.

Decode flow:
Table resource → TableDefinition.from_pb → type tag dispatch →
StandardTableDefinition / ViewDefinition

Values are immutable. Build them with `new_builder()` / `of(...)`,
derive modified copies through `to_builder()`.
"""


class TableType:
    TABLE = "TABLE"
    VIEW = "VIEW"
    EXTERNAL = "EXTERNAL"
    MATERIALIZED_VIEW = "MATERIALIZED_VIEW"
    SNAPSHOT = "SNAPSHOT"
    MODEL = "MODEL"

    @classmethod
    def is_valid(cls, type_name: str) -> bool:
        return type_name in {
            cls.TABLE,
            cls.VIEW,
            cls.EXTERNAL,
            cls.MATERIALIZED_VIEW,
            cls.SNAPSHOT,
            cls.MODEL,
        }


@dataclass(frozen=True)
class TableDefinition:
    """
    Base of all table definition variants.
    Subclasses pin `type` and add their own fields.
    """
    type: ClassVar[str]

    schema: Optional[Schema] = None

    def to_pb(self) -> Dict:
        table = {"type": self.type}
        if self.schema is not None:
            table["schema"] = self.schema.to_pb()
        return table

    @classmethod
    def from_pb(cls, table_pb: Dict) -> "TableDefinition":
        """
        Pick the definition variant from the resource's type tag.
        A resource without a tag is a standard table.
        """
        type_name = table_pb.get("type") or TableType.TABLE
        definition_cls = _DEFINITION_TYPES.get(type_name)

        if definition_cls is None:
            _reject_type(table_pb, type_name, "Format {type} is not supported")

        return definition_cls.from_pb(table_pb)


def _check_type(table_pb: Dict, expected: str, missing_ok: bool = False):
    type_name = table_pb.get("type")
    if type_name == expected or (missing_ok and not type_name):
        return
    _reject_type(table_pb, type_name, f"Format {{type}} cannot be decoded as {expected}")


def _reject_type(table_pb: Dict, type_name: Optional[str], message: str):
    reference = TableReference.from_pb(table_pb.get("tableReference"))
    log_event("TABLE_DEFINITION_DECODE_FAILED", {
        "table": reference.full_table_id,
        "reason": "unsupported_type" if TableType.is_valid(type_name) else "unknown_type",
        "type": type_name,
    })
    raise InvalidArgumentError(
        f"{message.format(type=type_name)} (table {reference.full_table_id})"
    )


@dataclass(frozen=True)
class StreamingBuffer:
    """
    Snapshot of rows recently streamed into a table and not yet
    moved to managed storage. Every field may be missing.
    """
    estimated_rows: Optional[int] = None
    estimated_bytes: Optional[int] = None
    oldest_entry_time: Optional[int] = None      # epoch millis

    def to_pb(self) -> Dict:
        return drop_none({
            "estimatedRows": int64_to_pb(self.estimated_rows),
            "estimatedBytes": int64_to_pb(self.estimated_bytes),
            "oldestEntryTime": int64_to_pb(self.oldest_entry_time),
        })

    @classmethod
    def from_pb(cls, buffer_pb: Dict) -> "StreamingBuffer":
        return cls(
            estimated_rows=int64_from_pb(buffer_pb.get("estimatedRows")),
            estimated_bytes=int64_from_pb(buffer_pb.get("estimatedBytes")),
            oldest_entry_time=int64_from_pb(buffer_pb.get("oldestEntryTime")),
        )


@dataclass(frozen=True)
class StandardTableDefinition(TableDefinition):
    """
    Definition of a native BigQuery table.

    Storage statistics (bytes, rows, streaming buffer) are reported by
    the service and are only populated on decoded values.
    """
    type: ClassVar[str] = TableType.TABLE

    location: Optional[str] = None
    num_bytes: Optional[int] = None
    num_long_term_bytes: Optional[int] = None
    num_rows: Optional[int] = None
    streaming_buffer: Optional[StreamingBuffer] = None
    time_partitioning: Optional[TimePartitioning] = None
    range_partitioning: Optional[RangePartitioning] = None
    clustering: Optional[Clustering] = None

    @classmethod
    def of(cls, schema: Schema) -> "StandardTableDefinition":
        return cls.new_builder().set_schema(schema).build()

    @classmethod
    def new_builder(cls) -> "StandardTableDefinitionBuilder":
        return StandardTableDefinitionBuilder()

    def to_builder(self) -> "StandardTableDefinitionBuilder":
        return StandardTableDefinitionBuilder(
            **{f.name: getattr(self, f.name) for f in fields(self)}
        )

    def to_pb(self) -> Dict:
        table = super().to_pb()
        table.update(drop_none({
            "location": self.location,
            "numBytes": int64_to_pb(self.num_bytes),
            "numLongTermBytes": int64_to_pb(self.num_long_term_bytes),
            "numRows": int64_to_pb(self.num_rows),
        }))

        if self.streaming_buffer is not None:
            table["streamingBuffer"] = self.streaming_buffer.to_pb()
        if self.time_partitioning is not None:
            table["timePartitioning"] = self.time_partitioning.to_pb()
        if self.range_partitioning is not None:
            table["rangePartitioning"] = self.range_partitioning.to_pb()
        if self.clustering is not None:
            table["clustering"] = self.clustering.to_pb()
        return table

    @classmethod
    def from_pb(cls, table_pb: Dict) -> "StandardTableDefinition":
        _check_type(table_pb, TableType.TABLE, missing_ok=True)
        builder = cls.new_builder()

        if table_pb.get("schema") is not None:
            builder.set_schema(Schema.from_pb(table_pb["schema"]))

        builder.set_location(table_pb.get("location"))
        builder.set_num_bytes(int64_from_pb(table_pb.get("numBytes")))
        builder.set_num_long_term_bytes(int64_from_pb(table_pb.get("numLongTermBytes")))
        builder.set_num_rows(int64_from_pb(table_pb.get("numRows")))

        if table_pb.get("streamingBuffer") is not None:
            builder.set_streaming_buffer(
                StreamingBuffer.from_pb(table_pb["streamingBuffer"])
            )

        if table_pb.get("timePartitioning") is not None:
            builder.set_time_partitioning(
                _decode_time_partitioning(table_pb)
            )

        if table_pb.get("rangePartitioning") is not None:
            builder.set_range_partitioning(
                RangePartitioning.from_pb(table_pb["rangePartitioning"])
            )

        if table_pb.get("clustering") is not None:
            builder.set_clustering(Clustering.from_pb(table_pb["clustering"]))

        return builder.build()


def _decode_time_partitioning(table_pb: Dict) -> TimePartitioning:
    partitioning_pb = table_pb["timePartitioning"]
    try:
        return TimePartitioning.from_pb(partitioning_pb)
    except InvalidArgumentError as e:
        reference = TableReference.from_pb(table_pb.get("tableReference"))
        partitioning_type = partitioning_pb.get("type")

        log_event("TABLE_DEFINITION_DECODE_FAILED", {
            "table": reference.full_table_id,
            "reason": "unexpected_time_partitioning",
            "type": partitioning_type,
        })

        raise InvalidArgumentError(
            f"Illegal Argument - Got unexpected time partitioning "
            f"{partitioning_type} in project {reference.project_id} "
            f"in dataset {reference.dataset_id} "
            f"in table {reference.table_id}: {e}"
        ) from e


class StandardTableDefinitionBuilder:
    """
    Mutable staging area for a StandardTableDefinition.
    """

    def __init__(
        self,
        schema: Optional[Schema] = None,
        location: Optional[str] = None,
        num_bytes: Optional[int] = None,
        num_long_term_bytes: Optional[int] = None,
        num_rows: Optional[int] = None,
        streaming_buffer: Optional[StreamingBuffer] = None,
        time_partitioning: Optional[TimePartitioning] = None,
        range_partitioning: Optional[RangePartitioning] = None,
        clustering: Optional[Clustering] = None,
    ):
        self._schema = schema
        self._location = location
        self._num_bytes = num_bytes
        self._num_long_term_bytes = num_long_term_bytes
        self._num_rows = num_rows
        self._streaming_buffer = streaming_buffer
        self._time_partitioning = time_partitioning
        self._range_partitioning = range_partitioning
        self._clustering = clustering

    def set_schema(self, schema: Optional[Schema]) -> "StandardTableDefinitionBuilder":
        self._schema = schema
        return self

    def set_location(self, location: Optional[str]) -> "StandardTableDefinitionBuilder":
        self._location = location
        return self

    def set_num_bytes(self, num_bytes: Optional[int]) -> "StandardTableDefinitionBuilder":
        self._num_bytes = num_bytes
        return self

    def set_num_long_term_bytes(self, num_long_term_bytes: Optional[int]) -> "StandardTableDefinitionBuilder":
        self._num_long_term_bytes = num_long_term_bytes
        return self

    def set_num_rows(self, num_rows: Optional[int]) -> "StandardTableDefinitionBuilder":
        self._num_rows = num_rows
        return self

    def set_streaming_buffer(self, streaming_buffer: Optional[StreamingBuffer]) -> "StandardTableDefinitionBuilder":
        self._streaming_buffer = streaming_buffer
        return self

    def set_time_partitioning(self, time_partitioning: Optional[TimePartitioning]) -> "StandardTableDefinitionBuilder":
        self._time_partitioning = time_partitioning
        return self

    def set_range_partitioning(self, range_partitioning: Optional[RangePartitioning]) -> "StandardTableDefinitionBuilder":
        self._range_partitioning = range_partitioning
        return self

    def set_clustering(self, clustering: Optional[Clustering]) -> "StandardTableDefinitionBuilder":
        self._clustering = clustering
        return self

    def build(self) -> StandardTableDefinition:
        return StandardTableDefinition(
            schema=self._schema,
            location=self._location,
            num_bytes=self._num_bytes,
            num_long_term_bytes=self._num_long_term_bytes,
            num_rows=self._num_rows,
            streaming_buffer=self._streaming_buffer,
            time_partitioning=self._time_partitioning,
            range_partitioning=self._range_partitioning,
            clustering=self._clustering,
        )


@dataclass(frozen=True)
class ViewDefinition(TableDefinition):
    """
    Definition of a logical view: a saved query exposed as a table.
    """
    type: ClassVar[str] = TableType.VIEW

    query: Optional[str] = None
    use_legacy_sql: Optional[bool] = None

    @classmethod
    def of(cls, query: str, schema: Optional[Schema] = None) -> "ViewDefinition":
        return cls(schema=schema, query=query)

    def to_pb(self) -> Dict:
        table = super().to_pb()
        table["view"] = drop_none({
            "query": self.query,
            "useLegacySql": self.use_legacy_sql,
        })
        return table

    @classmethod
    def from_pb(cls, table_pb: Dict) -> "ViewDefinition":
        _check_type(table_pb, TableType.VIEW)
        view_pb = table_pb.get("view") or {}
        schema_pb = table_pb.get("schema")
        return cls(
            schema=Schema.from_pb(schema_pb) if schema_pb is not None else None,
            query=view_pb.get("query"),
            use_legacy_sql=view_pb.get("useLegacySql"),
        )


_DEFINITION_TYPES = {
    TableType.TABLE: StandardTableDefinition,
    TableType.VIEW: ViewDefinition,
}
