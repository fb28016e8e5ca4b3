from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from tabledef.utils.exceptions import InvalidArgumentError


class LegacySQLTypeName:
    """
    Column types as BigQuery reports them in a table schema.
    Standard SQL spellings are accepted and folded onto these names.
    """
    STRING = "STRING"
    BYTES = "BYTES"
    INTEGER = "INTEGER"
    FLOAT = "FLOAT"
    NUMERIC = "NUMERIC"
    BIGNUMERIC = "BIGNUMERIC"
    BOOLEAN = "BOOLEAN"
    TIMESTAMP = "TIMESTAMP"
    DATE = "DATE"
    TIME = "TIME"
    DATETIME = "DATETIME"
    GEOGRAPHY = "GEOGRAPHY"
    JSON = "JSON"
    INTERVAL = "INTERVAL"
    RANGE = "RANGE"
    RECORD = "RECORD"

    _VALUES = {
        STRING, BYTES, INTEGER, FLOAT, NUMERIC, BIGNUMERIC, BOOLEAN,
        TIMESTAMP, DATE, TIME, DATETIME, GEOGRAPHY, JSON, INTERVAL,
        RANGE, RECORD,
    }

    _ALIASES = {
        "INT64": INTEGER,
        "FLOAT64": FLOAT,
        "BOOL": BOOLEAN,
        "STRUCT": RECORD,
    }

    @classmethod
    def is_valid(cls, type_name: str) -> bool:
        return type_name in cls._VALUES

    @classmethod
    def normalize(cls, type_name: Optional[str]) -> str:
        if not type_name:
            raise InvalidArgumentError("Field type must not be empty")

        key = type_name.upper()
        key = cls._ALIASES.get(key, key)

        if not cls.is_valid(key):
            raise InvalidArgumentError(
                f"Unsupported field type: {type_name}"
            )
        return key


class FieldMode:
    NULLABLE = "NULLABLE"
    REQUIRED = "REQUIRED"
    REPEATED = "REPEATED"

    @classmethod
    def is_valid(cls, mode: str) -> bool:
        return mode in {cls.NULLABLE, cls.REQUIRED, cls.REPEATED}


@dataclass(frozen=True)
class Field:
    """
    A single column of a table schema.
    RECORD columns carry their nested columns in `subfields`.
    """
    name: str
    type: str
    mode: Optional[str] = None
    description: Optional[str] = None
    subfields: Optional[Tuple["Field", ...]] = None

    def __post_init__(self):
        if not self.name:
            raise InvalidArgumentError("Field name must not be empty")

        object.__setattr__(self, "type", LegacySQLTypeName.normalize(self.type))

        if self.mode is not None:
            mode = self.mode.upper()
            if not FieldMode.is_valid(mode):
                raise InvalidArgumentError(
                    f"Unsupported mode '{self.mode}' for field '{self.name}'"
                )
            object.__setattr__(self, "mode", mode)

        subfields = tuple(self.subfields) if self.subfields else None
        object.__setattr__(self, "subfields", subfields)

        if self.type == LegacySQLTypeName.RECORD and not subfields:
            raise InvalidArgumentError(
                f"The RECORD field '{self.name}' must have at least one sub-field"
            )
        if self.type != LegacySQLTypeName.RECORD and subfields:
            raise InvalidArgumentError(
                f"Only RECORD fields can have sub-fields, got {self.type} "
                f"for field '{self.name}'"
            )

    @classmethod
    def of(cls, name: str, type: str, *subfields: "Field") -> "Field":
        return cls(name=name, type=type, subfields=subfields or None)

    @classmethod
    def new_builder(cls, name: str, type: str, *subfields: "Field") -> "FieldBuilder":
        return FieldBuilder(name, type, subfields or None)

    def to_builder(self) -> "FieldBuilder":
        return FieldBuilder(
            self.name,
            self.type,
            self.subfields,
            mode=self.mode,
            description=self.description,
        )

    def to_pb(self) -> Dict:
        field = {
            "name": self.name,
            "type": self.type,
        }
        if self.mode is not None:
            field["mode"] = self.mode
        if self.description is not None:
            field["description"] = self.description
        if self.subfields:
            field["fields"] = [sf.to_pb() for sf in self.subfields]
        return field

    @classmethod
    def from_pb(cls, field_pb: Dict) -> "Field":
        subfields = field_pb.get("fields")
        return cls(
            name=field_pb.get("name"),
            type=field_pb.get("type"),
            mode=field_pb.get("mode"),
            description=field_pb.get("description"),
            subfields=tuple(cls.from_pb(sf) for sf in subfields) if subfields else None,
        )


class FieldBuilder:
    def __init__(
        self,
        name: str,
        type: str,
        subfields: Optional[Tuple[Field, ...]] = None,
        mode: Optional[str] = None,
        description: Optional[str] = None,
    ):
        self._name = name
        self._type = type
        self._subfields = subfields
        self._mode = mode
        self._description = description

    def set_mode(self, mode: Optional[str]) -> "FieldBuilder":
        self._mode = mode
        return self

    def set_description(self, description: Optional[str]) -> "FieldBuilder":
        self._description = description
        return self

    def build(self) -> Field:
        return Field(
            name=self._name,
            type=self._type,
            mode=self._mode,
            description=self._description,
            subfields=self._subfields,
        )
