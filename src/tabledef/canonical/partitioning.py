from dataclasses import dataclass
from typing import Dict, Optional

from tabledef.utils.exceptions import InvalidArgumentError
from tabledef.utils.wire import drop_none, int64_from_pb, int64_to_pb

"""
Partitioning specs attached to a standard table.

- Time partitioning splits rows by DAY / HOUR / MONTH / YEAR, either on a
  DATE/TIMESTAMP/DATETIME column or on ingestion time when no field is set.
- Range partitioning splits rows on integer ranges of a single column.
"""


class TimePartitioningType:
    DAY = "DAY"
    HOUR = "HOUR"
    MONTH = "MONTH"
    YEAR = "YEAR"

    @classmethod
    def is_valid(cls, type_name: Optional[str]) -> bool:
        return type_name in {cls.DAY, cls.HOUR, cls.MONTH, cls.YEAR}


@dataclass(frozen=True)
class TimePartitioning:
    type: str
    expiration_ms: Optional[int] = None
    field: Optional[str] = None
    require_partition_filter: Optional[bool] = None

    def __post_init__(self):
        if not TimePartitioningType.is_valid(self.type):
            raise InvalidArgumentError(
                f"Unsupported time partitioning type: {self.type}. "
                f"Allowed values: DAY, HOUR, MONTH, YEAR"
            )

    @classmethod
    def of(cls, type: str, expiration_ms: Optional[int] = None) -> "TimePartitioning":
        return cls(type=type, expiration_ms=expiration_ms)

    def to_pb(self) -> Dict:
        return drop_none({
            "type": self.type,
            "expirationMs": int64_to_pb(self.expiration_ms),
            "field": self.field,
            "requirePartitionFilter": self.require_partition_filter,
        })

    @classmethod
    def from_pb(cls, partitioning_pb: Dict) -> "TimePartitioning":
        return cls(
            type=partitioning_pb.get("type"),
            expiration_ms=int64_from_pb(partitioning_pb.get("expirationMs")),
            field=partitioning_pb.get("field"),
            require_partition_filter=partitioning_pb.get("requirePartitionFilter"),
        )


@dataclass(frozen=True)
class RangePartitioning:
    field: str
    start: int
    end: int
    interval: int

    def __post_init__(self):
        if None in (self.start, self.end, self.interval):
            raise InvalidArgumentError(
                f"Range partitioning on '{self.field}' needs start, end and interval"
            )
        if self.interval <= 0:
            raise InvalidArgumentError(
                f"Range partitioning interval must be positive, got {self.interval}"
            )
        if self.end <= self.start:
            raise InvalidArgumentError(
                f"Range partitioning end ({self.end}) must be greater "
                f"than start ({self.start})"
            )

    def to_pb(self) -> Dict:
        return {
            "field": self.field,
            "range": {
                "start": int64_to_pb(self.start),
                "end": int64_to_pb(self.end),
                "interval": int64_to_pb(self.interval),
            },
        }

    @classmethod
    def from_pb(cls, partitioning_pb: Dict) -> "RangePartitioning":
        range_pb = partitioning_pb.get("range") or {}
        return cls(
            field=partitioning_pb.get("field"),
            start=int64_from_pb(range_pb.get("start")),
            end=int64_from_pb(range_pb.get("end")),
            interval=int64_from_pb(range_pb.get("interval")),
        )
