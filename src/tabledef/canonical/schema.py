from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from tabledef.canonical.field import Field


@dataclass(frozen=True)
class Schema:
    """
    Ordered, immutable list of top-level table columns.
    """
    fields: Tuple[Field, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "fields", tuple(self.fields))

    @classmethod
    def of(cls, *fields: Field) -> "Schema":
        return cls(fields=fields)

    # Convenience helpers
    def get(self, name: str) -> Optional[Field]:
        """
        Retrieve a top-level field by name.
        """
        for field in self.fields:
            if field.name == name:
                return field
        return None

    def __len__(self) -> int:
        return len(self.fields)

    def to_pb(self) -> Dict:
        return {"fields": [f.to_pb() for f in self.fields]}

    @classmethod
    def from_pb(cls, schema_pb: Dict) -> "Schema":
        return cls(
            fields=tuple(Field.from_pb(f) for f in schema_pb.get("fields") or [])
        )
