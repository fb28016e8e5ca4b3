from dataclasses import dataclass
from typing import Dict, List, Tuple


@dataclass(frozen=True)
class Clustering:
    """
    Ordered column names used to co-locate related rows.
    Order matters: BigQuery sorts by the first column, then the second, ...
    """
    fields: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "fields", tuple(self.fields))

    @classmethod
    def of(cls, *fields: str) -> "Clustering":
        return cls(fields=fields)

    @classmethod
    def new_builder(cls) -> "ClusteringBuilder":
        return ClusteringBuilder()

    def to_pb(self) -> Dict:
        return {"fields": list(self.fields)}

    @classmethod
    def from_pb(cls, clustering_pb: Dict) -> "Clustering":
        return cls(fields=tuple(clustering_pb.get("fields") or []))


class ClusteringBuilder:
    def __init__(self):
        self._fields: List[str] = []

    def set_fields(self, fields: List[str]) -> "ClusteringBuilder":
        self._fields = list(fields)
        return self

    def build(self) -> Clustering:
        return Clustering(fields=tuple(self._fields))
