from dataclasses import dataclass
from typing import Dict, Optional


@dataclass(frozen=True)
class TableReference:
    project_id: Optional[str]
    dataset_id: Optional[str]
    table_id: Optional[str]

    @property
    def full_table_id(self) -> str:
        return f"{self.project_id}.{self.dataset_id}.{self.table_id}"

    @classmethod
    def from_pb(cls, reference_pb: Optional[Dict]) -> "TableReference":
        reference_pb = reference_pb or {}
        return cls(
            project_id=reference_pb.get("projectId"),
            dataset_id=reference_pb.get("datasetId"),
            table_id=reference_pb.get("tableId"),
        )
