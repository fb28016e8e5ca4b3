import json
import os
from typing import Dict

import yaml

from tabledef.canonical.table_definition import TableDefinition
from tabledef.observability.logger import log_event
from tabledef.utils.exceptions import InvalidArgumentError


class TableDefinitionExporter:
    """
    Exports a table definition as its BigQuery Table resource,
    in JSON or YAML.
    """

    def __init__(self, definition: TableDefinition):
        self.definition = definition

    def export(self) -> Dict:
        """
        Return the definition as a JSON-serializable Table resource.
        """
        return self.definition.to_pb()

    def export_to_json_string(self, indent: int = 2) -> str:
        return json.dumps(self.export(), indent=indent)

    def export_to_yaml_string(self) -> str:
        return yaml.safe_dump(
            self.export(),
            sort_keys=False,
            default_flow_style=False
        )

    def export_to_file(self, file_path: str):
        """
        Write the definition to disk; the format follows the file suffix.
        """
        suffix = os.path.splitext(file_path)[1].lower()
        if suffix in {".yaml", ".yml"}:
            content = self.export_to_yaml_string()
        elif suffix == ".json":
            content = self.export_to_json_string()
        else:
            raise InvalidArgumentError(
                f"Unsupported export format '{suffix}' for {file_path}"
            )

        with open(file_path, "w", encoding="utf-8") as f:
            f.write(content)

        log_event("TABLE_DEFINITION_EXPORTED", {
            "file_path": file_path,
            "type": self.definition.type,
        })
