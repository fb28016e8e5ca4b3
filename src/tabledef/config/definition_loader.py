import json
import os
from typing import Dict

import yaml

from tabledef.canonical.table_definition import TableDefinition
from tabledef.observability.logger import log_event
from tabledef.utils.exceptions import InvalidArgumentError


class DefinitionConfigLoader:
    """
    Loads a table definition kept on disk as a BigQuery Table resource.
    Supports .yaml / .yml / .json documents.
    """

    _YAML_SUFFIXES = {".yaml", ".yml"}
    _JSON_SUFFIXES = {".json"}

    def __init__(self, config_path: str):
        self.config_path = config_path

    # ------------------------------------------
    # Load document
    # ------------------------------------------
    def _load_config(self) -> Dict:
        if not os.path.exists(self.config_path):
            raise FileNotFoundError(f"Config file not found: {self.config_path}")

        suffix = os.path.splitext(self.config_path)[1].lower()

        with open(self.config_path, "r", encoding="utf-8") as f:
            if suffix in self._YAML_SUFFIXES:
                document = yaml.safe_load(f)
            elif suffix in self._JSON_SUFFIXES:
                document = json.load(f)
            else:
                raise InvalidArgumentError(
                    f"Unsupported config format '{suffix}' for {self.config_path}"
                )

        if not isinstance(document, dict):
            raise InvalidArgumentError(
                f"Config file {self.config_path} must contain a Table resource mapping"
            )
        return document

    # ------------------------------------------
    # Decode definition
    # ------------------------------------------
    def load(self) -> TableDefinition:
        definition = TableDefinition.from_pb(self._load_config())

        log_event("TABLE_DEFINITION_LOADED", {
            "config_path": self.config_path,
            "type": definition.type,
        })
        return definition


def load_definition(config_path: str) -> TableDefinition:
    return DefinitionConfigLoader(config_path).load()
