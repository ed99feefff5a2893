# src/mfsmt_core/schematic/parser.py
import logging
import re
import string
from pathlib import Path
from typing import Any, Dict, List, Union

import cerberus
import yaml

from .data_structures import Schematic, TypeDeclaration
from .exceptions import ParsingError, SchemaValidationError, TopologyError

logger = logging.getLogger(__name__)

# Identifier pattern without anchors, used for composition.
ID_REGEX_FRAGMENT = r"[a-zA-Z_][a-zA-Z0-9_]*"

# A valid identifier for a single token. '.' is reserved as the node/port
# separator in connection endpoints and '-' is not allowed in solver symbols.
ID_REGEX = f"^{ID_REGEX_FRAGMENT}$"
ALLOWED_ID_CHARS = set(string.ascii_letters + string.digits + "_")

# Connection endpoints are written 'node.port'.
ENDPOINT_REGEX = f"^({ID_REGEX_FRAGMENT})\\.({ID_REGEX_FRAGMENT})$"


class EnhancedValidator(cerberus.Validator):
    """Custom Cerberus validator enforcing the schematic naming conventions."""
    def __init__(self, *args, **kwargs):
        super(EnhancedValidator, self).__init__(*args, **kwargs)
        self.rules['id_regex'] = {'schema': {'type': 'boolean'}}
        self.rules['endpoint_regex'] = {'schema': {'type': 'boolean'}}
        self.rules['unique_elements_by_key'] = {'schema': {'type': 'string'}}

    def _validate_id_regex(self, constraint: bool, field: str, value: Any):
        if not constraint: return
        if not isinstance(value, str):
            self._error(field, "must be a string to be validated by id_regex.")
            return

        if not re.match(ID_REGEX, value):
            invalid_chars = sorted(list(set(value) - ALLOWED_ID_CHARS))
            message = (
                f"Identifier '{value}' is invalid. Identifiers must start with a letter or underscore, "
                "and can only contain letters, numbers, and underscores. "
                f"This identifier contains the following forbidden character(s): {invalid_chars}"
            )
            self._error(field, message)

    def _validate_endpoint_regex(self, constraint: bool, field: str, value: Any):
        if constraint and isinstance(value, str) and not re.match(ENDPOINT_REGEX, value):
            self._error(
                field,
                f"Endpoint '{value}' is invalid. Endpoints are written 'node.port' "
                f"(e.g., 'inlet0.out'), using valid identifiers on both sides.",
            )

    def _validate_unique_elements_by_key(self, key_for_uniqueness: str, field: str, value: List[Dict]):
        """
        Validates that all dictionaries in a list have a unique value for a given key.
        The rule's arguments are validated against this schema:
        {'type': 'string'}
        """
        if not isinstance(value, list):
            return # Let the 'type: list' rule handle this.

        seen_keys = set()
        duplicates = []
        for item in value:
            if not isinstance(item, dict):
                continue # Let sub-schema validation handle this.

            item_key = item.get(key_for_uniqueness)
            if item_key is not None:
                if item_key in seen_keys:
                    duplicates.append(item_key)
                else:
                    seen_keys.add(item_key)

        if duplicates:
            unique_duplicates = sorted(list(set(duplicates)))
            self._error(field, f"Duplicate values found for key '{key_for_uniqueness}': {unique_duplicates}")


class SchematicParser:
    """
    Loads and validates a schematic file (YAML, or JSON as a YAML subset) and
    produces the in-memory `Schematic` graph. Declared types are merged over the
    standard microfluidics type library.
    """
    _id_rule = {"type": "string", "required": True, "empty": False, "id_regex": True}
    _type_ref_rule = {"type": "string", "required": True, "empty": False, "id_regex": True}
    _endpoint_rule = {"type": "string", "required": True, "empty": False, "endpoint_regex": True}
    _attributes_rule = {
        "type": "dict", "required": False,
        "keysrules": {"type": "string", "id_regex": True},
        "valuesrules": {"type": ["number", "string"]},
    }

    _type_declarations_rule = {
        "type": "dict", "required": False,
        "keysrules": {"type": "string", "id_regex": True},
        "valuesrules": {
            "type": "dict", "nullable": True,
            "schema": {"supertype": {"type": "string", "required": False, "nullable": True, "id_regex": True}},
        },
    }

    _schema = {
        "name": {"type": "string", "required": False, "id_regex": True},
        "types": {
            "type": "dict", "required": False, "schema": {
                "nodes": _type_declarations_rule,
                "connections": _type_declarations_rule,
                "constraints": _type_declarations_rule,
            },
        },
        "nodes": {
            "type": "list", "required": True, "minlength": 1, "unique_elements_by_key": "id",
            "schema": {"type": "dict", "schema": {
                "id": _id_rule,
                "type": _type_ref_rule,
                "ports": {"type": "list", "required": False, "schema": {"type": "string", "id_regex": True}},
                "attributes": _attributes_rule,
            }},
        },
        "connections": {
            "type": "list", "required": False, "unique_elements_by_key": "id",
            "schema": {"type": "dict", "schema": {
                "id": _id_rule,
                "type": {"type": "string", "required": False, "id_regex": True, "default": "channel"},
                "from": _endpoint_rule,
                "to": _endpoint_rule,
                "attributes": _attributes_rule,
            }},
        },
        "constraints": {
            "type": "list", "required": False, "unique_elements_by_key": "id",
            "schema": {"type": "dict", "schema": {
                "id": _id_rule,
                "type": _type_ref_rule,
                "attributes": _attributes_rule,
            }},
        },
    }

    def __init__(self):
        self._validator = EnhancedValidator(self._schema)
        self._validator.allow_unknown = False
        logger.info("SchematicParser initialized with strict structural validation rules.")

    def parse(self, schematic_path: Union[str, Path]) -> Schematic:
        """Parses one schematic file and returns the synthesized Schematic."""
        resolved_path = Path(schematic_path).resolve()
        logger.info(f"Parsing schematic file: {resolved_path}")

        content = self._load_yaml(resolved_path)
        if not self._validator.validate(content):
            raise SchemaValidationError(self._validator.errors, resolved_path)
        document = self._validator.document

        schematic = Schematic(name=document.get("name", resolved_path.stem))
        types_block = document.get("types", {}) or {}
        self._merge_type_declarations(schematic.node_types, types_block.get("nodes"))
        self._merge_type_declarations(schematic.connection_types, types_block.get("connections"))
        self._merge_type_declarations(schematic.constraint_types, types_block.get("constraints"))

        for node_data in document["nodes"]:
            self._require_declared(node_data["type"], schematic.node_types, "node", node_data["id"], resolved_path)
            try:
                schematic.add_node(
                    node_data["id"],
                    node_data["type"],
                    port_names=node_data.get("ports", []),
                    attributes=node_data.get("attributes", {}),
                )
            except ValueError as e:
                raise ParsingError(details=f"Node '{node_data['id']}': {e}", file_path=resolved_path) from e

        for conn_data in document.get("connections", []):
            conn_type = conn_data.get("type", "channel")
            self._require_declared(conn_type, schematic.connection_types, "connection", conn_data["id"], resolved_path)
            try:
                from_port = schematic.get_port(*conn_data["from"].split("."))
                to_port = schematic.get_port(*conn_data["to"].split("."))
            except TopologyError as e:
                raise ParsingError(
                    details=f"Connection '{conn_data['id']}' references an unknown endpoint: {e.details}",
                    file_path=resolved_path,
                ) from e
            schematic.add_connection(
                conn_data["id"], from_port, to_port,
                type_name=conn_type,
                attributes=conn_data.get("attributes", {}),
            )

        for constraint_data in document.get("constraints", []):
            self._require_declared(constraint_data["type"], schematic.constraint_types, "constraint", constraint_data["id"], resolved_path)
            schematic.add_constraint(
                constraint_data["id"],
                constraint_data["type"],
                attributes=constraint_data.get("attributes", {}),
            )

        logger.info(
            f"Parsed schematic '{schematic.name}': {len(schematic.nodes)} node(s), "
            f"{len(schematic.connections)} connection(s), {len(schematic.constraints)} constraint(s)."
        )
        return schematic

    @staticmethod
    def _merge_type_declarations(target: Dict[str, TypeDeclaration], declared: Any):
        for type_name, body in (declared or {}).items():
            supertype = (body or {}).get("supertype")
            target[type_name] = TypeDeclaration(type_name, supertype)

    @staticmethod
    def _require_declared(type_name: str, declared: Dict[str, TypeDeclaration], kind: str, instance_id: str, path: Path):
        if type_name not in declared:
            raise ParsingError(
                details=(
                    f"The {kind} '{instance_id}' uses undeclared {kind} type '{type_name}'. "
                    f"Declared {kind} types: {sorted(declared)}."
                ),
                file_path=path,
            )

    def _load_yaml(self, source: Path) -> Dict[str, Any]:
        """Loads and performs basic sanity checks on a YAML or JSON file."""
        if not source.is_file():
            raise ParsingError(details=f"Schematic file not found at path: {source}", file_path=source)
        try:
            with source.open("r", encoding="utf-8") as f:
                content = yaml.safe_load(f)
            if content is None:
                raise ParsingError(details="The file is empty or contains no valid content.", file_path=source)
            if not isinstance(content, dict):
                raise ParsingError(details="The root of the schematic file must be a dictionary (mapping).", file_path=source)
            return content
        except PermissionError as e:
            raise ParsingError(details=f"Permission denied when trying to read file: {e}", file_path=source) from e
        except yaml.YAMLError as e:
            raise ParsingError(details=f"Invalid YAML syntax: {e}", file_path=source) from e
        except UnicodeDecodeError as e:
            raise ParsingError(details=f"File is not valid UTF-8 text: {e}", file_path=source) from e
