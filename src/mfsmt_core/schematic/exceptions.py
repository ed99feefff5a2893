# src/mfsmt_core/schematic/exceptions.py
"""
Defines the diagnosable exceptions for the schematic subsystem: loading a
schematic file and resolving structural relationships inside a loaded one.

`ParsingError` and `SchemaValidationError` belong to the loader. `TopologyError`
is raised whenever a required structural relationship (a node by name, a port's
name on its parent, a junction's channel) cannot be resolved while translating.
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from ..errors import DiagnosableError, format_diagnostic_report


class BaseParsingError(DiagnosableError):
    """
    A local, concrete base class for all schematic-file parsing and schema
    validation errors.
    """
    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Generic Schematic Parsing Error",
            details=str(self),
            suggestion="Please check the format and content of the schematic file.",
            context={}
        )


@dataclass(frozen=True)
class ParsingError(BaseParsingError):
    """
    Logical or file-system errors while loading a schematic: a missing file,
    invalid YAML, or references to undeclared types, nodes or ports.
    """
    details: str
    file_path: Path

    def __str__(self):
        return f"Parsing error in file '{self.file_path}': {self.details}"

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Schematic Parsing or File Error",
            details=self.details,
            suggestion="Ensure the file exists, contains valid YAML or JSON, and that every referenced type, node and port is declared.",
            context={'source_file': self.file_path}
        )


@dataclass(frozen=True)
class SchemaValidationError(BaseParsingError):
    """
    Raised when the file is syntactically valid but does not conform to the
    schematic schema (missing keys, invalid identifiers, duplicate ids).
    """
    errors: Dict[str, Any]
    file_path: Path

    def __str__(self):
        error_lines = [
            f"  - In field '{k}': {v}"
            for k, v in sorted(self.errors.items())
        ]
        return (
            f"Schematic schema validation failed for file '{self.file_path}':\n"
            + "\n".join(error_lines)
        )

    def get_diagnostic_report(self) -> str:
        error_list_str = "\n".join(
            f"  - Field '{k}': {v}"
            for k, v in sorted(self.errors.items())
        )
        details = (
            "The structure of the schematic file does not conform to the required schema.\n"
            f"See details for {len(self.errors)} issue(s) below:\n\n{error_list_str}"
        )
        return format_diagnostic_report(
            error_type="Schematic Schema Validation Error",
            details=details,
            suggestion="Correct the listed fields. Identifiers may only contain letters, digits and underscores, ids must be unique, and endpoints are written 'node.port'.",
            context={'source_file': self.file_path}
        )


@dataclass()
class TopologyError(DiagnosableError):
    """
    A required structural relationship in the schematic cannot be resolved.
    """
    details: str
    entity: Optional[str] = None

    def __str__(self):
        return self.details

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Schematic Topology Error",
            details=self.details,
            suggestion="Check that the named node, port or channel exists and is wired as the device type requires.",
            context={'entity': self.entity}
        )
