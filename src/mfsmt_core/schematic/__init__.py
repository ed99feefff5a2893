# src/mfsmt_core/schematic/__init__.py
from .data_structures import (
    Connection,
    Constraint,
    Node,
    Port,
    Schematic,
    TypeDeclaration,
    STANDARD_CONNECTION_TYPES,
    STANDARD_CONSTRAINT_TYPES,
    STANDARD_NODE_TYPES,
)
from .parser import SchematicParser
from .exceptions import ParsingError, SchemaValidationError, TopologyError

__all__ = [
    # Graph model
    "Schematic",
    "Node",
    "Port",
    "Connection",
    "Constraint",
    "TypeDeclaration",
    "STANDARD_NODE_TYPES",
    "STANDARD_CONNECTION_TYPES",
    "STANDARD_CONSTRAINT_TYPES",
    # Loader and Exceptions
    "SchematicParser",
    "ParsingError",
    "SchemaValidationError",
    "TopologyError",
]
