# src/mfsmt_core/type_table/__init__.py
from .table import (
    PrimitiveTypeTable,
    construct_type_table,
    build_subtype_graph,
    is_subtype_of,
    derived_types,
    CONTROL_POINT_NODE_TYPE,
    PRESSURE_CONTROL_POINT_NODE_TYPE,
    VOLTAGE_CONTROL_POINT_NODE_TYPE,
    T_JUNCTION_NODE_TYPE,
    CHANNEL_CONNECTION_TYPE,
    CONTROL_POINT_PLACEMENT_CONSTRAINT_TYPE,
    CHANNEL_DROPLET_VOLUME_CONSTRAINT_TYPE,
)
from .exceptions import TypeHierarchyError

__all__ = [
    "PrimitiveTypeTable",
    "construct_type_table",
    "build_subtype_graph",
    "is_subtype_of",
    "derived_types",
    "CONTROL_POINT_NODE_TYPE",
    "PRESSURE_CONTROL_POINT_NODE_TYPE",
    "VOLTAGE_CONTROL_POINT_NODE_TYPE",
    "T_JUNCTION_NODE_TYPE",
    "CHANNEL_CONNECTION_TYPE",
    "CONTROL_POINT_PLACEMENT_CONSTRAINT_TYPE",
    "CHANNEL_DROPLET_VOLUME_CONSTRAINT_TYPE",
    "TypeHierarchyError",
]
