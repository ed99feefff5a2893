# src/mfsmt_core/type_table/table.py
"""
Resolves the schematic's declared type hierarchies into a read-only index.

Types are data, not classes: each hierarchy (node, connection, constraint) is a
set of type names plus a subtype-of relation, stored as a networkx `DiGraph` with
an edge from every subtype to its direct supertype. All queries are pure
functions of that graph; per-instance values are never consulted.
"""
import logging
from dataclasses import dataclass
from typing import Dict, FrozenSet, Mapping

import networkx as nx

from ..schematic.data_structures import Connection, Constraint, Node, Schematic, TypeDeclaration
from .exceptions import TypeHierarchyError

logger = logging.getLogger(__name__)

CONTROL_POINT_NODE_TYPE = "controlPoint"
PRESSURE_CONTROL_POINT_NODE_TYPE = "pressureControlPoint"
VOLTAGE_CONTROL_POINT_NODE_TYPE = "voltageControlPoint"
T_JUNCTION_NODE_TYPE = "tJunction"

CHANNEL_CONNECTION_TYPE = "channel"

CONTROL_POINT_PLACEMENT_CONSTRAINT_TYPE = "controlPointPlacement"
CHANNEL_DROPLET_VOLUME_CONSTRAINT_TYPE = "channelDropletVolume"


# --- Pure functions over a subtype graph ---

def build_subtype_graph(declarations: Mapping[str, TypeDeclaration], kind: str = "node") -> nx.DiGraph:
    """
    Builds the subtype relation (edge: subtype -> direct supertype) and checks that
    every supertype is declared and that the relation is acyclic.
    """
    graph = nx.DiGraph()
    for name, decl in declarations.items():
        graph.add_node(name)
        if decl.supertype is None:
            continue
        if decl.supertype not in declarations:
            raise TypeHierarchyError(
                details=f"{kind} type '{name}' declares unknown supertype '{decl.supertype}'.",
                type_name=name,
            )
        graph.add_edge(name, decl.supertype)

    if not nx.is_directed_acyclic_graph(graph):
        cycle = [edge[0] for edge in nx.find_cycle(graph)]
        raise TypeHierarchyError(
            details=f"{kind} type hierarchy contains a cycle: {' -> '.join(cycle + cycle[:1])}.",
            type_name=cycle[0],
        )
    return graph


def is_subtype_of(graph: nx.DiGraph, subtype: str, supertype: str) -> bool:
    """Reflexive, transitive subtype test. Unknown types are subtypes of nothing."""
    if subtype not in graph or supertype not in graph:
        return False
    return subtype == supertype or nx.has_path(graph, subtype, supertype)


def derived_types(graph: nx.DiGraph, base: str) -> FrozenSet[str]:
    """Every type that transitively derives from `base`, excluding `base` itself."""
    if base not in graph:
        return frozenset()
    return frozenset(nx.ancestors(graph, base))


# --- The table ---

@dataclass(frozen=True, eq=False)
class PrimitiveTypeTable:
    """
    Read-only index over one schematic's declared types, built once per run by
    `construct_type_table`.
    """
    node_type_graph: nx.DiGraph
    connection_type_graph: nx.DiGraph
    constraint_type_graph: nx.DiGraph

    control_point_node_type: TypeDeclaration
    pressure_control_point_node_type: TypeDeclaration
    voltage_control_point_node_type: TypeDeclaration
    derived_pressure_control_point_node_types: FrozenSet[str]
    derived_voltage_control_point_node_types: FrozenSet[str]

    channel_connection_type: TypeDeclaration
    constraint_types: Dict[str, TypeDeclaration]

    # --- Node queries ---

    def node_is_a(self, node: Node, type_name: str) -> bool:
        return is_subtype_of(self.node_type_graph, node.type_name, type_name)

    def is_pressure_control_point(self, node: Node) -> bool:
        return (node.type_name == self.pressure_control_point_node_type.name
                or node.type_name in self.derived_pressure_control_point_node_types)

    def is_voltage_control_point(self, node: Node) -> bool:
        return (node.type_name == self.voltage_control_point_node_type.name
                or node.type_name in self.derived_voltage_control_point_node_types)

    def is_control_point(self, node: Node) -> bool:
        return self.node_is_a(node, self.control_point_node_type.name)

    # --- Connection and constraint queries ---

    def is_channel(self, connection: Connection) -> bool:
        return is_subtype_of(self.connection_type_graph, connection.type_name, self.channel_connection_type.name)

    def constraint_is_a(self, constraint: Constraint, type_name: str) -> bool:
        return is_subtype_of(self.constraint_type_graph, constraint.type_name, type_name)


def _require_type(declarations: Mapping[str, TypeDeclaration], name: str, kind: str) -> TypeDeclaration:
    try:
        return declarations[name]
    except KeyError:
        raise TypeHierarchyError(
            details=f"the schematic does not declare the required {kind} type '{name}'.",
            type_name=name,
        ) from None


def construct_type_table(schematic: Schematic) -> PrimitiveTypeTable:
    """
    Resolves the base control-point types, checks that the pressure and voltage
    specializations derive from controlPoint, indexes their further subtypes and
    resolves the connection and constraint types.

    Raises:
        TypeHierarchyError: on any violation; no strategy has run at that point.
    """
    logger.info(f"Constructing type table for schematic '{schematic.name}'...")
    try:
        node_graph = build_subtype_graph(schematic.node_types, "node")
        connection_graph = build_subtype_graph(schematic.connection_types, "connection")
        constraint_graph = build_subtype_graph(schematic.constraint_types, "constraint")

        control_point = _require_type(schematic.node_types, CONTROL_POINT_NODE_TYPE, "node")
        pressure_cp = _require_type(schematic.node_types, PRESSURE_CONTROL_POINT_NODE_TYPE, "node")
        voltage_cp = _require_type(schematic.node_types, VOLTAGE_CONTROL_POINT_NODE_TYPE, "node")

        for specialization in (pressure_cp, voltage_cp):
            if not is_subtype_of(node_graph, specialization.name, control_point.name):
                raise TypeHierarchyError(
                    details=f"{specialization.name} must be a subtype of {control_point.name}.",
                    type_name=specialization.name,
                )

        channel = _require_type(schematic.connection_types, CHANNEL_CONNECTION_TYPE, "connection")
        constraint_types = {
            name: _require_type(schematic.constraint_types, name, "constraint")
            for name in (CONTROL_POINT_PLACEMENT_CONSTRAINT_TYPE, CHANNEL_DROPLET_VOLUME_CONSTRAINT_TYPE)
        }
    except TypeHierarchyError as e:
        e.schematic_name = schematic.name
        logger.error(f"Type table construction failed: {e}")
        raise

    table = PrimitiveTypeTable(
        node_type_graph=node_graph,
        connection_type_graph=connection_graph,
        constraint_type_graph=constraint_graph,
        control_point_node_type=control_point,
        pressure_control_point_node_type=pressure_cp,
        voltage_control_point_node_type=voltage_cp,
        derived_pressure_control_point_node_types=derived_types(node_graph, pressure_cp.name),
        derived_voltage_control_point_node_types=derived_types(node_graph, voltage_cp.name),
        channel_connection_type=channel,
        constraint_types=constraint_types,
    )
    logger.debug(
        f"Derived pressure control point types: {sorted(table.derived_pressure_control_point_node_types)}; "
        f"derived voltage control point types: {sorted(table.derived_voltage_control_point_node_types)}."
    )
    return table
