# src/mfsmt_core/schematic/data_structures.py
# Required for forward references in type hints (e.g., 'Node')
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional

from .exceptions import TopologyError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TypeDeclaration:
    """
    A named type declared by a schematic, with at most one direct supertype.
    The set of declarations forms the subtype relation the type table resolves.
    """
    name: str
    supertype: Optional[str] = None


# --- Standard type library merged under every schematic's own declarations ---

STANDARD_NODE_TYPES: Dict[str, TypeDeclaration] = {
    decl.name: decl for decl in (
        TypeDeclaration("controlPoint"),
        TypeDeclaration("pressureControlPoint", "controlPoint"),
        TypeDeclaration("voltageControlPoint", "controlPoint"),
        TypeDeclaration("fluidEntry", "pressureControlPoint"),
        TypeDeclaration("fluidExit", "pressureControlPoint"),
        TypeDeclaration("electrode", "voltageControlPoint"),
        TypeDeclaration("channelCrossing"),
        TypeDeclaration("tJunction", "channelCrossing"),
    )
}

STANDARD_CONNECTION_TYPES: Dict[str, TypeDeclaration] = {
    "channel": TypeDeclaration("channel"),
}

STANDARD_CONSTRAINT_TYPES: Dict[str, TypeDeclaration] = {
    decl.name: decl for decl in (
        TypeDeclaration("controlPointPlacement"),
        TypeDeclaration("channelDropletVolume"),
    )
}


# Nodes, ports, connections and constraints are entities: two instances are the
# same only if they are the same object, so they use identity equality (eq=False).

@dataclass(eq=False)
class Node:
    """A component instance. Its ports are registered by name in `ports`."""
    type_name: str
    ports: Dict[str, Port] = field(default_factory=dict)
    attributes: Dict[str, Any] = field(default_factory=dict)

    def add_port(self, port_name: str) -> Port:
        if port_name in self.ports:
            raise ValueError(f"Port '{port_name}' is already registered on this node.")
        port = Port(parent=self)
        self.ports[port_name] = port
        return port


@dataclass(eq=False)
class Port:
    """
    A terminal of a node. A port does not know its own name; the name is the key
    under which its parent registered it.
    """
    parent: Node = field(repr=False)


@dataclass(eq=False)
class Connection:
    """A directed link from one port to another (a channel, for microfluidics)."""
    from_port: Port
    to_port: Port
    type_name: str = "channel"
    attributes: Dict[str, Any] = field(default_factory=dict)


@dataclass(eq=False)
class Constraint:
    """A typed bag of attributes that references other schematic entities by name."""
    type_name: str
    attributes: Dict[str, Any] = field(default_factory=dict)


@dataclass
class Schematic:
    """
    The in-memory device graph consumed (read-only) by the translation pipeline.

    Besides the entities themselves it carries the declared type hierarchies for
    nodes, connections and constraints. By default these start from the standard
    microfluidics type library; a schematic may add to or override it.
    """
    name: str
    node_types: Dict[str, TypeDeclaration] = field(default_factory=lambda: dict(STANDARD_NODE_TYPES))
    connection_types: Dict[str, TypeDeclaration] = field(default_factory=lambda: dict(STANDARD_CONNECTION_TYPES))
    constraint_types: Dict[str, TypeDeclaration] = field(default_factory=lambda: dict(STANDARD_CONSTRAINT_TYPES))
    nodes: Dict[str, Node] = field(default_factory=dict)
    connections: Dict[str, Connection] = field(default_factory=dict)
    constraints: Dict[str, Constraint] = field(default_factory=dict)

    # --- Construction helpers (used by the loader and by tests) ---

    def declare_node_type(self, name: str, supertype: Optional[str] = None) -> TypeDeclaration:
        decl = TypeDeclaration(name, supertype)
        self.node_types[name] = decl
        return decl

    def add_node(
        self,
        name: str,
        type_name: str,
        port_names: Iterable[str] = (),
        attributes: Optional[Dict[str, Any]] = None,
    ) -> Node:
        if name in self.nodes:
            raise ValueError(f"Node '{name}' is already defined in schematic '{self.name}'.")
        node = Node(type_name=type_name, attributes=dict(attributes or {}))
        for port_name in port_names:
            node.add_port(port_name)
        self.nodes[name] = node
        return node

    def add_connection(
        self,
        name: str,
        from_port: Port,
        to_port: Port,
        type_name: str = "channel",
        attributes: Optional[Dict[str, Any]] = None,
    ) -> Connection:
        if name in self.connections:
            raise ValueError(f"Connection '{name}' is already defined in schematic '{self.name}'.")
        connection = Connection(from_port, to_port, type_name, dict(attributes or {}))
        self.connections[name] = connection
        return connection

    def add_constraint(
        self,
        name: str,
        type_name: str,
        attributes: Optional[Dict[str, Any]] = None,
    ) -> Constraint:
        if name in self.constraints:
            raise ValueError(f"Constraint '{name}' is already defined in schematic '{self.name}'.")
        constraint = Constraint(type_name, dict(attributes or {}))
        self.constraints[name] = constraint
        return constraint

    # --- Queries ---

    def get_node(self, name: str) -> Node:
        try:
            return self.nodes[name]
        except KeyError:
            raise TopologyError(
                details=f"Schematic '{self.name}' has no node named '{name}'.",
                entity=name,
            ) from None

    def get_node_name(self, node: Node) -> str:
        for name, candidate in self.nodes.items():
            if candidate is node:
                return name
        raise TopologyError(
            details=f"Node {node!r} is not part of schematic '{self.name}'.",
            entity=repr(node),
        )

    def get_connection_name(self, connection: Connection) -> str:
        for name, candidate in self.connections.items():
            if candidate is connection:
                return name
        raise TopologyError(
            details=f"Connection {connection!r} is not part of schematic '{self.name}'.",
            entity=repr(connection),
        )

    def get_port(self, node_name: str, port_name: str) -> Port:
        node = self.get_node(node_name)
        try:
            return node.ports[port_name]
        except KeyError:
            raise TopologyError(
                details=(
                    f"Node '{node_name}' has no port named '{port_name}'. "
                    f"Available ports: {sorted(node.ports)}."
                ),
                entity=f"{node_name}.{port_name}",
            ) from None

    def connections_at(self, node: Node):
        """Yields (name, connection) for every connection with an endpoint on `node`, in schematic order."""
        for name, connection in self.connections.items():
            if connection.from_port.parent is node or connection.to_port.parent is node:
                yield name, connection
