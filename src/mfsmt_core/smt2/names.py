# src/mfsmt_core/smt2/names.py
"""
Deterministic symbol names for schematic entities.

Every name function here is pure: the identifier depends only on the entity's
name in the schematic and the physical quantity requested, so independently
written strategies that ask for the same (entity, quantity) pair always agree on
the symbol.

The suffix scheme alone cannot keep distinct pairs apart for every possible set
of entity names (node 'a_b' and port 'b' of node 'a' both yield 'a_b_pressure';
a node and a connection sharing a name share '_pos_x'). `check_namespace`
enumerates every symbol a schematic can produce and rejects such schematics
before any strategy runs.
"""
import logging
from typing import Dict

from ..schematic.data_structures import Connection, Node, Port, Schematic
from .exceptions import SymbolNamingError
from .expressions import Symbol

logger = logging.getLogger(__name__)

PI_SYMBOL_NAME = "constant_pi"


def constant_pi() -> Symbol:
    """The solver-side pi constant; declared and defined once per program."""
    return Symbol(PI_SYMBOL_NAME)


def node_x(schematic: Schematic, node: Node) -> Symbol:
    """x-coordinate of a node's position."""
    return Symbol(f"{schematic.get_node_name(node)}_pos_x")


def node_y(schematic: Schematic, node: Node) -> Symbol:
    """y-coordinate of a node's position."""
    return Symbol(f"{schematic.get_node_name(node)}_pos_y")


def node_pressure(schematic: Schematic, node: Node) -> Symbol:
    """Pressure throughout an entire node, i.e. at every port."""
    return Symbol(f"{schematic.get_node_name(node)}_pressure")


def port_name(schematic: Schematic, port: Port) -> str:
    """Reverse-maps a port onto the name its parent node registered it under."""
    for name, candidate in port.parent.ports.items():
        if candidate is port:
            return name
    node_name = schematic.get_node_name(port.parent)
    raise SymbolNamingError(
        details=f"Could not map port to name for node '{node_name}'.",
        entity=node_name,
    )


def port_pressure(schematic: Schematic, port: Port) -> Symbol:
    """Pressure at a single port of a node."""
    node_name = schematic.get_node_name(port.parent)
    return Symbol(f"{node_name}_{port_name(schematic, port)}_pressure")


def channel_length(schematic: Schematic, channel: Connection) -> Symbol:
    """Length of a channel. The suffix is a fixed naming convention only."""
    return Symbol(f"{schematic.get_connection_name(channel)}_pos_x")


def channel_flow_rate(schematic: Schematic, channel: Connection) -> Symbol:
    """
    Volumetric flow rate through a channel. Positive flow runs from the channel's
    "from" port to its "to" port, i.e. (from) --(ch)-> (to).
    """
    return Symbol(f"{schematic.get_connection_name(channel)}_flowrate")


def channel_resistance(schematic: Schematic, channel: Connection) -> Symbol:
    """Hydrodynamic resistance of a channel."""
    return Symbol(f"{schematic.get_connection_name(channel)}_resistance")


def junction_droplet_length(schematic: Schematic, junction: Node) -> Symbol:
    """Length of the droplets produced by a droplet-generating junction."""
    return Symbol(f"{schematic.get_node_name(junction)}_droplet_length")


def check_namespace(schematic: Schematic) -> Dict[str, str]:
    """
    Generates every symbol the schematic can give rise to and verifies that no two
    distinct (entity, quantity) pairs share an identifier.

    Returns:
        A mapping from symbol name to a human-readable description of its owner.

    Raises:
        SymbolNamingError: on the first collision found.
    """
    owners: Dict[str, str] = {}

    def claim(symbol: Symbol, owner: str):
        previous = owners.get(symbol.name)
        if previous is not None:
            raise SymbolNamingError(
                details=(
                    f"Symbol '{symbol.name}' would be generated for both {previous} and {owner}. "
                    f"Rename one of the entities in schematic '{schematic.name}'."
                ),
                entity=symbol.name,
            )
        owners[symbol.name] = owner

    claim(constant_pi(), "the pi constant")
    for name, node in schematic.nodes.items():
        claim(node_x(schematic, node), f"x position of node '{name}'")
        claim(node_y(schematic, node), f"y position of node '{name}'")
        claim(node_pressure(schematic, node), f"pressure of node '{name}'")
        claim(junction_droplet_length(schematic, node), f"droplet length of node '{name}'")
        for port_label, port in node.ports.items():
            claim(port_pressure(schematic, port), f"pressure of port '{name}.{port_label}'")
    for name, connection in schematic.connections.items():
        claim(channel_length(schematic, connection), f"length of connection '{name}'")
        claim(channel_flow_rate(schematic, connection), f"flow rate of connection '{name}'")
        claim(channel_resistance(schematic, connection), f"resistance of connection '{name}'")

    logger.debug(f"Symbol namespace of '{schematic.name}' holds {len(owners)} distinct names.")
    return owners
