# src/mfsmt_core/strategies/placement.py
"""
Geometric placement rules.

Every node gets a position (x, y) on the chip and every connection a length.
Channels are modelled as straight segments between the positions of their
endpoint nodes, so the rules below are polynomial in those symbols and stay
within QF_NRA.
"""
import itertools
import logging
from typing import List

import numpy as np

from ..smt2 import names, qfnra
from ..smt2.expressions import SExpression
from ..schematic.data_structures import Connection, Node, Schematic
from ..schematic.exceptions import TopologyError
from ..type_table import CONTROL_POINT_PLACEMENT_CONSTRAINT_TYPE
from .base import TranslationStrategy, TranslationStrategySet, read_quantity

logger = logging.getLogger(__name__)


def _other_endpoint(connection: Connection, node: Node) -> Node:
    if connection.from_port.parent is node:
        return connection.to_port.parent
    return connection.from_port.parent


def _squared_distance(schematic: Schematic, a: Node, b: Node) -> SExpression:
    dx = qfnra.subtract(names.node_x(schematic, b), names.node_x(schematic, a))
    dy = qfnra.subtract(names.node_y(schematic, b), names.node_y(schematic, a))
    return qfnra.add(qfnra.square(dx), qfnra.square(dy))


class PlacementDeclarationStrategy(TranslationStrategy):
    """Declares the position of every node and the length of every connection."""

    def translation_step(self, schematic, process_params, type_table):
        exprs: List[SExpression] = []
        for node in schematic.nodes.values():
            exprs.append(qfnra.declare_real_variable(names.node_x(schematic, node)))
            exprs.append(qfnra.declare_real_variable(names.node_y(schematic, node)))
        for connection in schematic.connections.values():
            exprs.append(qfnra.declare_real_variable(names.channel_length(schematic, connection)))
        return exprs


class FiniteChipAreaRuleStrategy(TranslationStrategy):
    """
    The chip is a finite rectangle: every node lies strictly inside
    (0, maximum_chip_size_x) x (0, maximum_chip_size_y).
    """

    def translation_step(self, schematic, process_params, type_table):
        exprs: List[SExpression] = []
        for node in schematic.nodes.values():
            node_x = names.node_x(schematic, node)
            node_y = names.node_y(schematic, node)
            exprs.append(qfnra.assert_greater(node_x, 0.0))
            exprs.append(qfnra.assert_greater(node_y, 0.0))
            exprs.append(qfnra.assert_less_than(node_x, process_params.maximum_chip_size_x))
            exprs.append(qfnra.assert_less_than(node_y, process_params.maximum_chip_size_y))
        return exprs


class MinimumChannelLengthStrategy(TranslationStrategy):
    """Every connection is at least `minimum_channel_length` long."""

    def translation_step(self, schematic, process_params, type_table):
        return [
            qfnra.assert_greater_equal(
                names.channel_length(schematic, connection),
                process_params.minimum_channel_length,
            )
            for connection in schematic.connections.values()
        ]


class MinimumNodeDistanceStrategy(TranslationStrategy):
    """
    Any two distinct nodes are at least `minimum_node_distance` apart. The
    distance is compared squared so no square root is needed.
    """

    def translation_step(self, schematic, process_params, type_table):
        min_distance_sq = process_params.minimum_node_distance ** 2
        return [
            qfnra.assert_greater_equal(_squared_distance(schematic, a, b), min_distance_sq)
            for a, b in itertools.combinations(schematic.nodes.values(), 2)
        ]


class ChannelGeometryStrategy(TranslationStrategy):
    """Ties each connection's length to the positions of its endpoint nodes."""

    def translation_step(self, schematic, process_params, type_table):
        exprs: List[SExpression] = []
        for connection in schematic.connections.values():
            length = names.channel_length(schematic, connection)
            exprs.append(qfnra.assert_equal(
                qfnra.square(length),
                _squared_distance(schematic, connection.from_port.parent, connection.to_port.parent),
            ))
        return exprs


class ChannelCrossingAngleStrategy(TranslationStrategy):
    """
    Two channels meeting at a node must diverge by at least the critical
    crossing angle. For the direction vectors u and v from the node towards the
    far endpoints of the two channels this is

        u . v <= |u| |v| cos(theta_crit)

    where |u| and |v| are the channel length symbols.
    """

    def translation_step(self, schematic, process_params, type_table):
        cos_critical = float(np.cos(process_params.critical_crossing_angle))
        exprs: List[SExpression] = []
        for node in schematic.nodes.values():
            incident = [
                connection for _, connection in schematic.connections_at(node)
                if _other_endpoint(connection, node) is not node
            ]
            for first, second in itertools.combinations(incident, 2):
                exprs.append(self._angle_rule(schematic, node, first, second, cos_critical))
        return exprs

    @staticmethod
    def _angle_rule(schematic, node, first, second, cos_critical) -> SExpression:
        x0, y0 = names.node_x(schematic, node), names.node_y(schematic, node)
        u_end = _other_endpoint(first, node)
        v_end = _other_endpoint(second, node)
        ux = qfnra.subtract(names.node_x(schematic, u_end), x0)
        uy = qfnra.subtract(names.node_y(schematic, u_end), y0)
        vx = qfnra.subtract(names.node_x(schematic, v_end), x0)
        vy = qfnra.subtract(names.node_y(schematic, v_end), y0)
        dot = qfnra.add(qfnra.multiply(ux, vx), qfnra.multiply(uy, vy))
        bound = qfnra.multiply(
            names.channel_length(schematic, first),
            names.channel_length(schematic, second),
            cos_critical,
        )
        return qfnra.assert_less_equal(dot, bound)


class ControlPointPlacementStrategy(TranslationStrategy):
    """
    Pins control points to fixed coordinates. Each controlPointPlacement
    constraint names a node (which must be a control point) and gives `x`, `y`
    or both, in metres.
    """

    def translation_step(self, schematic, process_params, type_table):
        exprs: List[SExpression] = []
        for constraint_name, constraint in schematic.constraints.items():
            if not type_table.constraint_is_a(constraint, CONTROL_POINT_PLACEMENT_CONSTRAINT_TYPE):
                continue
            owner = f"constraint '{constraint_name}'"
            node_name = constraint.attributes.get("node")
            if node_name is None:
                raise TopologyError(details=f"{owner} does not name a 'node'.", entity=constraint_name)
            node = schematic.get_node(str(node_name))
            if not type_table.is_control_point(node):
                raise TopologyError(
                    details=f"{owner} places node '{node_name}', which is not a control point (type '{node.type_name}').",
                    entity=constraint_name,
                )
            x = read_quantity(constraint.attributes, "x", "meter", owner)
            y = read_quantity(constraint.attributes, "y", "meter", owner)
            if x is None and y is None:
                raise TopologyError(details=f"{owner} gives neither 'x' nor 'y'.", entity=constraint_name)
            if x is not None:
                exprs.append(qfnra.assert_equal(names.node_x(schematic, node), x))
            if y is not None:
                exprs.append(qfnra.assert_equal(names.node_y(schematic, node), y))
        return exprs


class PlacementTranslationStrategySet(TranslationStrategySet):
    """Every placement rule, declarations first."""

    @classmethod
    def default_strategies(cls):
        return (
            PlacementDeclarationStrategy(),
            FiniteChipAreaRuleStrategy(),
            MinimumChannelLengthStrategy(),
            MinimumNodeDistanceStrategy(),
            ChannelGeometryStrategy(),
            ChannelCrossingAngleStrategy(),
            ControlPointPlacementStrategy(),
        )
