# src/mfsmt_core/strategies/pressure_flow.py
"""
Single-phase pressure-driven flow.

The channel network is treated as a hydraulic circuit: every channel obeys the
Hagen-Poiseuille analogue of Ohm's law (dP = Q R), volume is conserved at every
node that is not a control point, and pressure control points may fix their
node pressure. Pressure is uniform across the ports of a node.
"""
import logging
from typing import List

from ..constants import (
    CIRCULAR_RESISTANCE_COEFFICIENT,
    RECTANGULAR_ASPECT_CORRECTION,
    RECTANGULAR_RESISTANCE_COEFFICIENT,
)
from ..schematic.data_structures import Connection, Schematic
from ..schematic.exceptions import TopologyError
from ..smt2 import names, qfnra
from ..smt2.expressions import SExpression
from .base import (
    TranslationStrategy,
    TranslationStrategySet,
    read_quantity,
    require_positive_quantity,
    signed_inflow,
    sum_of,
)

logger = logging.getLogger(__name__)

CIRCULAR_SHAPE = "circular"
RECTANGULAR_SHAPE = "rectangular"
VISCOSITY_UNIT = "pascal * second"


def _channels(schematic: Schematic, type_table):
    for name, connection in schematic.connections.items():
        if type_table.is_channel(connection):
            yield name, connection


def _source_kind(type_table, node) -> str:
    if type_table.is_pressure_control_point(node):
        return "pressure"
    if type_table.is_voltage_control_point(node):
        return "voltage"
    return "control point"


class PressureFlowDeclarationStrategy(TranslationStrategy):
    """Declares node and port pressures and the flow rate and resistance of every channel."""

    def translation_step(self, schematic, process_params, type_table):
        exprs: List[SExpression] = []
        for node in schematic.nodes.values():
            exprs.append(qfnra.declare_real_variable(names.node_pressure(schematic, node)))
            for port in node.ports.values():
                exprs.append(qfnra.declare_real_variable(names.port_pressure(schematic, port)))
        for _, channel in _channels(schematic, type_table):
            exprs.append(qfnra.declare_real_variable(names.channel_flow_rate(schematic, channel)))
            exprs.append(qfnra.declare_real_variable(names.channel_resistance(schematic, channel)))
        return exprs


class PortPressureStrategy(TranslationStrategy):
    """Every port sits at its node's pressure."""

    def translation_step(self, schematic, process_params, type_table):
        return [
            qfnra.assert_equal(names.port_pressure(schematic, port), names.node_pressure(schematic, node))
            for node in schematic.nodes.values()
            for port in node.ports.values()
        ]


class ChannelResistanceStrategy(TranslationStrategy):
    """
    Relates each channel's resistance to its geometry and the fluid viscosity.

    *   Circular cross-section (`shape: circular`, `radius`, `viscosity`):
        R = 8 mu L / (pi r^4), asserted as R * pi * r^4 = 8 mu L.
    *   Rectangular cross-section (`width`, `height`, `viscosity`):
        R = 12 mu L / (w h^3 (1 - 0.63 h / w)) with h the smaller side.
    *   No geometry given: the resistance is only required to be positive.
    """

    def translation_step(self, schematic, process_params, type_table):
        exprs: List[SExpression] = []
        for name, channel in _channels(schematic, type_table):
            resistance = names.channel_resistance(schematic, channel)
            exprs.append(qfnra.assert_greater(resistance, 0.0))
            model = self._resistance_model(schematic, name, channel)
            if model is not None:
                exprs.append(model)
        return exprs

    @staticmethod
    def _resistance_model(schematic: Schematic, name: str, channel: Connection):
        owner = f"channel '{name}'"
        attributes = channel.attributes
        resistance = names.channel_resistance(schematic, channel)
        length = names.channel_length(schematic, channel)
        shape = str(attributes.get("shape", RECTANGULAR_SHAPE))

        if shape == CIRCULAR_SHAPE:
            radius = require_positive_quantity(attributes, "radius", "meter", owner)
            viscosity = require_positive_quantity(attributes, "viscosity", VISCOSITY_UNIT, owner)
            return qfnra.assert_equal(
                qfnra.multiply(resistance, names.constant_pi(), radius ** 4),
                qfnra.multiply(CIRCULAR_RESISTANCE_COEFFICIENT * viscosity, length),
            )
        if shape != RECTANGULAR_SHAPE:
            raise TopologyError(
                details=f"{owner} has unknown shape '{shape}'; expected '{RECTANGULAR_SHAPE}' or '{CIRCULAR_SHAPE}'.",
                entity=name,
            )

        width = read_quantity(attributes, "width", "meter", owner)
        height = read_quantity(attributes, "height", "meter", owner)
        if width is None and height is None:
            return None
        width = require_positive_quantity(attributes, "width", "meter", owner)
        height = require_positive_quantity(attributes, "height", "meter", owner)
        viscosity = require_positive_quantity(attributes, "viscosity", VISCOSITY_UNIT, owner)
        w, h = max(width, height), min(width, height)
        coefficient = (RECTANGULAR_RESISTANCE_COEFFICIENT * viscosity) / (
            w * h ** 3 * (1.0 - RECTANGULAR_ASPECT_CORRECTION * h / w)
        )
        return qfnra.assert_equal(resistance, qfnra.multiply(coefficient, length))


class ChannelPressureDropStrategy(TranslationStrategy):
    """P(from port) - P(to port) = Q R for every channel."""

    def translation_step(self, schematic, process_params, type_table):
        return [
            qfnra.assert_equal(
                qfnra.subtract(
                    names.port_pressure(schematic, channel.from_port),
                    names.port_pressure(schematic, channel.to_port),
                ),
                qfnra.multiply(
                    names.channel_flow_rate(schematic, channel),
                    names.channel_resistance(schematic, channel),
                ),
            )
            for _, channel in _channels(schematic, type_table)
        ]


class FlowConservationStrategy(TranslationStrategy):
    """
    Kirchhoff's current law for fluids: the net inflow at every node that is not
    a control point is zero. Control points are sources and sinks.
    """

    def translation_step(self, schematic, process_params, type_table):
        exprs: List[SExpression] = []
        for node_name, node in schematic.nodes.items():
            if type_table.is_control_point(node):
                logger.debug(f"Node '{node_name}' is a {_source_kind(type_table, node)} source; no conservation rule.")
                continue
            inflows = [
                signed_inflow(schematic, port, channel)
                for port in node.ports.values()
                for _, channel in self.connections_at_port(schematic, port)
                if type_table.is_channel(channel)
            ]
            if inflows:
                exprs.append(qfnra.assert_equal(sum_of(inflows), 0.0))
        return exprs


class PressureControlPointStrategy(TranslationStrategy):
    """Pressure control points with a `pressure` attribute (pascal) fix their node pressure."""

    def translation_step(self, schematic, process_params, type_table):
        exprs: List[SExpression] = []
        for node_name, node in schematic.nodes.items():
            if not type_table.is_pressure_control_point(node):
                continue
            pressure = read_quantity(node.attributes, "pressure", "pascal", f"node '{node_name}'")
            if pressure is not None:
                exprs.append(qfnra.assert_equal(names.node_pressure(schematic, node), pressure))
        return exprs


class PressureFlowStrategySet(TranslationStrategySet):
    """The full single-phase hydraulic model."""

    @classmethod
    def default_strategies(cls):
        return (
            PressureFlowDeclarationStrategy(),
            PortPressureStrategy(),
            ChannelResistanceStrategy(),
            ChannelPressureDropStrategy(),
            FlowConservationStrategy(),
            PressureControlPointStrategy(),
        )
