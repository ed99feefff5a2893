# src/mfsmt_core/strategies/multiphase.py
"""
Multi-phase (droplet) flow rules.

A T-junction pinches the dispersed phase off into droplets carried by the
continuous phase. In the squeezing regime the droplet length follows the
scaling law

    L_drop = w_out * (1 + alpha * Q_dispersed / Q_continuous)

which is asserted here multiplied through by Q_continuous, so the program
stays polynomial.
"""
import logging
from typing import List

from ..constants import DEFAULT_DROPLET_ALPHA
from ..schematic.data_structures import Connection, Node, Schematic
from ..schematic.exceptions import TopologyError
from ..smt2 import names, qfnra
from ..smt2.expressions import SExpression
from ..type_table import CHANNEL_DROPLET_VOLUME_CONSTRAINT_TYPE, T_JUNCTION_NODE_TYPE
from .base import TranslationStrategy, TranslationStrategySet, read_quantity, require_positive_quantity, signed_inflow

logger = logging.getLogger(__name__)

CONTINUOUS_PORT = "continuous"
DISPERSED_PORT = "dispersed"
OUTPUT_PORT = "output"


def junction_channel(schematic: Schematic, junction: Node, port_label: str) -> Connection:
    """The single channel attached to a junction port."""
    node_name = schematic.get_node_name(junction)
    port = schematic.get_port(node_name, port_label)
    attached = TranslationStrategy.connections_at_port(schematic, port)
    if len(attached) != 1:
        raise TopologyError(
            details=(
                f"Port '{port_label}' of T-junction '{node_name}' must carry exactly one channel, "
                f"found {len(attached)}: {[name for name, _ in attached]}."
            ),
            entity=f"{node_name}.{port_label}",
        )
    return attached[0][1]


class TJunctionDropletStrategy(TranslationStrategy):
    """
    For every T-junction: both phases flow in, the mixture flows out, and the
    droplet length obeys the squeezing-regime scaling law.

    Node attributes: `alpha` (dimensionless, optional). Output channel
    attributes: `width` (required).
    """

    def translation_step(self, schematic, process_params, type_table):
        exprs: List[SExpression] = []
        for node_name, node in schematic.nodes.items():
            if not type_table.node_is_a(node, T_JUNCTION_NODE_TYPE):
                continue
            exprs.extend(self._junction_rules(schematic, node_name, node))
        return exprs

    @staticmethod
    def _junction_rules(schematic: Schematic, node_name: str, node: Node) -> List[SExpression]:
        owner = f"T-junction '{node_name}'"
        continuous = junction_channel(schematic, node, CONTINUOUS_PORT)
        dispersed = junction_channel(schematic, node, DISPERSED_PORT)
        output = junction_channel(schematic, node, OUTPUT_PORT)

        q_continuous = signed_inflow(schematic, node.ports[CONTINUOUS_PORT], continuous)
        q_dispersed = signed_inflow(schematic, node.ports[DISPERSED_PORT], dispersed)
        q_output = signed_inflow(schematic, node.ports[OUTPUT_PORT], output)

        alpha = read_quantity(node.attributes, "alpha", "dimensionless", owner)
        if alpha is None:
            alpha = DEFAULT_DROPLET_ALPHA
        output_width = require_positive_quantity(
            output.attributes, "width", "meter",
            f"output channel '{schematic.get_connection_name(output)}' of {owner}",
        )

        droplet_length = names.junction_droplet_length(schematic, node)
        exprs: List[SExpression] = [
            qfnra.declare_real_variable(droplet_length),
        ]
        for channel in (continuous, dispersed, output):
            exprs.append(qfnra.declare_real_variable(names.channel_flow_rate(schematic, channel)))
        exprs.extend([
            qfnra.assert_greater(q_continuous, 0.0),
            qfnra.assert_greater(q_dispersed, 0.0),
            qfnra.assert_less_than(q_output, 0.0),
            qfnra.assert_equal(
                qfnra.multiply(droplet_length, q_continuous),
                qfnra.multiply(output_width, qfnra.add(q_continuous, qfnra.multiply(alpha, q_dispersed))),
            ),
        ])
        logger.debug(f"{owner}: alpha={alpha}, output width={output_width}.")
        return exprs


class DropletVolumeStrategy(TranslationStrategy):
    """
    Fixes the droplet volume produced by a junction. Each channelDropletVolume
    constraint names a `junction` and a `volume` (cubic metres); the droplet
    fills the output channel's cross-section over its length.
    """

    def translation_step(self, schematic, process_params, type_table):
        exprs: List[SExpression] = []
        for constraint_name, constraint in schematic.constraints.items():
            if not type_table.constraint_is_a(constraint, CHANNEL_DROPLET_VOLUME_CONSTRAINT_TYPE):
                continue
            owner = f"constraint '{constraint_name}'"
            junction_name = constraint.attributes.get("junction")
            if junction_name is None:
                raise TopologyError(details=f"{owner} does not name a 'junction'.", entity=constraint_name)
            junction = schematic.get_node(str(junction_name))
            if not type_table.node_is_a(junction, T_JUNCTION_NODE_TYPE):
                raise TopologyError(
                    details=f"{owner} references node '{junction_name}', which is not a {T_JUNCTION_NODE_TYPE}.",
                    entity=constraint_name,
                )
            volume = require_positive_quantity(constraint.attributes, "volume", "meter ** 3", owner)

            output = junction_channel(schematic, junction, OUTPUT_PORT)
            channel_owner = f"output channel '{schematic.get_connection_name(output)}'"
            width = require_positive_quantity(output.attributes, "width", "meter", channel_owner)
            height = require_positive_quantity(output.attributes, "height", "meter", channel_owner)

            droplet_length = names.junction_droplet_length(schematic, junction)
            exprs.append(qfnra.declare_real_variable(droplet_length))
            exprs.append(qfnra.assert_equal(qfnra.multiply(droplet_length, width, height), volume))
        return exprs


class MultiPhaseStrategySet(TranslationStrategySet):
    """Droplet generation followed by droplet volume targets."""

    @classmethod
    def default_strategies(cls):
        return (
            TJunctionDropletStrategy(),
            DropletVolumeStrategy(),
        )
