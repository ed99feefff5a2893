# tests/conftest.py
import pytest

from mfsmt_core.parameters import ProcessParameters
from mfsmt_core.schematic import Schematic
from mfsmt_core.type_table import construct_type_table

RECTANGULAR_CHANNEL = {"width": 1.0e-4, "height": 5.0e-5, "viscosity": 1.0e-3}


@pytest.fixture
def process_params() -> ProcessParameters:
    """The reference process: 0.1 mm spacing and length, 40 mm x 40 mm chip, 5 degree crossing angle."""
    return ProcessParameters(
        minimum_node_distance=0.0001,
        minimum_channel_length=0.0001,
        maximum_chip_size_x=0.04,
        maximum_chip_size_y=0.04,
        critical_crossing_angle=0.0872664626,
    )


def build_single_node_schematic() -> Schematic:
    schematic = Schematic(name="single_node")
    schematic.add_node("n0", "channelCrossing", port_names=["a"])
    return schematic


def build_two_node_schematic(channel_attributes=None) -> Schematic:
    """in0 (fluidEntry) --ch0--> out0 (fluidExit)."""
    schematic = Schematic(name="two_node")
    in0 = schematic.add_node("in0", "fluidEntry", port_names=["out"], attributes={"pressure": 2000.0})
    out0 = schematic.add_node("out0", "fluidExit", port_names=["in"], attributes={"pressure": 0.0})
    schematic.add_connection(
        "ch0", in0.ports["out"], out0.ports["in"],
        attributes=dict(RECTANGULAR_CHANNEL if channel_attributes is None else channel_attributes),
    )
    return schematic


def build_droplet_schematic() -> Schematic:
    """
    Two fluid entries feed a T-junction whose output drains to a fluid exit:

        in0.out --ch_c--> j0.continuous
        in1.out --ch_d--> j0.dispersed
        j0.output --ch_o--> out0.in
    """
    schematic = Schematic(name="droplet_chip")
    in0 = schematic.add_node("in0", "fluidEntry", port_names=["out"], attributes={"pressure": 3000.0})
    in1 = schematic.add_node("in1", "fluidEntry", port_names=["out"], attributes={"pressure": 2500.0})
    j0 = schematic.add_node("j0", "tJunction", port_names=["continuous", "dispersed", "output"], attributes={"alpha": 1.5})
    out0 = schematic.add_node("out0", "fluidExit", port_names=["in"], attributes={"pressure": 0.0})
    schematic.add_connection("ch_c", in0.ports["out"], j0.ports["continuous"], attributes=dict(RECTANGULAR_CHANNEL))
    schematic.add_connection("ch_d", in1.ports["out"], j0.ports["dispersed"], attributes=dict(RECTANGULAR_CHANNEL))
    schematic.add_connection("ch_o", j0.ports["output"], out0.ports["in"], attributes=dict(RECTANGULAR_CHANNEL))
    return schematic


@pytest.fixture
def single_node_schematic() -> Schematic:
    return build_single_node_schematic()


@pytest.fixture
def two_node_schematic() -> Schematic:
    return build_two_node_schematic()


@pytest.fixture
def droplet_schematic() -> Schematic:
    return build_droplet_schematic()


@pytest.fixture
def type_table_for():
    """Returns a function that builds the type table for a given schematic."""
    return construct_type_table


def smt2_lines(exprs):
    return [expr.to_smt2() for expr in exprs]
