# tests/test_symbol_names.py
import pytest

from mfsmt_core.schematic import Port, Schematic
from mfsmt_core.smt2 import SymbolNamingError, names
from mfsmt_core.schematic.exceptions import TopologyError

from conftest import build_droplet_schematic, build_two_node_schematic


def test_node_and_port_symbols():
    schematic = build_two_node_schematic()
    in0 = schematic.get_node("in0")
    assert names.node_x(schematic, in0).name == "in0_pos_x"
    assert names.node_y(schematic, in0).name == "in0_pos_y"
    assert names.node_pressure(schematic, in0).name == "in0_pressure"
    assert names.port_pressure(schematic, in0.ports["out"]).name == "in0_out_pressure"


def test_channel_symbols():
    schematic = build_two_node_schematic()
    ch0 = schematic.connections["ch0"]
    assert names.channel_length(schematic, ch0).name == "ch0_pos_x"
    assert names.channel_flow_rate(schematic, ch0).name == "ch0_flowrate"
    assert names.channel_resistance(schematic, ch0).name == "ch0_resistance"


def test_constant_and_junction_symbols():
    schematic = build_droplet_schematic()
    assert names.constant_pi().name == "constant_pi"
    assert names.junction_droplet_length(schematic, schematic.get_node("j0")).name == "j0_droplet_length"


def test_names_are_deterministic():
    schematic = build_droplet_schematic()
    j0 = schematic.get_node("j0")
    assert names.node_x(schematic, j0) == names.node_x(schematic, j0)
    # An independently built but identical schematic yields the same names.
    other = build_droplet_schematic()
    assert names.node_x(other, other.get_node("j0")) == names.node_x(schematic, j0)


def test_port_name_is_reverse_lookup_over_parent_ports():
    schematic = build_droplet_schematic()
    j0 = schematic.get_node("j0")
    assert names.port_name(schematic, j0.ports["dispersed"]) == "dispersed"


def test_unregistered_port_is_a_naming_error():
    schematic = Schematic(name="orphan")
    n1 = schematic.add_node("n1", "channelCrossing", port_names=["a"])
    stray = Port(parent=n1)
    with pytest.raises(SymbolNamingError) as excinfo:
        names.port_pressure(schematic, stray)
    assert str(excinfo.value) == "Could not map port to name for node 'n1'."
    assert isinstance(excinfo.value, TopologyError)
    assert "Symbol Naming Error" in excinfo.value.get_diagnostic_report()


def test_entity_outside_the_schematic_is_a_topology_error():
    schematic = build_two_node_schematic()
    stranger = build_two_node_schematic().get_node("in0")
    with pytest.raises(TopologyError):
        names.node_x(schematic, stranger)


def test_namespace_of_a_well_named_schematic_is_distinct():
    schematic = build_droplet_schematic()
    owners = names.check_namespace(schematic)
    # pi + 4 nodes * (x, y, pressure, droplet length) + 6 ports + 3 channels * 3 quantities
    assert len(owners) == 1 + 4 * 4 + 6 + 3 * 3
    assert owners["j0_output_pressure"] == "pressure of port 'j0.output'"


def test_namespace_rejects_node_port_suffix_collision():
    schematic = Schematic(name="clash")
    schematic.add_node("a", "channelCrossing", port_names=["b"])
    schematic.add_node("a_b", "channelCrossing")
    with pytest.raises(SymbolNamingError) as excinfo:
        names.check_namespace(schematic)
    assert "a_b_pressure" in excinfo.value.details


def test_namespace_rejects_node_and_connection_sharing_a_name():
    schematic = Schematic(name="clash")
    x = schematic.add_node("x", "channelCrossing", port_names=["p"])
    y = schematic.add_node("y", "channelCrossing", port_names=["p"])
    schematic.add_connection("x", x.ports["p"], y.ports["p"])
    with pytest.raises(SymbolNamingError) as excinfo:
        names.check_namespace(schematic)
    assert "x_pos_x" in excinfo.value.details
