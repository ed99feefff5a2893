# tests/test_type_table.py
import networkx as nx
import pytest

from mfsmt_core.schematic import Schematic, TypeDeclaration
from mfsmt_core.type_table import (
    TypeHierarchyError,
    build_subtype_graph,
    construct_type_table,
    derived_types,
    is_subtype_of,
)

from conftest import build_droplet_schematic


def test_standard_library_resolves():
    schematic = build_droplet_schematic()
    table = construct_type_table(schematic)

    assert table.control_point_node_type.name == "controlPoint"
    assert table.pressure_control_point_node_type.supertype == "controlPoint"
    assert table.derived_pressure_control_point_node_types == frozenset({"fluidEntry", "fluidExit"})
    assert table.derived_voltage_control_point_node_types == frozenset({"electrode"})
    assert table.channel_connection_type.name == "channel"
    assert set(table.constraint_types) == {"controlPointPlacement", "channelDropletVolume"}


def test_node_queries_follow_the_hierarchy():
    schematic = build_droplet_schematic()
    table = construct_type_table(schematic)
    in0, j0 = schematic.get_node("in0"), schematic.get_node("j0")

    assert table.is_pressure_control_point(in0)
    assert table.is_control_point(in0)
    assert not table.is_voltage_control_point(in0)
    assert not table.is_control_point(j0)
    assert table.node_is_a(j0, "channelCrossing")
    assert table.is_channel(schematic.connections["ch_o"])


def test_transitively_derived_user_types_are_indexed():
    schematic = build_droplet_schematic()
    schematic.declare_node_type("syringePump", "fluidEntry")
    schematic.declare_node_type("calibratedSyringePump", "syringePump")
    pump = schematic.add_node("pump0", "calibratedSyringePump", port_names=["out"])
    table = construct_type_table(schematic)

    assert "calibratedSyringePump" in table.derived_pressure_control_point_node_types
    assert table.is_pressure_control_point(pump)
    assert table.is_control_point(pump)


def test_connection_subtypes_count_as_channels():
    schematic = build_droplet_schematic()
    schematic.connection_types["serpentine"] = TypeDeclaration("serpentine", "channel")
    schematic.connections["ch_c"].type_name = "serpentine"
    table = construct_type_table(schematic)
    assert table.is_channel(schematic.connections["ch_c"])


def test_voltage_control_point_outside_hierarchy_is_rejected():
    schematic = build_droplet_schematic()
    schematic.declare_node_type("voltageControlPoint", None)
    with pytest.raises(TypeHierarchyError) as excinfo:
        construct_type_table(schematic)
    assert "voltageControlPoint must be a subtype of controlPoint" in str(excinfo.value)
    assert str(excinfo.value).startswith("schematic type incompatibility:")
    assert excinfo.value.schematic_name == "droplet_chip"


def test_pressure_control_point_outside_hierarchy_is_rejected():
    schematic = Schematic(name="broken")
    schematic.declare_node_type("pressureControlPoint", "channelCrossing")
    with pytest.raises(TypeHierarchyError, match="pressureControlPoint must be a subtype of controlPoint"):
        construct_type_table(schematic)


def test_unknown_supertype_is_rejected():
    schematic = Schematic(name="broken")
    schematic.declare_node_type("mixer", "doesNotExist")
    with pytest.raises(TypeHierarchyError, match="unknown supertype 'doesNotExist'"):
        construct_type_table(schematic)


def test_cyclic_hierarchy_is_rejected():
    schematic = Schematic(name="broken")
    schematic.declare_node_type("a", "b")
    schematic.declare_node_type("b", "a")
    with pytest.raises(TypeHierarchyError, match="cycle"):
        construct_type_table(schematic)


def test_missing_required_constraint_type_is_rejected():
    schematic = Schematic(name="broken")
    del schematic.constraint_types["channelDropletVolume"]
    with pytest.raises(TypeHierarchyError) as excinfo:
        construct_type_table(schematic)
    assert excinfo.value.type_name == "channelDropletVolume"
    report = excinfo.value.get_diagnostic_report()
    assert "Schematic Type Hierarchy Error" in report
    assert "Schematic:      broken" in report


def test_subtype_graph_helpers():
    declarations = {
        "base": TypeDeclaration("base"),
        "mid": TypeDeclaration("mid", "base"),
        "leaf": TypeDeclaration("leaf", "mid"),
        "other": TypeDeclaration("other"),
    }
    graph = build_subtype_graph(declarations)
    assert isinstance(graph, nx.DiGraph)
    assert is_subtype_of(graph, "leaf", "base")
    assert is_subtype_of(graph, "base", "base")
    assert not is_subtype_of(graph, "base", "leaf")
    assert not is_subtype_of(graph, "other", "base")
    assert not is_subtype_of(graph, "unknown", "base")
    assert derived_types(graph, "base") == frozenset({"mid", "leaf"})
    assert derived_types(graph, "unknown") == frozenset()
