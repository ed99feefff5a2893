# tests/test_cli.py
import sys
from pathlib import Path

import pytest

from mfsmt_core.cli import main
from mfsmt_core.log_config import setup_logging

SCHEMATIC_YAML = """
name: straight_chip
nodes:
  - {id: in0, type: fluidEntry, ports: [out], attributes: {pressure: 2000}}
  - {id: out0, type: fluidExit, ports: [in], attributes: {pressure: 0}}
connections:
  - {id: ch0, from: in0.out, to: out0.in,
     attributes: {width: 1.0e-4, height: 5.0e-5, viscosity: 1.0e-3}}
"""

PROCESS_FLAGS = [
    "--process-minimum-node-distance", "0.0001",
    "--process-minimum-channel-length", "0.1 mm",
    "--process-maximum-chip-size-x", "40 mm",
    "--process-maximum-chip-size-y", "0.04",
    "--process-critical-crossing-angle", "5 degree",
]


@pytest.fixture(autouse=True)
def restore_logging():
    yield
    setup_logging(stream=sys.__stdout__)


@pytest.fixture
def schematic_file(tmp_path) -> Path:
    path = tmp_path / "straight_chip.yaml"
    path.write_text(SCHEMATIC_YAML)
    return path


def test_compile_with_flags(schematic_file, tmp_path, capsys):
    out_dir = tmp_path / "out"
    out_dir.mkdir()
    exit_code = main([str(schematic_file), "-o", str(out_dir), *PROCESS_FLAGS])

    assert exit_code == 0
    program = (out_dir / "straight_chip.smt2").read_text().splitlines()
    assert program[0] == "(set-logic QF_NRA)"
    assert "(assert (>= ch0_pos_x 0.0001))" in program
    assert "Wrote" in capsys.readouterr().out


def test_compile_with_process_file(schematic_file, tmp_path):
    process_file = tmp_path / "process.yaml"
    process_file.write_text(
        "minimumNodeDistance: 0.0001\nminimumChannelLength: 0.0001\n"
        "maximumChipSizeX: 0.04\nmaximumChipSizeY: 0.04\ncriticalCrossingAngle: 0.0872664626\n"
    )
    exit_code = main([str(schematic_file), "-o", str(tmp_path), "--process-file", str(process_file)])
    assert exit_code == 0
    assert (tmp_path / "straight_chip.smt2").is_file()


def test_mixing_process_file_and_flags_is_a_usage_error(schematic_file, tmp_path, capsys):
    process_file = tmp_path / "process.yaml"
    process_file.write_text("minimumNodeDistance: 0.0001\n")
    with pytest.raises(SystemExit) as excinfo:
        main([str(schematic_file), "--process-file", str(process_file), "--process-maximum-chip-size-x", "0.04"])
    assert excinfo.value.code == 2
    assert "--process-maximum-chip-size-x" in capsys.readouterr().err


def test_missing_crossing_angle_flag_fails_before_translation(schematic_file, tmp_path, capsys):
    exit_code = main([str(schematic_file), "-o", str(tmp_path), *PROCESS_FLAGS[:-2]])
    assert exit_code == 1
    err = capsys.readouterr().err
    assert "Process Parameter Configuration Error" in err
    assert "critical_crossing_angle" in err
    assert not (tmp_path / "straight_chip.smt2").exists()


def test_missing_crossing_angle_in_file_fails(schematic_file, tmp_path, capsys):
    process_file = tmp_path / "process.yaml"
    process_file.write_text(
        "minimumNodeDistance: 0.0001\nminimumChannelLength: 0.0001\n"
        "maximumChipSizeX: 0.04\nmaximumChipSizeY: 0.04\n"
    )
    exit_code = main([str(schematic_file), "-o", str(tmp_path), "--process-file", str(process_file)])
    assert exit_code == 1
    assert "criticalCrossingAngle" in capsys.readouterr().err


def test_invalid_schematic_reports_and_fails(tmp_path, capsys):
    bad = tmp_path / "bad.yaml"
    bad.write_text("nodes:\n  - {id: n-0, type: channelCrossing}\n")
    exit_code = main([str(bad), "-o", str(tmp_path), *PROCESS_FLAGS])
    assert exit_code == 1
    err = capsys.readouterr().err
    assert "Actionable Diagnostic Report" in err
    assert "Schematic Schema Validation Error" in err


def test_translation_failure_reports_and_fails(tmp_path, capsys):
    broken = tmp_path / "broken.yaml"
    broken.write_text(
        "name: broken\n"
        "types:\n  nodes:\n    voltageControlPoint: {}\n"
        "nodes:\n  - {id: n0, type: channelCrossing}\n"
    )
    exit_code = main([str(broken), "-o", str(tmp_path), *PROCESS_FLAGS])
    assert exit_code == 1
    assert "voltageControlPoint must be a subtype of controlPoint" in capsys.readouterr().err
    assert not (tmp_path / "broken.smt2").exists()


def test_unknown_log_level_is_a_usage_error(schematic_file):
    with pytest.raises(SystemExit) as excinfo:
        main([str(schematic_file), "--log-level", "chatty", *PROCESS_FLAGS])
    assert excinfo.value.code == 2


def test_schematic_that_is_not_utf8_reports_and_fails(tmp_path, capsys):
    binary = tmp_path / "binary.yaml"
    binary.write_bytes(b"name: chip\n\xff\xfe\x00nodes: []\n")
    exit_code = main([str(binary), "-o", str(tmp_path), *PROCESS_FLAGS])
    assert exit_code == 1
    err = capsys.readouterr().err
    assert "Schematic Parsing or File Error" in err
    assert "not valid UTF-8" in err


def test_process_file_that_is_not_utf8_reports_and_fails(schematic_file, tmp_path, capsys):
    process_file = tmp_path / "process.yaml"
    process_file.write_bytes(b"minimumNodeDistance: \xff0.0001\n")
    exit_code = main([str(schematic_file), "-o", str(tmp_path), "--process-file", str(process_file)])
    assert exit_code == 1
    err = capsys.readouterr().err
    assert "Process Parameter Configuration Error" in err
    assert "not valid UTF-8" in err
    assert not (tmp_path / "straight_chip.smt2").exists()
