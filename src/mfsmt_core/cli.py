# src/mfsmt_core/cli.py
"""
Compile a microfluidic schematic into a QF_NRA SMT-LIB 2 program.

Process parameters come either from a file (--process-file) or from one flag
per constant. The two sources cannot be mixed.
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .backend import MicrofluidicsBackend
from .errors import DiagnosableError, MfsmtError, SchematicLoadError
from .log_config import setup_logging
from .parameters import PARAMETER_FIELDS, ProcessParameters
from .schematic import SchematicParser

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="mfsmt-compile", description=__doc__)
    parser.add_argument("schematic", type=Path, help="Path to the schematic file (YAML or JSON).")
    parser.add_argument(
        "-o", "--output-dir", type=Path, default=Path("."),
        help="Directory that receives <schematic-name>.smt2 (default: current directory).",
    )
    parser.add_argument(
        "--log-level", default="INFO", choices=LOG_LEVELS, type=str.upper,
        help="Logging verbosity (default: INFO).",
    )
    process = parser.add_argument_group(
        "process parameters",
        "Either --process-file or all five per-constant flags. Values are SI numbers or unit strings.",
    )
    process.add_argument("--process-file", type=Path, default=None, help="Load process parameters from this YAML/JSON file.")
    for param_field in PARAMETER_FIELDS:
        process.add_argument(
            f"--{param_field.flag}", dest=param_field.attribute, default=None, metavar="VALUE",
            help=f"{param_field.description.capitalize()} ({param_field.unit}).",
        )
    return parser


def load_process_parameters(args: argparse.Namespace) -> ProcessParameters:
    if args.process_file is not None:
        return ProcessParameters.from_file(args.process_file)
    logger.debug("No process file specified, reading process parameters from the command line.")
    return ProcessParameters.from_mapping(
        {f.attribute: getattr(args, f.attribute) for f in PARAMETER_FIELDS},
        source="command line",
    )


def load_schematic(path: Path):
    """Parses the schematic file, wrapping loader failures in a SchematicLoadError."""
    try:
        return SchematicParser().parse(path)
    except DiagnosableError as e:
        logger.error(f"Schematic '{path}' could not be loaded: {e}")
        raise SchematicLoadError(e.get_diagnostic_report()) from e


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_argument_parser()
    args = parser.parse_args(argv)

    given_flags = [f"--{f.flag}" for f in PARAMETER_FIELDS if getattr(args, f.attribute) is not None]
    if args.process_file is not None and given_flags:
        parser.error(f"--process-file cannot be combined with {', '.join(given_flags)}.")

    setup_logging(args.log_level)
    try:
        process_parameters = load_process_parameters(args)
        schematic = load_schematic(args.schematic)
        output_path = MicrofluidicsBackend(process_parameters).run(schematic, args.output_dir)
    except DiagnosableError as e:
        logger.error(f"Process parameters could not be loaded: {e}")
        print(e.get_diagnostic_report(), file=sys.stderr)
        return EXIT_FAILURE
    except MfsmtError as e:
        print(str(e), file=sys.stderr)
        return EXIT_FAILURE

    print(f"Wrote {output_path}")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
