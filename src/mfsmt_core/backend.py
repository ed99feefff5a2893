# src/mfsmt_core/backend.py

"""
Defines the MicrofluidicsBackend, the pipeline orchestrator that turns one
schematic into one solver program.

Pipeline:

1.  **Type table.** `construct_type_table` resolves the schematic's declared
    type hierarchies. Any violation stops the run before a single expression
    exists.
2.  **Namespace check.** `names.check_namespace` rejects schematics whose entity
    names would make two different quantities share a solver symbol.
3.  **Seeding.** The program opens with `(set-logic QF_NRA)`; the pi constant is
    declared and asserted equal to its numeric value.
4.  **Strategy sets.** Placement, multi-phase and pressure-flow sets run in that
    fixed order into one unsorted list.
5.  **Ordering.** `sort_exprs` partitions the list stably into declarations,
    assertions and everything else, so every symbol is declared before use.
6.  **Directives and output.** `(check-sat)` and `(exit)` close the program,
    which is written one form per line to `<schematic-name>.smt2`.

Like the rest of the package's entry points, `run` is the single error-handling
facade: any `DiagnosableError` raised below it is logged and re-raised as one
user-facing `CodeGenerationError` carrying the diagnostic report.
"""

import logging
import os
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

from .constants import PI_VALUE
from .errors import CodeGenerationError, DiagnosableError, format_diagnostic_report
from .parameters import ProcessParameters
from .schematic.data_structures import Schematic
from .smt2 import names, qfnra
from .smt2.expressions import ParenList, SExpression
from .strategies import (
    MultiPhaseStrategySet,
    PlacementTranslationStrategySet,
    PressureFlowStrategySet,
    TranslationStrategy,
)
from .type_table import construct_type_table

logger = logging.getLogger(__name__)

OUTPUT_SUFFIX = ".smt2"
PARTIAL_SUFFIX = ".smt2.partial"


def _form_keyword(expr: SExpression) -> Optional[str]:
    if isinstance(expr, ParenList) and expr.is_form(qfnra.DECLARE_FUN):
        return qfnra.DECLARE_FUN
    if isinstance(expr, ParenList) and expr.is_form(qfnra.ASSERT):
        return qfnra.ASSERT
    return None


class MicrofluidicsBackend:
    """
    Translates schematics into QF_NRA solver programs under one set of process
    parameters. Strategy sets are created fresh for every translation.
    """
    backend_name = "microfluidics"

    def __init__(self, process_parameters: ProcessParameters):
        if not isinstance(process_parameters, ProcessParameters):
            raise TypeError(
                f"MicrofluidicsBackend requires ProcessParameters, got {type(process_parameters).__name__}."
            )
        self.process_parameters = process_parameters

    @staticmethod
    def strategy_sets() -> List[TranslationStrategy]:
        """Fresh instances of the three strategy sets, in execution order."""
        return [
            PlacementTranslationStrategySet(),
            MultiPhaseStrategySet(),
            PressureFlowStrategySet(),
        ]

    @staticmethod
    def sort_exprs(unsorted: Iterable[SExpression]) -> List[SExpression]:
        """
        Stable partition into declarations ++ assertions ++ others.

        Relative order inside each partition is preserved. A declaration that is
        structurally identical to an earlier one is dropped, since several
        strategies may declare the same shared symbol.
        """
        declarations: List[SExpression] = []
        assertions: List[SExpression] = []
        others: List[SExpression] = []
        seen_declarations = set()
        for expr in unsorted:
            keyword = _form_keyword(expr)
            if keyword == qfnra.DECLARE_FUN:
                if expr in seen_declarations:
                    continue
                seen_declarations.add(expr)
                declarations.append(expr)
            elif keyword == qfnra.ASSERT:
                assertions.append(expr)
            else:
                others.append(expr)
        return declarations + assertions + others

    def translate(self, schematic: Schematic) -> List[SExpression]:
        """
        Produces the complete, ordered solver program for `schematic`.

        Raises the underlying `DiagnosableError` on failure; `run` is the
        user-facing wrapper.
        """
        type_table = construct_type_table(schematic)
        namespace = names.check_namespace(schematic)
        logger.debug(f"Symbol namespace checked: {len(namespace)} reserved name(s).")

        program: List[SExpression] = [qfnra.use_qfnra()]
        pi = names.constant_pi()
        unsorted: List[SExpression] = [
            qfnra.declare_real_variable(pi),
            qfnra.assert_equal(pi, PI_VALUE),
        ]
        for strategy_set in self.strategy_sets():
            exprs = strategy_set.translate(schematic, self.process_parameters, type_table)
            logger.info(f"{strategy_set.name} contributed {len(exprs)} expression(s).")
            unsorted.extend(exprs)

        program.extend(self.sort_exprs(unsorted))
        program.append(qfnra.check_sat())
        program.append(qfnra.exit_solver())
        return program

    @staticmethod
    def write_program(program: Sequence[SExpression], output_path: Path) -> Path:
        """
        Serializes `program` one form per line. The text goes to a sibling
        partial file first and replaces `output_path` only once complete.
        """
        partial_path = output_path.with_name(output_path.stem + PARTIAL_SUFFIX)
        try:
            with partial_path.open("w", encoding="utf-8", newline="\n") as stream:
                for expr in program:
                    expr.write(stream)
                    stream.write("\n")
            os.replace(partial_path, output_path)
        except BaseException:
            partial_path.unlink(missing_ok=True)
            raise
        return output_path

    def run(self, schematic: Schematic, output_dir: Union[str, Path] = ".") -> Path:
        """
        The main entry point: translates `schematic` and writes
        `<output_dir>/<schematic-name>.smt2`. Returns the written path.

        Raises:
            CodeGenerationError: for any failure, with the originating error chained.
        """
        logger.info(f"--- Starting code generation for schematic '{schematic.name}' ---")
        logger.debug(f"Process parameters: {self.process_parameters.as_dict()}")
        try:
            program = self.translate(schematic)
            output_path = Path(output_dir) / f"{schematic.name}{OUTPUT_SUFFIX}"
            self.write_program(program, output_path)
            logger.info(f"--- Wrote {len(program)} form(s) to '{output_path}'. ---")
            return output_path

        except DiagnosableError as e:
            logger.error(f"Code generation for '{schematic.name}' failed: {e}")
            logger.error("Stopping code generation due to error.")
            raise CodeGenerationError(e.get_diagnostic_report()) from e

        except Exception as e:
            logger.error(f"Unexpected error while generating code for '{schematic.name}'.", exc_info=True)
            if isinstance(e, OSError):
                error_type = "Output File Error"
                details = f"The solver program could not be written: {e}"
                suggestion = "Check that the output directory exists and is writable."
            else:
                error_type = f"An Unexpected Error Occurred ({type(e).__name__})"
                details = f"The backend encountered an unexpected internal error: {e}"
                suggestion = "This may indicate a bug in mfsmt-core. Please review the traceback."
            report = format_diagnostic_report(
                error_type=error_type,
                details=details,
                suggestion=suggestion,
                context={'schematic': schematic.name},
            )
            raise CodeGenerationError(report) from e
