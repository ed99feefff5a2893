# src/mfsmt_core/errors.py
import logging
from typing import Any, Dict, Protocol, abstractmethod
from typing import runtime_checkable

logger = logging.getLogger(__name__)

# --- User-Facing Exception Hierarchy ---

class MfsmtError(Exception):
    """Base class for all custom, user-facing errors in mfsmt-core."""
    pass

class CodeGenerationError(MfsmtError):
    """
    Raised when a translation run fails for any reason, from type-table construction
    to the final write of the SMT2 program. The message is a pre-formatted,
    user-friendly diagnostic report; the originating error is chained as __cause__.
    """
    pass

class SchematicLoadError(MfsmtError):
    """
    Raised when a schematic file cannot be turned into an in-memory Schematic.
    The message is a pre-formatted, user-friendly diagnostic report.
    """
    pass


# --- Diagnostic Protocol & Base Exception ---

@runtime_checkable
class Diagnosable(Protocol):
    """
    A protocol for exceptions that can generate their own rich diagnostic report.
    """
    def get_diagnostic_report(self) -> str:
        """Generates a complete, user-friendly, multi-line report string."""
        ...

class DiagnosableError(Exception, Diagnosable):
    """
    The concrete base class for every internal, reportable error.

    It is a real `Exception`, so it can be used in `except` clauses, and it
    declares `get_diagnostic_report` abstract, so every subclass must describe
    itself to the user. The orchestrator catches this single type and turns it
    into a `CodeGenerationError`.
    """
    @abstractmethod
    def get_diagnostic_report(self) -> str:
        """
        Abstract method to generate the diagnostic report.
        Subclasses MUST implement this.
        """
        raise NotImplementedError


# --- Stateless Formatting Utility ---

def format_diagnostic_report(
    error_type: str,
    details: str,
    suggestion: str,
    context: Dict[str, Any]
) -> str:
    """
    A stateless helper to format the final multi-line report string, ensuring a
    consistent look and feel for all user-facing diagnostics.

    Args:
        error_type: The high-level category of the error (e.g., "Type Hierarchy Error").
        details: A detailed, potentially multi-line description of the problem.
        suggestion: Actionable advice for the user to resolve the issue.
        context: A dictionary of contextual information (schematic, entity, source file, user input).

    Returns:
        A formatted, user-friendly diagnostic report string ready for display.
    """
    lines = [
        "\n",
        "=============== mfsmt-core: Actionable Diagnostic Report ===============",
        f"Error Type:     {error_type}",
    ]
    if schematic := context.get('schematic'):
        lines.append(f"Schematic:      {schematic}")
    if entity := context.get('entity'):
        lines.append(f"Entity:         {entity}")
    if source_file := context.get('source_file'):
        lines.append(f"Source File:    {source_file}")
    if user_input := context.get('user_input'):
        lines.append(f"User Input:     '{user_input}'")

    lines.append("\nDetails:")
    for line in details.splitlines():
        lines.append(f"  {line}")

    if suggestion:
        lines.append("\nSuggestion:")
        for line in suggestion.splitlines():
            lines.append(f"  {line}")

    lines.append("========================================================================")
    return "\n".join(lines)
