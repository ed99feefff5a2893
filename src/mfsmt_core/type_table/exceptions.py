# src/mfsmt_core/type_table/exceptions.py
"""
Defines the diagnosable exception for violations of the schematic's declared
type hierarchy.
"""
from dataclasses import dataclass
from typing import Optional

from ..errors import DiagnosableError, format_diagnostic_report


@dataclass()
class TypeHierarchyError(DiagnosableError):
    """
    The schematic's type declarations violate the required subtyping: a required
    type is undeclared, a supertype reference is dangling, the hierarchy contains
    a cycle, or a control-point specialization does not derive from controlPoint.
    Raised before any strategy runs.
    """
    details: str
    type_name: Optional[str] = None
    schematic_name: Optional[str] = None

    def __str__(self):
        return f"schematic type incompatibility: {self.details}"

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Schematic Type Hierarchy Error",
            details=self.details,
            suggestion="Fix the 'types' section of the schematic so that every supertype is declared, the hierarchy is acyclic, and pressure/voltage control points derive from controlPoint.",
            context={'schematic': self.schematic_name, 'entity': self.type_name}
        )
