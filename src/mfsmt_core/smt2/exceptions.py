# src/mfsmt_core/smt2/exceptions.py
"""
Diagnosable exceptions raised while generating solver symbols.
"""
from dataclasses import dataclass

from ..errors import format_diagnostic_report
from ..schematic.exceptions import TopologyError


@dataclass()
class SymbolNamingError(TopologyError):
    """
    A schematic entity cannot be mapped onto a symbol name, e.g. a port that is
    missing from its own parent's port registry. This always indicates a
    malformed schematic.
    """

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Symbol Naming Error",
            details=self.details,
            suggestion="Every port must be registered by name on the node it belongs to. Rebuild the schematic so that the port appears in its parent's port mapping.",
            context={'entity': self.entity}
        )
