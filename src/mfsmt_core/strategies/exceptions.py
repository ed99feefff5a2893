# src/mfsmt_core/strategies/exceptions.py
"""
Diagnosable exceptions raised by translation strategies themselves, as opposed
to the schematic or configuration problems they report.
"""
from dataclasses import dataclass

from ..errors import DiagnosableError, format_diagnostic_report


@dataclass()
class TranslationStateError(DiagnosableError):
    """
    A strategy's cached result was read while the strategy was not in the
    CACHED state, i.e. before a successful `translate` or after a failed one.
    """
    strategy_name: str
    state: str

    def __str__(self):
        return f"Strategy '{self.strategy_name}' has no cached translation (state: {self.state})."

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Translation State Error",
            details=str(self),
            suggestion="Call translate() on the strategy and let it complete before reading its expressions.",
            context={'entity': self.strategy_name}
        )
