# src/mfsmt_core/parameters/exceptions.py
"""
Defines the diagnosable configuration error raised while loading process parameters.

A `ProcessParameterError` always fires before any translation begins: a run with
missing, unparseable, non-finite or out-of-range process constants never visits a
single node or connection.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from ..errors import DiagnosableError, format_diagnostic_report


@dataclass()
class ProcessParameterError(DiagnosableError):
    """
    One or more process parameters are missing or invalid.

    Attributes:
        details: Human-readable description of every problem found.
        source: Where the parameters came from ('command line' or a file path).
        parameter_names: The parameters at fault, in declaration order.
    """
    details: str
    source: Union[str, Path]
    parameter_names: List[str] = field(default_factory=list)
    user_input: Optional[str] = None

    def __str__(self):
        return f"Invalid process parameters from {self.source}: {self.details}"

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Process Parameter Configuration Error",
            details=self.details,
            suggestion=(
                "Specify all five process parameters, either with '--process-file <file>' or with "
                "'--process-minimum-node-distance', '--process-minimum-channel-length', "
                "'--process-maximum-chip-size-x', '--process-maximum-chip-size-y' and "
                "'--process-critical-crossing-angle'. Values are numbers in SI units or unit "
                "strings such as '40 mm' or '5 degree'."
            ),
            context={
                'source_file': self.source if isinstance(self.source, Path) else None,
                'user_input': self.user_input,
            }
        )
