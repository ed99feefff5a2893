# src/mfsmt_core/parameters/__init__.py
from .process_parameters import PARAMETER_FIELDS, ParameterField, ProcessParameters
from .exceptions import ProcessParameterError

__all__ = [
    "ProcessParameters",
    "ParameterField",
    "PARAMETER_FIELDS",
    "ProcessParameterError",
]
