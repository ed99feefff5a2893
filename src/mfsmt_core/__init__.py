# src/mfsmt_core/__init__.py
import logging
from .log_config import setup_logging

setup_logging()
logger = logging.getLogger(__name__)
logger.info("mfsmt-core package initialized.")

from .units import ureg, Quantity
from .schematic import Schematic, SchematicParser
from .parameters import ProcessParameters
from .type_table import PrimitiveTypeTable, construct_type_table
from .backend import MicrofluidicsBackend
from .errors import MfsmtError, CodeGenerationError, SchematicLoadError

__all__ = [
    # Units
    "ureg", "Quantity",
    # Data Structures
    "Schematic", "ProcessParameters", "PrimitiveTypeTable",
    # Loaders
    "SchematicParser",
    # Pipeline
    "construct_type_table", "MicrofluidicsBackend",
    # Top-Level Errors (Actionable Diagnostics)
    "MfsmtError", "CodeGenerationError", "SchematicLoadError",
]
