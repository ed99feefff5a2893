# src/mfsmt_core/parameters/process_parameters.py
"""
The physical fabrication constants that bound a valid chip layout.

Two loaders feed the same validation path:

*   `ProcessParameters.from_file` reads a YAML or JSON document with camelCase
    keys, checked against a Cerberus schema.
*   `ProcessParameters.from_mapping` takes already-split values keyed by
    attribute name; the command-line entry point uses it for its per-constant
    flags.

Values are bare numbers in SI units (metres, radians) or unit strings parsed by
Pint. Every problem found is reported in one `ProcessParameterError`.
"""
import logging
import math
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

import cerberus
import numpy as np
import pint
import yaml

from ..units import to_magnitude
from .exceptions import ProcessParameterError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParameterField:
    """Static description of one process parameter and its external spellings."""
    attribute: str
    file_key: str
    flag: str
    unit: str
    description: str


PARAMETER_FIELDS: Tuple[ParameterField, ...] = (
    ParameterField("minimum_node_distance", "minimumNodeDistance", "process-minimum-node-distance",
                   "meter", "minimum distance between any two nodes"),
    ParameterField("minimum_channel_length", "minimumChannelLength", "process-minimum-channel-length",
                   "meter", "minimum length of any channel"),
    ParameterField("maximum_chip_size_x", "maximumChipSizeX", "process-maximum-chip-size-x",
                   "meter", "maximum extent of the chip along x"),
    ParameterField("maximum_chip_size_y", "maximumChipSizeY", "process-maximum-chip-size-y",
                   "meter", "maximum extent of the chip along y"),
    ParameterField("critical_crossing_angle", "criticalCrossingAngle", "process-critical-crossing-angle",
                   "radian", "smallest allowed angle between two channels meeting at a node"),
)


def _range_problem(param_field: ParameterField, value: float) -> Optional[str]:
    """Returns a description of why `value` is unacceptable, or None."""
    if not np.isfinite(value):
        return f"'{param_field.attribute}' must be a finite number, got {value}."
    if param_field.unit == "radian":
        if not 0.0 < value <= math.pi:
            return f"'{param_field.attribute}' must lie in (0, pi] radians, got {value}."
    elif value <= 0.0:
        return f"'{param_field.attribute}' must be strictly positive, got {value}."
    return None


@dataclass(frozen=True)
class ProcessParameters:
    """Immutable, validated process constants. Lengths in metres, angles in radians."""
    minimum_node_distance: float
    minimum_channel_length: float
    maximum_chip_size_x: float
    maximum_chip_size_y: float
    critical_crossing_angle: float

    _file_schema = {
        f.file_key: {"type": ["number", "string"], "required": True, "empty": False}
        for f in PARAMETER_FIELDS
    }

    def __post_init__(self):
        problems: Dict[str, str] = {}
        for param_field in PARAMETER_FIELDS:
            value = getattr(self, param_field.attribute)
            if isinstance(value, bool) or not isinstance(value, (int, float, np.floating, np.integer)):
                problems[param_field.attribute] = f"'{param_field.attribute}' must be a real number, got {value!r}."
            elif problem := _range_problem(param_field, float(value)):
                problems[param_field.attribute] = problem
        if problems:
            raise ProcessParameterError(
                details="\n".join(problems.values()),
                source="ProcessParameters constructor",
                parameter_names=list(problems),
            )

    @classmethod
    def from_mapping(
        cls,
        raw_values: Mapping[str, Any],
        source: Union[str, Path] = "command line",
    ) -> "ProcessParameters":
        """
        Builds validated parameters from raw values keyed by attribute name.
        A key whose value is None counts as missing.
        """
        problems: List[str] = []
        faulty: List[str] = []
        converted: Dict[str, float] = {}
        for param_field in PARAMETER_FIELDS:
            raw = raw_values.get(param_field.attribute)
            if raw is None:
                problems.append(f"Missing required parameter '{param_field.attribute}' ({param_field.description}).")
                faulty.append(param_field.attribute)
                continue
            try:
                value = to_magnitude(raw, param_field.unit)
            except (pint.PintError, ValueError, TypeError, AttributeError, SyntaxError) as e:
                problems.append(
                    f"Parameter '{param_field.attribute}' value {raw!r} cannot be read as a "
                    f"{param_field.unit} quantity: {e}"
                )
                faulty.append(param_field.attribute)
                continue
            if problem := _range_problem(param_field, value):
                problems.append(problem)
                faulty.append(param_field.attribute)
                continue
            converted[param_field.attribute] = value

        if problems:
            logger.error(f"Process parameters from {source} rejected: {len(problems)} problem(s).")
            raise ProcessParameterError(
                details="\n".join(problems),
                source=source,
                parameter_names=faulty,
                user_input=", ".join(f"{k}={v}" for k, v in raw_values.items() if v is not None) or None,
            )

        params = cls(**converted)
        logger.info(f"Loaded process parameters from {source}: {params}")
        return params

    @classmethod
    def from_file(cls, file_path: Union[str, Path]) -> "ProcessParameters":
        """Loads parameters from a YAML or JSON file with camelCase keys."""
        path = Path(file_path).resolve()
        logger.info(f"Loading process parameters from file: {path}")
        if not path.is_file():
            raise ProcessParameterError(details=f"Process parameter file not found at path: {path}", source=path)
        try:
            with path.open("r", encoding="utf-8") as f:
                content = yaml.safe_load(f)
        except PermissionError as e:
            raise ProcessParameterError(details=f"Permission denied when trying to read file: {e}", source=path) from e
        except yaml.YAMLError as e:
            raise ProcessParameterError(details=f"Invalid YAML/JSON syntax: {e}", source=path) from e
        except UnicodeDecodeError as e:
            raise ProcessParameterError(details=f"File is not valid UTF-8 text: {e}", source=path) from e
        if not isinstance(content, dict):
            raise ProcessParameterError(details="The root of the process parameter file must be a mapping.", source=path)

        validator = cerberus.Validator(cls._file_schema)
        validator.allow_unknown = False
        if not validator.validate(content):
            key_to_attribute = {f.file_key: f.attribute for f in PARAMETER_FIELDS}
            problems = [f"Field '{key}': {messages}" for key, messages in sorted(validator.errors.items())]
            raise ProcessParameterError(
                details="\n".join(problems),
                source=path,
                parameter_names=[key_to_attribute[k] for k in sorted(validator.errors) if k in key_to_attribute],
            )

        raw_values = {f.attribute: content[f.file_key] for f in PARAMETER_FIELDS}
        return cls.from_mapping(raw_values, source=path)

    def as_dict(self) -> Dict[str, float]:
        return {f.name: getattr(self, f.name) for f in fields(self)}
