# --- src/mfsmt_core/units.py ---
import logging
from typing import Union

import pint

logger = logging.getLogger(__name__)
ureg = pint.UnitRegistry()
Quantity = ureg.Quantity
logger.info("Pint Unit Registry initialized.")



def to_magnitude(raw_value: Union[str, int, float], target_unit: str) -> float:
    """
    Converts a bare number or a unit string to a float magnitude in `target_unit`.

    Bare numbers (and unit-free strings such as "0.0001") are taken to be already
    expressed in the target unit. Anything else must be convertible to it.

    Raises:
        pint.UndefinedUnitError, pint.DimensionalityError, ValueError, TypeError:
            propagated to the caller, which turns them into a configuration error.
    """
    if isinstance(raw_value, bool):
        raise TypeError(f"Boolean value '{raw_value}' is not a physical quantity.")
    quantity = Quantity(raw_value)
    if not isinstance(quantity, Quantity):
        raise TypeError(f"Value '{raw_value}' did not parse to a quantity.")
    if quantity.unitless:
        return float(quantity.magnitude)
    return float(quantity.to(target_unit).magnitude)

