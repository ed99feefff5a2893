# --- Create file: src/mfsmt_core/constants.py ---
import logging

import numpy as np

logger = logging.getLogger(__name__)

# --- Mathematical Constants ---

#: Numeric value asserted for the solver-side pi symbol. The solver has no
#: built-in pi, so every expression that needs it references the declared symbol.
PI_VALUE: float = float(np.pi)

# --- Hydrodynamic Resistance Model Constants ---

#: Leading coefficient of the rectangular-channel resistance approximation
#: R = 12 mu L / (w h^3 (1 - 0.63 h / w)), valid for h <= w.
RECTANGULAR_RESISTANCE_COEFFICIENT: float = 12.0
RECTANGULAR_ASPECT_CORRECTION: float = 0.63

#: Leading coefficient of the Hagen-Poiseuille resistance R = 8 mu L / (pi r^4).
CIRCULAR_RESISTANCE_COEFFICIENT: float = 8.0

# --- Droplet Generation Model Constants ---

#: Default fitting constant of the T-junction squeezing-regime scaling law
#: L_drop / w = 1 + alpha * Q_dispersed / Q_continuous.
DEFAULT_DROPLET_ALPHA: float = 1.0

logger.debug("Defined core constants: PI_VALUE, resistance model and droplet model coefficients")
