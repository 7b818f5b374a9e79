"""
Circadian stimulus (CS) from melanopic illuminance.

Saturating exponential response (after Rea et al.):

    CS = CS_max * (1 - exp(-a * melanopic_EDI))

CS is bounded in [0, CS_max), reflecting diminishing circadian sensitivity at
high illuminance.
"""

import math

from ..circadian_math import clamp
from ..config import DEFAULT_PARAMETERS


class CSModel:
    """Saturating circadian-stimulus response."""

    def __init__(
        self,
        cs_max: float = DEFAULT_PARAMETERS.cs_max,
        a: float = DEFAULT_PARAMETERS.cs_steepness,
    ):
        self.cs_max = cs_max
        self.a = a

    def calculate_cs(self, melanopic_edi: float) -> float:
        """Circadian stimulus (0 to ~cs_max) for a melanopic lux value."""
        if melanopic_edi <= 0:
            return 0.0
        cs = self.cs_max * (1 - math.exp(-self.a * melanopic_edi))
        return clamp(cs, 0.0, self.cs_max)

    def calculate_cs_linear(self, melanopic_edi: float) -> float:
        """Linear fallback: melanopic lux / 1000, capped at cs_max."""
        return clamp(melanopic_edi / 1000.0, 0.0, self.cs_max)

    @staticmethod
    def fit_parameter_a(
        melanopic_edi: float,
        cs_observed: float,
        cs_max: float = DEFAULT_PARAMETERS.cs_max,
    ) -> float:
        """
        Solve the steepness `a` from a single observation.

        a = -ln(1 - CS_obs / CS_max) / melanopic_EDI

        Returns the default steepness when the observation cannot be inverted.
        """
        if melanopic_edi <= 0 or cs_observed <= 0 or cs_observed >= cs_max:
            return DEFAULT_PARAMETERS.cs_steepness
        return -math.log(1 - cs_observed / cs_max) / melanopic_edi
