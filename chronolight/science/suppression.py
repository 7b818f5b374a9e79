"""
Melatonin suppression index (MSI) from integrated circadian dose.

    MSI = 1 - exp(-k * X)

X is the time-weighted dose in CS-hours. Evening and night light weigh more
than the same dose at midday, so an evening session always predicts higher
suppression than an identical daytime one.
"""

import math
from collections.abc import Sequence

from ..circadian_math import TimeCategory, clamp
from ..config import DEFAULT_PARAMETERS


class MSIModel:
    """Dose -> melatonin suppression response."""

    def __init__(
        self,
        k: float = DEFAULT_PARAMETERS.msi_k,
        time_weights: dict[TimeCategory, float] | None = None,
        reference_hours: float = DEFAULT_PARAMETERS.msi_reference_hours,
    ):
        self.k = k
        self.time_weights = time_weights or DEFAULT_PARAMETERS.msi_time_weights
        self.reference_hours = reference_hours

    def calculate_msi(self, dose_x: float) -> float:
        """MSI fraction (0-1) for a dose in CS-hours."""
        if dose_x <= 0:
            return 0.0
        return clamp(1 - math.exp(-self.k * dose_x), 0.0, 1.0)

    def calculate_weighted_dose(
        self,
        doses: Sequence[float],
        categories: Sequence[TimeCategory],
        duration_hours: float,
    ) -> float:
        """
        Time-of-day weighted dose, normalized to the reference session length.

        Args:
            doses: Per-sample dose (CS * interval hours)
            categories: Time category of each sample
            duration_hours: Session duration

        Returns:
            Weighted dose in CS-hours
        """
        weighted = sum(
            dose * self.time_weights.get(category, 1.0)
            for dose, category in zip(doses, categories)
        )
        if duration_hours > self.reference_hours:
            weighted *= self.reference_hours / duration_hours
        return weighted

    def calculate_msi_with_uncertainty(
        self, dose_x: float, k_uncertainty: float
    ) -> dict[str, float]:
        """MSI with a confidence band from an uncertainty on k."""
        lower = 1 - math.exp(-(self.k - k_uncertainty) * dose_x)
        upper = 1 - math.exp(-(self.k + k_uncertainty) * dose_x)
        return {
            "msi": self.calculate_msi(dose_x),
            "lower_ci": clamp(lower, 0.0, 1.0),
            "upper_ci": clamp(upper, 0.0, 1.0),
        }

    @staticmethod
    def calculate_dose(cs_values: Sequence[float], intervals_hours: Sequence[float]) -> float:
        """X = sum(CS_i * dt_i) in CS-hours."""
        return sum(cs * dt for cs, dt in zip(cs_values, intervals_hours))

    @staticmethod
    def fit_k(msi_observed: float, dose_x: float) -> float:
        """
        Solve k from an observed MSI and dose.

        k = -ln(1 - MSI_obs) / X
        """
        if dose_x <= 0 or msi_observed <= 0 or msi_observed >= 1.0:
            return DEFAULT_PARAMETERS.msi_k
        return -math.log(1 - msi_observed) / dose_x
