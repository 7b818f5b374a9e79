"""
Phase shift from timed light exposure.

Scientific basis:
- Khalsa SBS et al. (2003). A phase response curve to single bright light
  pulses in human subjects. J Physiol, 549(3), 945-952.

Simplified hourly PRC: light in the late evening and early night delays the
clock, light after the temperature minimum (early morning) advances it, and
midday light has little effect.

    shift = PRC_weight(hour) * scaling(time_category) * dose

Sign convention: positive = phase advance (earlier), negative = phase delay.
"""

from collections.abc import Sequence

from ..circadian_math import TimeCategory, time_category
from ..config import DEFAULT_PARAMETERS, PRC_WEIGHTS

# Below this magnitude the effect is reported as minimal (6 minutes)
MINIMAL_SHIFT_HOURS = 0.1


class LightPRC:
    """Hourly light phase response curve."""

    def __init__(self, scaling: dict[TimeCategory, float] | None = None):
        self.scaling = scaling or DEFAULT_PARAMETERS.prc_scaling

    @staticmethod
    def weight(hour: int) -> float:
        """PRC weight for a local clock hour."""
        return PRC_WEIGHTS.get(hour % 24, 0.0)

    def phase_shift(self, hour: int, dose_x: float) -> float:
        """
        Phase shift in hours for one exposure.

        Args:
            hour: Local clock hour of the exposure
            dose_x: CS * duration (CS-hours)

        Returns:
            Hours of shift (positive = advance, negative = delay)
        """
        if dose_x <= 0:
            return 0.0
        return self.weight(hour) * self.scaling.get(time_category(hour), 0.5) * dose_x

    def cumulative_phase_shift(self, hours: Sequence[int], doses: Sequence[float]) -> float:
        """Sum of per-exposure phase shifts."""
        if len(hours) != len(doses):
            raise ValueError("hours and doses must have the same length")
        return sum(self.phase_shift(hour, dose) for hour, dose in zip(hours, doses))

    @staticmethod
    def interpret_phase_shift(shift_hours: float) -> str:
        """Human-readable description of a phase shift."""
        minutes = round(abs(shift_hours) * 60)
        if abs(shift_hours) < MINIMAL_SHIFT_HOURS:
            return "Minimal circadian effect (< 6 minutes)"
        if shift_hours > 0:
            return f"Phase advance of ~{minutes} minutes (earlier sleep/wake)"
        return f"Phase delay of ~{minutes} minutes (later sleep/wake)"
