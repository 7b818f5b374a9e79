"""
Melanopic illuminance at the eye.

Scientific basis:
- Melanopic EDI: CIE S 026/E:2018
- Screen contribution: inverse-square falloff with distance and Lambert
  cosine falloff with viewing angle
"""

import math

from ..circadian_math import clamp, interpolate_from_map
from ..color.light_types import get_melanopic_ratio
from ..config import (
    DEFAULT_VIEWING_DISTANCE_CM,
    REFERENCE_VIEWING_DISTANCE_CM,
    SCREEN_BRIGHTNESS_TO_LUX,
)
from ..types import LightSample

# Device held upright with the screen facing the user
NORMAL_VIEWING_PITCH = math.pi / 2


def calculate_melanopic_edi(total_lux: float, light_type: str) -> float:
    """Melanopic equivalent daylight illuminance for photopic lux of a given source."""
    return total_lux * get_melanopic_ratio(light_type)


def estimate_screen_lux(
    brightness: float,
    viewing_distance_cm: float | None = None,
    viewing_angle_radians: float | None = None,
) -> float:
    """
    Estimate the lux a phone screen adds at the eye.

    Args:
        brightness: Screen brightness (0-1)
        viewing_distance_cm: Eye-to-screen distance, DEFAULT_VIEWING_DISTANCE_CM if None
        viewing_angle_radians: Device pitch; the angle from NORMAL_VIEWING_PITCH
            reduces the contribution by its cosine

    Returns:
        Lux at the eye
    """
    base_lux = interpolate_from_map(SCREEN_BRIGHTNESS_TO_LUX, brightness)
    if base_lux <= 0:
        return 0.0

    distance_cm = viewing_distance_cm or DEFAULT_VIEWING_DISTANCE_CM
    distance_factor = REFERENCE_VIEWING_DISTANCE_CM**2 / distance_cm**2

    angle_factor = 1.0
    if viewing_angle_radians is not None:
        off_axis = clamp(abs(viewing_angle_radians - NORMAL_VIEWING_PITCH), 0.0, math.pi / 2)
        angle_factor = clamp(math.cos(off_axis), 0.0, 1.0)

    return base_lux * distance_factor * angle_factor


def total_lux_at_eye(sample: LightSample, include_screen: bool = True) -> float:
    """Ambient lux plus the screen contribution when the screen is on."""
    total = sample.ambient_lux
    if include_screen and sample.screen_on and sample.screen_brightness is not None:
        total += estimate_screen_lux(
            sample.screen_brightness,
            viewing_angle_radians=sample.orientation_pitch,
        )
    return total
