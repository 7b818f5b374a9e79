"""
Light-source classification from correlated color temperature.

Only the four LED/daylight categories are reachable through CCT bucketing;
phone_screen and incandescent come from heuristic detection.
"""

from ..circadian_math import clamp
from ..config import DEFAULT_MELANOPIC_RATIO, MELANOPIC_RATIOS

# Bucket lower bounds (kelvin), half-open intervals
NEUTRAL_MIN_K = 3000.0
COOL_MIN_K = 4500.0
DAYLIGHT_MIN_K = 6000.0

# Estimates outside this range are less trustworthy
RELIABLE_CCT_RANGE = (2500.0, 10000.0)
EXTREME_CCT_PENALTY = 0.8

# (max |Duv|, confidence), evaluated in order
DUV_CONFIDENCE_TIERS = (
    (0.02, 0.95),  # Excellent: close to blackbody
    (0.05, 0.80),
    (0.10, 0.60),
)
POOR_DUV_CONFIDENCE = 0.40

LIGHT_TYPE_NAMES = {
    "warm_led_2700k": "Warm LED (2700K)",
    "neutral_led_4000k": "Neutral LED (4000K)",
    "cool_led_5000k": "Cool LED (5000K)",
    "daylight_6500k": "Daylight (6500K)",
    "phone_screen": "Phone Screen",
    "incandescent": "Incandescent",
}


def cct_to_light_type(kelvin: float) -> str:
    """
    Map a CCT to a light-source category.

    Categories:
    - < 3000K: warm_led_2700k
    - 3000-4500K: neutral_led_4000k
    - 4500-6000K: cool_led_5000k
    - >= 6000K: daylight_6500k
    """
    if kelvin < NEUTRAL_MIN_K:
        return "warm_led_2700k"
    if kelvin < COOL_MIN_K:
        return "neutral_led_4000k"
    if kelvin < DAYLIGHT_MIN_K:
        return "cool_led_5000k"
    return "daylight_6500k"


def get_melanopic_ratio(light_type: str) -> float:
    """Melanopic/photopic ratio for a light type, 0.6 for unknown labels."""
    return MELANOPIC_RATIOS.get(light_type, DEFAULT_MELANOPIC_RATIO)


def light_type_name(light_type: str) -> str:
    """Human-readable name, or the label itself when unknown."""
    return LIGHT_TYPE_NAMES.get(light_type, light_type)


def calculate_confidence(duv: float, kelvin: float) -> float:
    """
    Confidence (0-1) that a camera-derived CCT reflects the real light source.

    Tiered by |Duv| (distance from the blackbody locus), then reduced when
    the CCT itself is extreme.

    Args:
        duv: Distance from the Planckian locus
        kelvin: Estimated CCT

    Returns:
        Confidence score in [0, 1]
    """
    distance = abs(duv)
    confidence = POOR_DUV_CONFIDENCE
    for max_duv, tier_confidence in DUV_CONFIDENCE_TIERS:
        if distance < max_duv:
            confidence = tier_confidence
            break

    low, high = RELIABLE_CCT_RANGE
    if kelvin < low or kelvin > high:
        confidence *= EXTREME_CCT_PENALTY

    return clamp(confidence, 0.0, 1.0)
