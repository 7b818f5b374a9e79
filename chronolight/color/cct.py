"""
Correlated color temperature (CCT) and Duv from CIE 1931 xy chromaticity.

Scientific basis:
- CCT: Hernández-Andrés J, Lee RL, Romero J (1999). Calculating correlated
  color temperatures across the entire gamut of daylight and skylight
  chromaticities. Applied Optics, 38(27), 5703-5709.
- Planckian locus in CIE 1960 uv: Ohno Y (2014). Practical use and
  calculation of CCT and Duv. LEUKOS, 10(1), 47-55.

Both come from colour-science. Results are clamped to [CCT_MIN, CCT_MAX]
because downstream classification only needs an approximate bucket.
"""

import math

import colour
import numpy as np

from ..circadian_math import clamp
from ..types import Chromaticity, CCTEstimate

CCT_METHOD = "Hernandez 1999"
LOCUS_METHOD = "Ohno 2013"

CCT_MIN = 1000.0
CCT_MAX = 100000.0
CCT_FALLBACK = 4000.0  # Non-finite chromaticity or the epicenter itself


def chromaticity_to_cct(xy: Chromaticity) -> float:
    """
    Estimate correlated color temperature in kelvin.

    Always returns a finite value. Out-of-locus points are clamped to the
    nearest bound; non-finite input returns CCT_FALLBACK.

    Args:
        xy: CIE 1931 chromaticity

    Returns:
        CCT in kelvin within [CCT_MIN, CCT_MAX]
    """
    if not (math.isfinite(xy.x) and math.isfinite(xy.y)):
        return CCT_FALLBACK

    # Points on the horizontal through the epicenter divide by zero
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        cct = float(colour.xy_to_CCT(np.array([xy.x, xy.y]), method=CCT_METHOD))

    if math.isnan(cct):
        return CCT_FALLBACK
    return clamp(cct, CCT_MIN, CCT_MAX)


def chromaticity_to_uv(xy: Chromaticity) -> tuple[float, float]:
    """Convert CIE 1931 xy to CIE 1960 uv."""
    u, v = colour.xy_to_UCS_uv(np.array([xy.x, xy.y]))
    return (float(u), float(v))


def planckian_uv(kelvin: float) -> tuple[float, float]:
    """CIE 1960 uv of a blackbody radiator."""
    t = clamp(kelvin, CCT_MIN, CCT_MAX)
    u, v = colour.temperature.CCT_to_uv(np.array([t, 0.0]), method=LOCUS_METHOD)
    return (float(u), float(v))


def calculate_duv(xy: Chromaticity, kelvin: float) -> float:
    """
    Signed distance from the Planckian locus at the estimated CCT.

    Positive above the locus (greenish), negative below (pinkish).
    """
    u, v = chromaticity_to_uv(xy)
    u_p, v_p = planckian_uv(kelvin)
    distance = math.hypot(u - u_p, v - v_p)
    return distance if v >= v_p else -distance


def estimate_cct(xy: Chromaticity) -> CCTEstimate:
    """
    Estimate CCT and Duv together.

    Degenerate chromaticities still yield a clamped CCT, flagged with
    is_valid=False and the largest plausible Duv so confidence drops.
    """
    kelvin = chromaticity_to_cct(xy)
    if not xy.is_valid:
        return CCTEstimate(kelvin=kelvin, duv=1.0, is_valid=False)
    return CCTEstimate(kelvin=kelvin, duv=calculate_duv(xy, kelvin), is_valid=True)
