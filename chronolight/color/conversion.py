"""
sRGB -> CIE 1931 XYZ -> xy chromaticity conversion.

Built on colour-science: the IEC 61966-2-1 sRGB transfer curve and the
sRGB/D65 colourspace come from `colour`. Conversion is total: black or
out-of-range input produces the flagged-invalid chromaticity instead of
raising.
"""

import math

import colour
import numpy as np

from ..types import INVALID_CHROMATICITY, RGB, XYZ, Chromaticity

SRGB_TRANSFER = "sRGB"

# Tristimulus sums below this are treated as black
BLACK_EPSILON = 1e-9


def gamma_expand(value: float) -> float:
    """Decode one sRGB channel value (0-1) to linear light."""
    value = min(max(value, 0.0), 1.0)
    return float(colour.cctf_decoding(value, function=SRGB_TRANSFER))


def gamma_compress(value: float) -> float:
    """Encode one linear channel value (0-1) with the sRGB curve."""
    value = min(max(value, 0.0), 1.0)
    return float(colour.cctf_encoding(value, function=SRGB_TRANSFER))


def linearize_rgb(srgb: RGB) -> RGB:
    """Convert gamma-encoded sRGB to linear RGB."""
    return RGB(r=gamma_expand(srgb.r), g=gamma_expand(srgb.g), b=gamma_expand(srgb.b))


def rgb_to_xyz(linear_rgb: RGB) -> XYZ:
    """Map linear sRGB to CIE 1931 XYZ under D65."""
    x, y, z = colour.sRGB_to_XYZ(
        np.array([linear_rgb.r, linear_rgb.g, linear_rgb.b]),
        apply_cctf_decoding=False,
    )
    return XYZ(x=float(x), y=float(y), z=float(z))


def xyz_to_chromaticity(xyz: XYZ) -> Chromaticity:
    """
    Normalize tristimulus values to xy chromaticity.

    Returns INVALID_CHROMATICITY for black or non-finite input.
    """
    if not xyz.is_valid:
        return INVALID_CHROMATICITY

    total = xyz.x + xyz.y + xyz.z
    if total < BLACK_EPSILON or not math.isfinite(total):
        return INVALID_CHROMATICITY

    x, y = colour.XYZ_to_xy(np.array([xyz.x, xyz.y, xyz.z]))
    return Chromaticity(x=float(x), y=float(y))


def rgb_to_chromaticity(rgb: RGB, linearize: bool = True) -> Chromaticity:
    """
    Convert an RGB color to CIE 1931 xy chromaticity.

    Args:
        rgb: Color with channels in 0-1
        linearize: True if rgb is gamma-encoded sRGB (camera pixels),
            False if it is already linear

    Returns:
        Chromaticity; check `is_valid` before using it for classification
    """
    if not rgb.is_valid:
        return INVALID_CHROMATICITY

    linear = linearize_rgb(rgb) if linearize else rgb
    return xyz_to_chromaticity(rgb_to_xyz(linear))
