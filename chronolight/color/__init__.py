"""
Colorimetry: RGB -> chromaticity -> CCT -> light-source category.
"""

from .cct import calculate_duv, chromaticity_to_cct, estimate_cct
from .conversion import rgb_to_chromaticity, rgb_to_xyz, xyz_to_chromaticity
from .light_types import (
    calculate_confidence,
    cct_to_light_type,
    get_melanopic_ratio,
    light_type_name,
)

__all__ = [
    "rgb_to_chromaticity",
    "rgb_to_xyz",
    "xyz_to_chromaticity",
    "chromaticity_to_cct",
    "estimate_cct",
    "calculate_duv",
    "cct_to_light_type",
    "get_melanopic_ratio",
    "light_type_name",
    "calculate_confidence",
]
