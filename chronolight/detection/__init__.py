"""
Lighting-environment detection: image sampling, camera handle, detector.
"""

from .camera import CameraHandle, FrameSource
from .environment_detector import LightingEnvironmentDetector, detect_best_available
from .image_sampler import extract_average_rgb, extract_rgb_from_region

__all__ = [
    "CameraHandle",
    "FrameSource",
    "LightingEnvironmentDetector",
    "detect_best_available",
    "extract_average_rgb",
    "extract_rgb_from_region",
]
