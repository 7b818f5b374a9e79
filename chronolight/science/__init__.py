"""
Photobiology Science Layer.

Pure functions of light exposure, with no knowledge of sessions or sensors.

Modules:
- melanopic: Melanopic EDI and screen contribution at the eye
- stimulus: Circadian stimulus (saturating response to melanopic lux)
- suppression: Melatonin suppression index from time-weighted dose
- prc: Hourly light phase response curve
- sleep: Low-motion / low-light sleep episode detection
- clock: Cumulative phase offset across sessions
"""

from .clock import ClockModel, ClockState
from .melanopic import calculate_melanopic_edi, estimate_screen_lux, total_lux_at_eye
from .prc import LightPRC
from .sleep import SleepDetector, SleepEpisode
from .stimulus import CSModel
from .suppression import MSIModel

__all__ = [
    "CSModel",
    "MSIModel",
    "LightPRC",
    "SleepDetector",
    "SleepEpisode",
    "ClockModel",
    "ClockState",
    "calculate_melanopic_edi",
    "estimate_screen_lux",
    "total_lux_at_eye",
]
