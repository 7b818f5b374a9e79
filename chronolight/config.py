"""
Tunable model coefficients and lookup tables.

Scientific basis:
- CS saturating response: Rea MS et al. (2005, 2012) circadian stimulus model
- Melanopic ratios: CIE S 026/E:2018 melanopic daylight efficacy ratios (approx.)
- Light PRC shape: Khalsa SBS et al. (2003). J Physiol, 549(3), 945-952.

Coefficients are grouped in frozen dataclasses so alternative models can be
passed to the pipeline, detector and simulation engine without touching
module state. The defaults below are the calibrated values.
"""

from dataclasses import dataclass, field

from .circadian_math import TimeCategory
from .types import LightType

DEFAULT_LIGHT_TYPE: LightType = "neutral_led_4000k"

# Melanopic daylight efficacy ratio per light source (melanopic lux / photopic lux)
MELANOPIC_RATIOS: dict[LightType, float] = {
    "warm_led_2700k": 0.45,
    "neutral_led_4000k": 0.60,
    "cool_led_5000k": 0.85,
    "daylight_6500k": 0.95,
    "phone_screen": 0.75,
    "incandescent": 0.42,
}
DEFAULT_MELANOPIC_RATIO = 0.6  # Used for labels outside the closed set

# Screen brightness (0-1) -> lux at the reference viewing distance
SCREEN_BRIGHTNESS_TO_LUX: dict[float, float] = {
    0.0: 0.0,
    0.2: 40.0,
    0.4: 80.0,
    0.5: 120.0,
    0.6: 160.0,
    0.8: 220.0,
    1.0: 300.0,
}
REFERENCE_VIEWING_DISTANCE_CM = 30.0
DEFAULT_VIEWING_DISTANCE_CM = 35.0

# Light PRC weight by local clock hour.
# Positive = phase advance, negative = phase delay.
PRC_WEIGHTS: dict[int, float] = {
    0: -1.0,  # midnight - strong delay
    1: -1.2,
    2: -1.5,  # maximum delay
    3: -1.3,
    4: -0.8,
    5: -0.2,
    6: 0.3,  # crossover
    7: 0.8,
    8: 1.0,  # maximum advance
    9: 0.9,
    10: 0.5,
    11: 0.2,
    12: 0.0,  # noon - minimal effect
    13: 0.0,
    14: 0.0,
    15: 0.0,
    16: -0.1,
    17: -0.2,
    18: -0.3,
    19: -0.5,  # delay zone begins
    20: -0.7,
    21: -0.8,
    22: -0.9,
    23: -1.0,
}


@dataclass(frozen=True)
class ModelParameters:
    """Coefficients of the light -> CS -> dose -> MSI / phase-shift model."""

    cs_max: float = 0.7  # Saturation level of circadian stimulus
    cs_steepness: float = 0.005  # 1 / melanopic lux
    msi_k: float = 0.25  # MSI sensitivity per weighted CS-hour

    # Relative contribution of dose to melatonin suppression by time category.
    # Evening light must always weigh more than midday light.
    msi_time_weights: dict[TimeCategory, float] = field(
        default_factory=lambda: {
            "morning": 0.75,
            "midday": 0.5,
            "evening": 1.5,
            "night": 1.25,
        }
    )
    # Sessions longer than this are scaled down to an equivalent-length dose
    msi_reference_hours: float = 8.0

    # Hours of phase shift per CS-hour, by time category
    prc_scaling: dict[TimeCategory, float] = field(
        default_factory=lambda: {
            "morning": 1.0,
            "evening": 0.9,
            "midday": 0.5,
            "night": 0.5,
        }
    )

    default_interval_hours: float = 1.0 / 60.0  # Single-sample sessions
    max_gap_hours: float = 0.25  # Longer gaps are treated as sensor dropouts

    include_screen_light: bool = False  # Add screen lux to ambient lux at the eye
    attenuate_sleep: bool = True
    sleep_attenuation: float = 0.1  # Eyes closed: fraction of light reaching retina


@dataclass(frozen=True)
class DetectionThresholds:
    """Rule thresholds for heuristic lighting detection."""

    screen_dominant_brightness: float = 0.8
    screen_confidence: float = 0.7
    recent_window: int = 5  # Latest samples blended into the lux estimate

    # Evening / night
    incandescent_max_lux: float = 15.0
    evening_warm_max_lux: float = 50.0
    evening_neutral_max_lux: float = 200.0

    # Morning / midday
    daylight_min_lux: float = 1000.0
    morning_cool_min_lux: float = 500.0
    midday_cool_min_lux: float = 300.0
    midday_neutral_min_lux: float = 100.0

    # Camera results below this confidence defer to heuristics
    camera_min_confidence: float = 0.5


@dataclass(frozen=True)
class SimulationParameters:
    """Settings for synthesized exposure in what-if simulations."""

    therapy_lux: float = 10000.0  # Bright-light therapy box at eye level
    default_interval_minutes: float = 1.0


DEFAULT_PARAMETERS = ModelParameters()
DEFAULT_THRESHOLDS = DetectionThresholds()
DEFAULT_SIMULATION = SimulationParameters()
