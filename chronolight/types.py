"""
Data structures for light-exposure processing.

Every record is an immutable value: sequences are stored as tuples and nothing
holds a reference back to the record that produced it.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal

from .circadian_math import clamp, duration_hours, ensure_utc, is_evening, local_hour
from .errors import InvalidInputError

LightType = Literal[
    "warm_led_2700k",
    "neutral_led_4000k",
    "cool_led_5000k",
    "daylight_6500k",
    "phone_screen",
    "incandescent",
]

LIGHT_TYPES: tuple[str, ...] = (
    "warm_led_2700k",
    "neutral_led_4000k",
    "cool_led_5000k",
    "daylight_6500k",
    "phone_screen",
    "incandescent",
)

DetectionMethod = Literal["heuristic", "cie_xy"]

RiskLevel = Literal["High", "Moderate", "Low", "Minimal"]

# =============================================================================
# Sensor Session Types
# =============================================================================


@dataclass(frozen=True)
class LightSample:
    """Single time-stamped sensor reading."""

    timestamp: datetime  # UTC instant (naive input is taken as UTC)
    ambient_lux: float  # Ambient light sensor reading
    screen_on: bool
    screen_brightness: float | None = None  # 0.0-1.0
    accel_magnitude: float | None = None  # Aggregated accelerometer magnitude
    orientation_pitch: float | None = None  # Device pitch in radians

    def __post_init__(self):
        object.__setattr__(self, "timestamp", ensure_utc(self.timestamp))
        if not math.isfinite(self.ambient_lux) or self.ambient_lux < 0:
            raise InvalidInputError(f"ambient_lux must be a finite value >= 0, got {self.ambient_lux}")
        if self.screen_brightness is not None and not 0.0 <= self.screen_brightness <= 1.0:
            raise InvalidInputError(
                f"screen_brightness must be within [0, 1], got {self.screen_brightness}"
            )


@dataclass(frozen=True)
class Session:
    """
    A recorded monitoring session.

    Samples are kept in insertion order, which the pipeline treats as time
    order. An empty sample sequence is a valid session but cannot be processed.
    """

    id: str
    started_at: datetime
    stopped_at: datetime
    samples: tuple[LightSample, ...] = ()
    meta: dict[str, Any] | None = None
    timezone: str | None = None  # IANA timezone for clock-hour rules (UTC if None)

    def __post_init__(self):
        object.__setattr__(self, "started_at", ensure_utc(self.started_at))
        object.__setattr__(self, "stopped_at", ensure_utc(self.stopped_at))
        object.__setattr__(self, "samples", tuple(self.samples))
        if self.stopped_at < self.started_at:
            raise InvalidInputError(
                f"Session {self.id!r} stops ({self.stopped_at}) before it starts ({self.started_at})"
            )

    @property
    def duration_hours(self) -> float:
        """Duration of this session in hours."""
        return duration_hours(self.started_at, self.stopped_at)


# =============================================================================
# Color Types
# =============================================================================


@dataclass(frozen=True)
class RGB:
    """sRGB color with channels normalized to 0-1."""

    r: float
    g: float
    b: float

    @property
    def is_valid(self) -> bool:
        return all(math.isfinite(c) and 0.0 <= c <= 1.0 for c in (self.r, self.g, self.b))

    @property
    def channel_spread(self) -> float:
        """Difference between the largest and smallest channel."""
        return max(self.r, self.g, self.b) - min(self.r, self.g, self.b)


@dataclass(frozen=True)
class XYZ:
    """CIE 1931 tristimulus values."""

    x: float
    y: float
    z: float

    @property
    def luminance(self) -> float:
        return self.y

    @property
    def is_valid(self) -> bool:
        return all(math.isfinite(c) and c >= 0 for c in (self.x, self.y, self.z))


D65_WHITE_POINT = (0.3127, 0.3290)


@dataclass(frozen=True)
class Chromaticity:
    """CIE 1931 xy chromaticity coordinate."""

    x: float
    y: float

    @property
    def z(self) -> float:
        return 1.0 - self.x - self.y

    @property
    def is_valid(self) -> bool:
        """True if the point is physically realizable."""
        return (
            math.isfinite(self.x)
            and math.isfinite(self.y)
            and 0.0 < self.x < 1.0
            and 0.0 < self.y < 1.0
            and self.x + self.y <= 1.0
        )

    def distance_from_d65(self) -> float:
        """Euclidean xy distance from the D65 white point."""
        return math.hypot(self.x - D65_WHITE_POINT[0], self.y - D65_WHITE_POINT[1])


# Returned for black or otherwise unconvertible colors
INVALID_CHROMATICITY = Chromaticity(x=0.0, y=0.0)


@dataclass(frozen=True)
class CCTEstimate:
    """Correlated color temperature with its distance from the Planckian locus."""

    kelvin: float
    duv: float
    is_valid: bool  # False when the input chromaticity was degenerate


@dataclass(frozen=True)
class RGBExtractionResult:
    """Outcome of sampling an encoded image."""

    rgb: RGB | None
    sample_count: int
    neutral_region_ratio: float
    error: str | None = None

    @property
    def is_valid(self) -> bool:
        return self.error is None


# =============================================================================
# Detection Types
# =============================================================================


@dataclass(frozen=True)
class HeuristicDetection:
    """Light type inferred from time of day, lux and screen brightness."""

    light_type: str
    confidence: float

    method: DetectionMethod = field(default="heuristic", init=False)

    @property
    def kelvin(self) -> float | None:
        return None

    def to_map(self) -> dict[str, Any]:
        return {
            "lightType": self.light_type,
            "kelvin": None,
            "confidence": self.confidence,
            "method": self.method,
            "chromaticity": None,
            "duv": None,
        }

    def __str__(self) -> str:
        return (
            f"LightingDetectionResult({self.light_type}, N/A, "
            f"confidence: {self.confidence * 100:.1f}%, method: {self.method})"
        )


@dataclass(frozen=True)
class CameraDetection:
    """Light type measured from a camera frame via CIE xy chromaticity."""

    light_type: str
    confidence: float
    kelvin: float
    chromaticity: Chromaticity
    duv: float

    method: DetectionMethod = field(default="cie_xy", init=False)

    def to_map(self) -> dict[str, Any]:
        return {
            "lightType": self.light_type,
            "kelvin": self.kelvin,
            "confidence": self.confidence,
            "method": self.method,
            "chromaticity": {"x": self.chromaticity.x, "y": self.chromaticity.y},
            "duv": self.duv,
        }

    def __str__(self) -> str:
        return (
            f"LightingDetectionResult({self.light_type}, {self.kelvin:.0f}K, "
            f"confidence: {self.confidence * 100:.1f}%, method: {self.method})"
        )


LightingDetectionResult = HeuristicDetection | CameraDetection

# =============================================================================
# Results Types
# =============================================================================

RISK_DESCRIPTIONS: dict[str, str] = {
    "High": "High circadian disruption risk",
    "Moderate": "Moderate circadian impact",
    "Low": "Low circadian impact",
    "Minimal": "Minimal circadian effect",
}


@dataclass(frozen=True)
class ResultsModel:
    """
    Circadian metrics for one processed session.

    The four time series are parallel and always the same length.
    `health_score` and `risk_level` are derived on every read so they can
    never disagree with the stored series.
    """

    session_id: str
    start_time: datetime
    end_time: datetime
    duration_hours: float

    # Timelines (for charts)
    timestamps: tuple[datetime, ...]
    lux_values: tuple[float, ...]
    melanopic_values: tuple[float, ...]
    cs_values: tuple[float, ...]

    # Computed metrics
    total_dose_x: float  # CS-hours
    msi_predicted: float  # 0-1
    phase_shift: float  # Hours, positive = advance
    average_cs: float
    peak_cs: float
    average_melanopic_lux: float

    light_type: str
    metadata: dict[str, Any] | None = None
    timezone: str | None = None

    def __post_init__(self):
        for name in ("timestamps", "lux_values", "melanopic_values", "cs_values"):
            object.__setattr__(self, name, tuple(getattr(self, name)))
        lengths = {
            len(self.timestamps),
            len(self.lux_values),
            len(self.melanopic_values),
            len(self.cs_values),
        }
        if len(lengths) != 1:
            raise InvalidInputError(f"Result series lengths differ: {sorted(lengths)}")

    @property
    def evening_ratio(self) -> float:
        """Fraction of samples taken in the evening window."""
        if not self.timestamps:
            return 0.0
        evening = sum(1 for t in self.timestamps if is_evening(local_hour(t, self.timezone)))
        return evening / len(self.timestamps)

    @property
    def health_score(self) -> float:
        """Circadian health score (0-100); lower when evening light suppresses melatonin."""
        if not self.timestamps:
            return 50.0

        evening_ratio = self.evening_ratio
        if evening_ratio > 0.5 and self.msi_predicted > 0.15:
            return 100 * (1 - self.msi_predicted * evening_ratio)

        return 100 * clamp(1 - abs(self.msi_predicted) * 0.3, 0.0, 1.0)

    @property
    def risk_level(self) -> RiskLevel:
        if self.msi_predicted > 0.4:
            return "High"
        if self.msi_predicted > 0.2:
            return "Moderate"
        if self.msi_predicted > 0.1:
            return "Low"
        return "Minimal"

    @property
    def risk_description(self) -> str:
        return RISK_DESCRIPTIONS[self.risk_level]


# =============================================================================
# Simulation and Planning Types
# =============================================================================


@dataclass(frozen=True)
class SimulationScenario:
    """
    A "what-if" change to apply to a recorded session.

    Examples:
    - Reduce evening light by 50%: exposure_change_percent=-50, window 19-23
    - Add 30 minutes of bright morning light: extra_block_minutes=30, start 8
    """

    base_session_id: str
    name: str
    exposure_change_percent: float  # Negative = reduction
    window_start_hour: int  # 0-23, inclusive
    window_end_hour: int  # 0-23, exclusive; wraps past midnight when < start
    extra_block_minutes: int = 0  # 0 = no extra block
    extra_block_start_hour: int | None = None

    def __post_init__(self):
        for name in ("window_start_hour", "window_end_hour", "extra_block_start_hour"):
            hour = getattr(self, name)
            if hour is not None and not 0 <= hour <= 23:
                raise InvalidInputError(f"{name} must be within 0-23, got {hour}")
        if self.extra_block_minutes < 0:
            raise InvalidInputError(
                f"extra_block_minutes must be >= 0, got {self.extra_block_minutes}"
            )

    @property
    def has_extra_block(self) -> bool:
        return self.extra_block_minutes > 0 and self.extra_block_start_hour is not None

    @property
    def scale_factor(self) -> float:
        """Multiplier applied to lux inside the window (never negative)."""
        return max(0.0, 1.0 + self.exposure_change_percent / 100.0)


@dataclass(frozen=True)
class SimulationComparison:
    """Base and simulated results side by side."""

    base: ResultsModel
    simulated: ResultsModel

    @property
    def dose_delta(self) -> float:
        return self.simulated.total_dose_x - self.base.total_dose_x

    @property
    def msi_delta(self) -> float:
        return self.simulated.msi_predicted - self.base.msi_predicted

    @property
    def phase_shift_delta(self) -> float:
        return self.simulated.phase_shift - self.base.phase_shift

    @property
    def health_score_delta(self) -> float:
        return self.simulated.health_score - self.base.health_score


@dataclass(frozen=True)
class ChronoPlan:
    """A chronotherapy plan generated from one or more results."""

    title: str
    description: str
    morning_light_block: str
    evening_dim_block: str
    ideal_bedtime: str
    screen_guidance: str
    recovery_timeline: str
