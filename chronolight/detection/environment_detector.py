"""
Lighting-environment detection.

Two strategies produce a LightingDetectionResult:
- Heuristic: time of day, ambient lux and screen brightness
- Camera (CIE xy): image sampling -> chromaticity -> CCT -> light type

The detector holds no state between calls. Choosing between strategies is the
caller's decision; `detect_best_available` packages the usual choice (camera
when preferred and available, heuristics otherwise).
"""

import statistics
from collections.abc import Sequence
from datetime import datetime

import pytz
from loguru import logger

from ..circadian_math import local_hour, time_category
from ..color.cct import estimate_cct
from ..color.conversion import rgb_to_chromaticity
from ..color.light_types import calculate_confidence, cct_to_light_type
from ..config import DEFAULT_THRESHOLDS, DetectionThresholds
from ..types import CameraDetection, HeuristicDetection, LightingDetectionResult, LightSample
from .camera import CameraHandle
from .image_sampler import extract_average_rgb


class LightingEnvironmentDetector:
    """Detect the dominant light source from sensor context or a camera frame."""

    def __init__(self, thresholds: DetectionThresholds = DEFAULT_THRESHOLDS):
        self.thresholds = thresholds

    @staticmethod
    def is_camera_available(camera: CameraHandle | None) -> bool:
        return camera is not None and camera.is_available

    def detect_with_heuristics(
        self,
        time: datetime,
        current_lux: float,
        recent_samples: Sequence[LightSample] = (),
        screen_brightness: float | None = None,
        tz_name: str | None = None,
    ) -> HeuristicDetection:
        """
        Infer the light type without a camera.

        Decision order:
        1. Screen brightness at or above the screen threshold -> phone_screen
        2. Time category of `time` plus the lux estimate

        Args:
            time: Moment of detection
            current_lux: Current ambient lux
            recent_samples: Latest samples; their lux is blended with
                current_lux (median) to suppress single-reading spikes
            screen_brightness: Screen brightness (0-1) if known
            tz_name: IANA timezone for the clock hour (UTC if None)

        Returns:
            HeuristicDetection with a fixed per-rule confidence
        """
        t = self.thresholds

        if screen_brightness is not None and screen_brightness >= t.screen_dominant_brightness:
            logger.debug("Screen-dominant lighting (brightness {:.2f})", screen_brightness)
            return HeuristicDetection(light_type="phone_screen", confidence=t.screen_confidence)

        lux = self._estimate_lux(current_lux, recent_samples)
        category = time_category(local_hour(time, tz_name))

        if category in ("evening", "night"):
            if lux < t.incandescent_max_lux:
                light_type, confidence = "incandescent", 0.55
            elif lux < t.evening_warm_max_lux:
                light_type, confidence = "warm_led_2700k", 0.7
            elif lux < t.evening_neutral_max_lux:
                light_type, confidence = "neutral_led_4000k", 0.6
            else:
                light_type, confidence = "cool_led_5000k", 0.55
        elif category == "morning":
            if lux > t.daylight_min_lux:
                light_type, confidence = "daylight_6500k", 0.8
            elif lux > t.morning_cool_min_lux:
                light_type, confidence = "cool_led_5000k", 0.7
            else:
                light_type, confidence = "neutral_led_4000k", 0.6
        else:
            if lux > t.daylight_min_lux:
                light_type, confidence = "daylight_6500k", 0.8
            elif lux > t.midday_cool_min_lux:
                light_type, confidence = "cool_led_5000k", 0.7
            elif lux > t.midday_neutral_min_lux:
                light_type, confidence = "neutral_led_4000k", 0.6
            else:
                light_type, confidence = "warm_led_2700k", 0.55

        logger.debug(
            "Heuristic detection: {} ({}, {:.0f} lux) -> {} at {:.0%}",
            category, time.isoformat(), lux, light_type, confidence,
        )
        return HeuristicDetection(light_type=light_type, confidence=confidence)

    def detect_now(
        self,
        current_lux: float,
        recent_samples: Sequence[LightSample] = (),
        screen_brightness: float | None = None,
        tz_name: str | None = None,
    ) -> HeuristicDetection:
        """Heuristic detection at the current wall-clock time."""
        return self.detect_with_heuristics(
            time=datetime.now(pytz.UTC),
            current_lux=current_lux,
            recent_samples=recent_samples,
            screen_brightness=screen_brightness,
            tz_name=tz_name,
        )

    def detect_from_image(self, data: bytes) -> CameraDetection | None:
        """
        Classify the light source from one encoded frame.

        Returns None when the frame cannot be decoded or its color is
        degenerate (black).
        """
        sample = extract_average_rgb(data)
        if not sample.is_valid:
            logger.warning("Camera detection skipped: {}", sample.error)
            return None

        chromaticity = rgb_to_chromaticity(sample.rgb)
        if not chromaticity.is_valid:
            logger.warning("Camera detection skipped: degenerate color {}", sample.rgb)
            return None

        estimate = estimate_cct(chromaticity)
        result = CameraDetection(
            light_type=cct_to_light_type(estimate.kelvin),
            confidence=calculate_confidence(estimate.duv, estimate.kelvin),
            kelvin=estimate.kelvin,
            chromaticity=chromaticity,
            duv=estimate.duv,
        )
        logger.debug("Camera detection: {}", result)
        return result

    def detect_with_camera(self, camera: CameraHandle | None) -> CameraDetection | None:
        """Capture a frame from a borrowed camera handle and classify it."""
        if not self.is_camera_available(camera):
            logger.debug("Camera not available")
            return None

        frame = camera.capture()
        if frame is None:
            return None
        return self.detect_from_image(frame)

    def _estimate_lux(self, current_lux: float, recent_samples: Sequence[LightSample]) -> float:
        window = recent_samples[-self.thresholds.recent_window:] if recent_samples else ()
        if not window:
            return current_lux
        return statistics.median([s.ambient_lux for s in window] + [current_lux])


def detect_best_available(
    detector: LightingEnvironmentDetector,
    time: datetime,
    current_lux: float,
    recent_samples: Sequence[LightSample] = (),
    screen_brightness: float | None = None,
    camera: CameraHandle | None = None,
    prefer_camera: bool = True,
    tz_name: str | None = None,
) -> LightingDetectionResult:
    """
    Camera detection when preferred and trustworthy, heuristics otherwise.

    A camera result is used only when the camera is available, the frame
    classifies, and its confidence exceeds the detector's camera threshold.
    """
    if prefer_camera and detector.is_camera_available(camera):
        result = detector.detect_with_camera(camera)
        if result is not None and result.confidence > detector.thresholds.camera_min_confidence:
            return result
        logger.debug("Camera detection failed or low confidence, falling back to heuristics")

    return detector.detect_with_heuristics(
        time=time,
        current_lux=current_lux,
        recent_samples=recent_samples,
        screen_brightness=screen_brightness,
        tz_name=tz_name,
    )
