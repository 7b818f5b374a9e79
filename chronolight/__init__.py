"""
Chronolight Circadian Light Metrics

Estimates the circadian impact of recorded light exposure: melanopic
illuminance, circadian stimulus, melatonin suppression and phase shift.
Includes camera / heuristic lighting detection, what-if simulation and
chronotherapy plan generation.

Main entry point: ProcessingPipeline
"""

from .config import (
    DEFAULT_LIGHT_TYPE,
    DEFAULT_PARAMETERS,
    DEFAULT_SIMULATION,
    DEFAULT_THRESHOLDS,
    DetectionThresholds,
    ModelParameters,
    SimulationParameters,
)
from .detection import (
    CameraHandle,
    FrameSource,
    LightingEnvironmentDetector,
    detect_best_available,
    extract_average_rgb,
    extract_rgb_from_region,
)
from .errors import ChronolightError, InvalidInputError
from .pipeline import ProcessingPipeline
from .planning import MultiDayPlanner, TherapyPlanner
from .serialization import (
    detection_to_dict,
    results_from_dict,
    results_to_dict,
    session_from_dict,
    session_to_dict,
)
from .simulation import SimulationEngine
from .types import (
    LIGHT_TYPES,
    RGB,
    CameraDetection,
    Chromaticity,
    ChronoPlan,
    HeuristicDetection,
    LightingDetectionResult,
    LightSample,
    ResultsModel,
    RGBExtractionResult,
    Session,
    SimulationComparison,
    SimulationScenario,
)

__all__ = [
    # Types
    "LightSample",
    "Session",
    "RGB",
    "Chromaticity",
    "RGBExtractionResult",
    "HeuristicDetection",
    "CameraDetection",
    "LightingDetectionResult",
    "ResultsModel",
    "SimulationScenario",
    "SimulationComparison",
    "ChronoPlan",
    "LIGHT_TYPES",
    # Configuration
    "ModelParameters",
    "DetectionThresholds",
    "SimulationParameters",
    "DEFAULT_LIGHT_TYPE",
    "DEFAULT_PARAMETERS",
    "DEFAULT_THRESHOLDS",
    "DEFAULT_SIMULATION",
    # Errors
    "ChronolightError",
    "InvalidInputError",
    # Detection
    "CameraHandle",
    "FrameSource",
    "LightingEnvironmentDetector",
    "detect_best_available",
    "extract_average_rgb",
    "extract_rgb_from_region",
    # Processing
    "ProcessingPipeline",
    "SimulationEngine",
    "TherapyPlanner",
    "MultiDayPlanner",
    # Interchange
    "session_to_dict",
    "session_from_dict",
    "results_to_dict",
    "results_from_dict",
    "detection_to_dict",
]
