"""
Pytest fixtures for chronolight tests.
"""

import sys
from pathlib import Path

import pytest

# Add repository root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from chronolight.detection.environment_detector import LightingEnvironmentDetector
from chronolight.pipeline import ProcessingPipeline
from chronolight.simulation import SimulationEngine

from helpers import FakeFrameSource, make_session, solid_image_bytes, utc


@pytest.fixture
def pipeline():
    """ProcessingPipeline with default parameters."""
    return ProcessingPipeline()


@pytest.fixture
def detector():
    """LightingEnvironmentDetector with default thresholds."""
    return LightingEnvironmentDetector()


@pytest.fixture
def engine(pipeline):
    """SimulationEngine sharing the default pipeline."""
    return SimulationEngine(pipeline=pipeline)


@pytest.fixture
def noon_session():
    """One hour of 100 lux from 12:00 UTC, one sample per minute."""
    return make_session(utc(2026, 3, 10, 12), session_id="noon")


@pytest.fixture
def evening_session():
    """One hour of 100 lux from 20:00 UTC, one sample per minute."""
    return make_session(utc(2026, 3, 10, 20), session_id="evening")


@pytest.fixture
def white_frame():
    """Encoded all-white PNG (sRGB white = D65)."""
    return solid_image_bytes((255, 255, 255))


@pytest.fixture
def frame_source(white_frame):
    """Ready camera source that returns a white frame."""
    return FakeFrameSource(frame=white_frame)
