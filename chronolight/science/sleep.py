"""
Actigraphy-style sleep detection for long recordings.

Runs of very low movement and very low light are treated as sleep. Light
reaching closed eyes is heavily attenuated, so the pipeline discounts it.
Most user-triggered sessions are fully awake and yield no episodes.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta

from ..types import LightSample

ACCEL_THRESHOLD = 0.5  # Very low movement
LUX_THRESHOLD = 10.0  # Very dim
MIN_EPISODE = timedelta(minutes=20)


@dataclass(frozen=True)
class SleepEpisode:
    start: datetime
    end: datetime

    @property
    def minutes(self) -> float:
        return (self.end - self.start).total_seconds() / 60

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment <= self.end


class SleepDetector:
    """Detect low-motion, low-light episodes."""

    @staticmethod
    def is_candidate(sample: LightSample) -> bool:
        low_motion = abs(sample.accel_magnitude or 0.0) < ACCEL_THRESHOLD
        return low_motion and sample.ambient_lux < LUX_THRESHOLD

    @classmethod
    def detect(cls, samples: Sequence[LightSample]) -> list[SleepEpisode]:
        """
        Find sleep episodes of at least MIN_EPISODE.

        An episode ends at the last qualifying sample of its run; the sample
        that breaks the run is awake and never part of it.
        """
        episodes = []
        current_start = None
        last_candidate = None

        for sample in samples:
            if cls.is_candidate(sample):
                if current_start is None:
                    current_start = sample.timestamp
                last_candidate = sample.timestamp
                continue

            if current_start is not None:
                if last_candidate - current_start >= MIN_EPISODE:
                    episodes.append(SleepEpisode(start=current_start, end=last_candidate))
                current_start = None

        if current_start is not None and last_candidate - current_start >= MIN_EPISODE:
            episodes.append(SleepEpisode(start=current_start, end=last_candidate))

        return episodes
