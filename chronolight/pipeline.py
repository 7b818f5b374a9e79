"""
Circadian processing pipeline.

Turns a recorded session into a ResultsModel:

    lux at eye -> melanopic lux -> CS -> dose -> MSI / phase shift

The pipeline is single-shot and stateless: it keeps nothing between calls,
so one instance can serve concurrent callers. It never invokes the lighting
detector; callers resolve the light type first.
"""

import asyncio
import statistics
from collections.abc import Sequence
from datetime import datetime

from loguru import logger

from .circadian_math import duration_hours, local_hour, time_category
from .config import DEFAULT_LIGHT_TYPE, DEFAULT_PARAMETERS, ModelParameters
from .errors import InvalidInputError
from .science.melanopic import calculate_melanopic_edi, total_lux_at_eye
from .science.prc import LightPRC
from .science.sleep import SleepDetector, SleepEpisode
from .science.stimulus import CSModel
from .science.suppression import MSIModel
from .types import LightSample, ResultsModel, Session


def sample_intervals(
    samples: Sequence[LightSample],
    stopped_at: datetime,
    parameters: ModelParameters = DEFAULT_PARAMETERS,
) -> list[float]:
    """
    Exposure interval (hours) credited to each sample.

    Each sample covers the gap to the next one. The last sample runs to the
    session stop, or the median gap when the stop does not follow it.
    Negative gaps (out-of-order samples) count as zero and gaps longer than
    `max_gap_hours` are treated as sensor dropouts and capped.

    Args:
        samples: Samples in time order
        stopped_at: Session stop instant
        parameters: Model parameters (gap cap, single-sample default)

    Returns:
        One interval per sample
    """
    gaps = [
        max(0.0, duration_hours(current.timestamp, following.timestamp))
        for current, following in zip(samples, samples[1:])
    ]
    positive = [gap for gap in gaps if gap > 0]
    typical = statistics.median(positive) if positive else parameters.default_interval_hours

    tail = duration_hours(samples[-1].timestamp, stopped_at)
    gaps.append(tail if tail > 0 else typical)

    return [min(gap, parameters.max_gap_hours) for gap in gaps]


def _in_sleep(moment: datetime, episodes: list[SleepEpisode]) -> bool:
    return any(episode.contains(moment) for episode in episodes)


class ProcessingPipeline:
    """Session -> circadian metrics."""

    def __init__(self, parameters: ModelParameters = DEFAULT_PARAMETERS):
        self.parameters = parameters
        self.cs_model = CSModel(cs_max=parameters.cs_max, a=parameters.cs_steepness)
        self.msi_model = MSIModel(
            k=parameters.msi_k,
            time_weights=parameters.msi_time_weights,
            reference_hours=parameters.msi_reference_hours,
        )
        self.prc = LightPRC(scaling=parameters.prc_scaling)

    def process(
        self,
        session: Session,
        light_type: str = DEFAULT_LIGHT_TYPE,
        reference_duration_hours: float | None = None,
    ) -> ResultsModel:
        """
        Process a complete session.

        Args:
            session: Recorded session with at least one sample
            light_type: Dominant light source label (from the detector)
            reference_duration_hours: Duration used to normalise the MSI
                weighted dose; defaults to the session's own duration

        Returns:
            ResultsModel with one series entry per sample

        Raises:
            InvalidInputError: If the session has no samples
        """
        if not session.samples:
            raise InvalidInputError(f"Session {session.id!r} has no samples")

        params = self.parameters
        samples = session.samples
        intervals = sample_intervals(samples, session.stopped_at, params)
        episodes = SleepDetector.detect(samples) if params.attenuate_sleep else []

        timestamps = []
        lux_values = []
        melanopic_values = []
        cs_values = []
        doses = []
        hours = []

        for sample, interval in zip(samples, intervals):
            total_lux = total_lux_at_eye(sample, include_screen=params.include_screen_light)

            # Closed eyes during detected sleep see a fraction of the room light
            effective_lux = total_lux
            if episodes and _in_sleep(sample.timestamp, episodes):
                effective_lux *= params.sleep_attenuation

            melanopic = calculate_melanopic_edi(effective_lux, light_type)
            cs = self.cs_model.calculate_cs(melanopic)

            timestamps.append(sample.timestamp)
            lux_values.append(total_lux)
            melanopic_values.append(melanopic)
            cs_values.append(cs)
            doses.append(cs * interval)
            hours.append(local_hour(sample.timestamp, session.timezone))

        if reference_duration_hours is None:
            reference_duration_hours = session.duration_hours

        total_dose_x = sum(doses)
        weighted_dose = self.msi_model.calculate_weighted_dose(
            doses,
            [time_category(hour) for hour in hours],
            reference_duration_hours,
        )
        msi_predicted = self.msi_model.calculate_msi(weighted_dose)
        phase_shift = self.prc.cumulative_phase_shift(hours, doses)

        metadata = dict(session.meta) if session.meta is not None else None
        if episodes:
            metadata = metadata or {}
            metadata["sleepEpisodeCount"] = len(episodes)
            metadata["sleepMinutes"] = round(sum(e.minutes for e in episodes))

        logger.debug(
            "Processed session {}: {} samples, dose {:.3f} CS-h, MSI {:.3f}, shift {:+.3f} h",
            session.id, len(samples), total_dose_x, msi_predicted, phase_shift,
        )

        return ResultsModel(
            session_id=session.id,
            start_time=session.started_at,
            end_time=session.stopped_at,
            duration_hours=session.duration_hours,
            timestamps=tuple(timestamps),
            lux_values=tuple(lux_values),
            melanopic_values=tuple(melanopic_values),
            cs_values=tuple(cs_values),
            total_dose_x=total_dose_x,
            msi_predicted=msi_predicted,
            phase_shift=phase_shift,
            average_cs=statistics.fmean(cs_values),
            peak_cs=max(cs_values),
            average_melanopic_lux=statistics.fmean(melanopic_values),
            light_type=light_type,
            metadata=metadata,
            timezone=session.timezone,
        )

    async def process_async(
        self, session: Session, light_type: str = DEFAULT_LIGHT_TYPE
    ) -> ResultsModel:
        """Run `process` in a worker thread."""
        return await asyncio.to_thread(self.process, session, light_type)
