"""
What-if simulation of a recorded session.

A scenario rewrites the base session's samples and the rewritten session is
run through the same processing pipeline as real recordings:

1. Scale ambient lux inside a clock-hour window (e.g., -50% from 19 to 23)
2. Optionally insert a block of bright therapy light (e.g., 30 min at 8 AM)

The base session is never modified.
"""

import statistics
from dataclasses import replace
from datetime import datetime, timedelta

from loguru import logger

from .circadian_math import format_iso, hour_in_window, local_hour, localize_clock_time
from .config import DEFAULT_LIGHT_TYPE, DEFAULT_SIMULATION, SimulationParameters
from .errors import InvalidInputError
from .pipeline import ProcessingPipeline
from .types import LightSample, ResultsModel, Session, SimulationComparison, SimulationScenario

SIMULATED_ID_SUFFIX = "::sim"


def median_sample_interval(session: Session, default: timedelta) -> timedelta:
    """Median positive gap between consecutive samples, or `default`."""
    gaps = [
        following.timestamp - current.timestamp
        for current, following in zip(session.samples, session.samples[1:])
        if following.timestamp > current.timestamp
    ]
    if not gaps:
        return default
    return statistics.median_low(gaps)


def _surrounding_lux(samples: list[LightSample], moment: datetime, interval: timedelta) -> float:
    """Ambient lux of a sample within one interval before `moment`, else 0 (unrecorded)."""
    before = [s for s in samples if moment - interval <= s.timestamp < moment]
    return before[-1].ambient_lux if before else 0.0


class SimulationEngine:
    """Applies scenarios to sessions and reprocesses them."""

    def __init__(
        self,
        pipeline: ProcessingPipeline | None = None,
        parameters: SimulationParameters = DEFAULT_SIMULATION,
    ):
        self.pipeline = pipeline or ProcessingPipeline()
        self.parameters = parameters

    def apply_scenario(self, base_session: Session, scenario: SimulationScenario) -> Session:
        """
        Build the modified session for a scenario.

        Args:
            base_session: Recorded session (unchanged)
            scenario: Scenario targeting that session

        Returns:
            New Session with the same id, timezone and meta

        Raises:
            InvalidInputError: If the scenario targets another session
        """
        if scenario.base_session_id != base_session.id:
            raise InvalidInputError(
                f"Scenario {scenario.name!r} targets session {scenario.base_session_id!r}, "
                f"not {base_session.id!r}"
            )

        factor = scenario.scale_factor
        tz_name = base_session.timezone
        samples = [
            replace(sample, ambient_lux=sample.ambient_lux * factor)
            if hour_in_window(
                local_hour(sample.timestamp, tz_name),
                scenario.window_start_hour,
                scenario.window_end_hour,
            )
            else sample
            for sample in base_session.samples
        ]

        started_at = base_session.started_at
        stopped_at = base_session.stopped_at

        if scenario.has_extra_block:
            interval = median_sample_interval(
                base_session, timedelta(minutes=self.parameters.default_interval_minutes)
            )
            block_start = localize_clock_time(
                base_session.started_at, scenario.extra_block_start_hour, tz_name
            )
            block_end = block_start + timedelta(minutes=scenario.extra_block_minutes)

            samples = self._insert_block(samples, block_start, block_end, interval)
            started_at = min(started_at, block_start)
            stopped_at = max(stopped_at, samples[-1].timestamp)

        return Session(
            id=base_session.id,
            started_at=started_at,
            stopped_at=stopped_at,
            samples=tuple(samples),
            meta=base_session.meta,
            timezone=tz_name,
        )

    def _insert_block(
        self,
        samples: list[LightSample],
        block_start: datetime,
        block_end: datetime,
        interval: timedelta,
    ) -> list[LightSample]:
        """Replace samples inside [block_start, block_end) with therapy-level samples."""
        count = max(1, round((block_end - block_start) / interval))
        block = [
            LightSample(
                timestamp=block_start + interval * i,
                ambient_lux=self.parameters.therapy_lux,
                screen_on=False,
            )
            for i in range(count)
            if i == 0 or block_start + interval * i < block_end
        ]

        kept = [s for s in samples if not block_start <= s.timestamp < block_end]

        # Without a closing sample the last therapy sample would be credited
        # until the next recorded sample. Outside the recording it is dark.
        resumes = any(block_end <= s.timestamp <= block_end + interval for s in kept)
        if not resumes:
            block.append(
                LightSample(
                    timestamp=block_end,
                    ambient_lux=_surrounding_lux(kept, block_start, interval),
                    screen_on=False,
                )
            )

        logger.debug(
            "Inserted {} therapy samples at {:.0f} lux from {} to {}",
            len(block), self.parameters.therapy_lux, format_iso(block_start), format_iso(block_end),
        )
        return sorted(kept + block, key=lambda s: s.timestamp)

    def simulate(
        self,
        base_session: Session,
        scenario: SimulationScenario,
        light_type: str = DEFAULT_LIGHT_TYPE,
    ) -> ResultsModel:
        """
        Run a scenario and return the simulated results.

        The result's session id is the base id with a "::sim" suffix and its
        metadata records the scenario that produced it.
        """
        session = self.apply_scenario(base_session, scenario)
        # Hours added around the recording carry no measured light
        results = self.pipeline.process(
            session, light_type, reference_duration_hours=base_session.duration_hours
        )

        metadata = dict(results.metadata or {})
        metadata["scenario"] = {
            "name": scenario.name,
            "baseSessionId": scenario.base_session_id,
            "exposureChangePercent": scenario.exposure_change_percent,
            "windowStartHour": scenario.window_start_hour,
            "windowEndHour": scenario.window_end_hour,
            "extraBlockMinutes": scenario.extra_block_minutes,
            "extraBlockStartHour": scenario.extra_block_start_hour,
        }

        logger.info(
            "Simulated {!r} on session {}: MSI {:.3f}, dose {:.3f} CS-h",
            scenario.name, base_session.id, results.msi_predicted, results.total_dose_x,
        )
        return replace(
            results,
            session_id=f"{base_session.id}{SIMULATED_ID_SUFFIX}",
            metadata=metadata,
        )

    def simulate_from_result(
        self,
        base_session: Session,
        base_result: ResultsModel,
        scenario: SimulationScenario,
    ) -> ResultsModel:
        """Simulate with the light type already resolved for the base result."""
        return self.simulate(base_session, scenario, light_type=base_result.light_type)

    def compare(
        self,
        base_session: Session,
        scenario: SimulationScenario,
        light_type: str = DEFAULT_LIGHT_TYPE,
    ) -> SimulationComparison:
        """Process the base session and the scenario side by side."""
        return SimulationComparison(
            base=self.pipeline.process(base_session, light_type),
            simulated=self.simulate(base_session, scenario, light_type),
        )
