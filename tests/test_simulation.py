"""
Tests for what-if simulation.

Covers:
- Window scaling (including windows that wrap past midnight)
- Extra therapy-light blocks
- Scenario validation and session matching
"""

import sys
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from chronolight.errors import InvalidInputError
from chronolight.types import SimulationScenario

from helpers import make_session, utc


def scenario_for(session, **overrides) -> SimulationScenario:
    fields = {
        "base_session_id": session.id,
        "name": "test scenario",
        "exposure_change_percent": 0.0,
        "window_start_hour": 0,
        "window_end_hour": 0,
    }
    fields.update(overrides)
    return SimulationScenario(**fields)


class TestScenarioValidation:
    """Tests for SimulationScenario construction."""

    @pytest.mark.parametrize("hour", [-1, 24])
    def test_window_hours_validated(self, hour):
        with pytest.raises(InvalidInputError):
            SimulationScenario("s", "bad", 0.0, hour, 10)
        with pytest.raises(InvalidInputError):
            SimulationScenario("s", "bad", 0.0, 10, hour)

    def test_block_hour_validated(self):
        with pytest.raises(InvalidInputError):
            SimulationScenario("s", "bad", 0.0, 0, 0, extra_block_minutes=30, extra_block_start_hour=25)

    def test_negative_block_minutes(self):
        with pytest.raises(InvalidInputError):
            SimulationScenario("s", "bad", 0.0, 0, 0, extra_block_minutes=-5)

    def test_scale_factor_never_negative(self):
        assert SimulationScenario("s", "x", -150.0, 0, 0).scale_factor == 0.0
        assert SimulationScenario("s", "x", 50.0, 0, 0).scale_factor == 1.5

    def test_has_extra_block(self):
        assert not SimulationScenario("s", "x", 0.0, 0, 0, extra_block_minutes=30).has_extra_block
        assert SimulationScenario(
            "s", "x", 0.0, 0, 0, extra_block_minutes=30, extra_block_start_hour=8
        ).has_extra_block


class TestWindowScaling:
    """Tests for exposure scaling inside the clock-hour window."""

    def test_no_change_reproduces_base(self, engine, pipeline, evening_session):
        base = pipeline.process(evening_session)
        simulated = engine.simulate(evening_session, scenario_for(evening_session))
        assert simulated.total_dose_x == pytest.approx(base.total_dose_x)
        assert simulated.msi_predicted == pytest.approx(base.msi_predicted)
        assert simulated.phase_shift == pytest.approx(base.phase_shift)
        assert simulated.session_id == "evening::sim"

    def test_reduction_lowers_msi(self, engine, pipeline, evening_session):
        base = pipeline.process(evening_session)
        simulated = engine.simulate(
            evening_session,
            scenario_for(evening_session, exposure_change_percent=-50, window_start_hour=19, window_end_hour=23),
        )
        assert simulated.msi_predicted < base.msi_predicted
        assert simulated.lux_values[0] == pytest.approx(50.0)

    def test_window_outside_session_has_no_effect(self, engine, pipeline, evening_session):
        base = pipeline.process(evening_session)
        simulated = engine.simulate(
            evening_session,
            scenario_for(evening_session, exposure_change_percent=-50, window_start_hour=8, window_end_hour=10),
        )
        assert simulated.msi_predicted == pytest.approx(base.msi_predicted)

    def test_window_wraps_midnight(self, engine):
        session = make_session(utc(2026, 3, 10, 23), session_id="late")
        simulated = engine.simulate(
            session,
            scenario_for(session, exposure_change_percent=-100, window_start_hour=22, window_end_hour=2),
        )
        assert simulated.total_dose_x == 0.0
        assert simulated.msi_predicted == 0.0

    def test_window_end_exclusive(self, engine, evening_session):
        """20:00-20:59 is outside a 19-20 window."""
        simulated = engine.simulate(
            evening_session,
            scenario_for(evening_session, exposure_change_percent=-100, window_start_hour=19, window_end_hour=20),
        )
        assert simulated.lux_values[0] == pytest.approx(100.0)

    def test_base_session_unchanged(self, engine, evening_session):
        before = evening_session.samples
        engine.simulate(
            evening_session,
            scenario_for(evening_session, exposure_change_percent=-50, window_start_hour=19, window_end_hour=23),
        )
        assert evening_session.samples == before
        assert evening_session.samples[0].ambient_lux == 100.0

    def test_metadata_records_scenario(self, engine, evening_session):
        simulated = engine.simulate(evening_session, scenario_for(evening_session, name="dim evenings"))
        assert simulated.metadata["scenario"]["name"] == "dim evenings"
        assert simulated.metadata["scenario"]["baseSessionId"] == "evening"

    def test_session_mismatch_raises(self, engine, evening_session):
        scenario = SimulationScenario("another-session", "x", -50.0, 19, 23)
        with pytest.raises(InvalidInputError):
            engine.simulate(evening_session, scenario)


class TestExtraBlock:
    """Tests for inserted therapy-light blocks."""

    def test_morning_block_raises_dose(self, engine, pipeline, noon_session):
        base = pipeline.process(noon_session)
        simulated = engine.simulate(
            noon_session,
            scenario_for(noon_session, extra_block_minutes=30, extra_block_start_hour=8),
        )
        assert simulated.total_dose_x > base.total_dose_x
        assert simulated.phase_shift > base.phase_shift
        assert simulated.start_time.hour == 8
        assert max(simulated.lux_values) == pytest.approx(10000.0)

    def test_block_has_closing_sample(self, engine, noon_session):
        """30 therapy samples plus a dark closing sample outside the recording."""
        session = engine.apply_scenario(
            noon_session,
            scenario_for(noon_session, extra_block_minutes=30, extra_block_start_hour=8),
        )
        therapy = [s for s in session.samples if s.ambient_lux == 10000.0]
        assert len(therapy) == 30
        closing = session.samples[30]
        assert closing.ambient_lux == 0.0
        assert len(session.samples) == 60 + 31

    def test_closing_sample_continues_adjacent_recording(self, engine, noon_session):
        """A block right after the recording closes at the last recorded level."""
        session = engine.apply_scenario(
            noon_session,
            scenario_for(noon_session, extra_block_minutes=30, extra_block_start_hour=13),
        )
        closing = session.samples[-1]
        assert (closing.timestamp.hour, closing.timestamp.minute) == (13, 30)
        assert closing.ambient_lux == pytest.approx(100.0)

    def test_block_never_lowers_msi(self, engine, pipeline):
        """Extra light before an evening recording cannot reduce suppression."""
        evening = make_session(utc(2026, 3, 10, 15), count=540, lux=100.0)
        base = pipeline.process(evening)
        simulated = engine.simulate(
            evening,
            scenario_for(evening, extra_block_minutes=30, extra_block_start_hour=8),
        )
        assert simulated.start_time.hour == 8
        assert simulated.total_dose_x > base.total_dose_x
        assert simulated.msi_predicted >= base.msi_predicted

    def test_block_replaces_overlapping_samples(self, engine, noon_session):
        session = engine.apply_scenario(
            noon_session,
            scenario_for(noon_session, extra_block_minutes=30, extra_block_start_hour=12),
        )
        assert len(session.samples) == 60
        assert all(s.ambient_lux == 10000.0 for s in session.samples[:30])
        assert all(s.ambient_lux == 100.0 for s in session.samples[30:])

    def test_samples_stay_ordered(self, engine, noon_session):
        session = engine.apply_scenario(
            noon_session,
            scenario_for(noon_session, extra_block_minutes=45, extra_block_start_hour=14),
        )
        timestamps = [s.timestamp for s in session.samples]
        assert timestamps == sorted(timestamps)
        assert session.stopped_at >= timestamps[-1]

    def test_block_uses_session_timezone(self, engine):
        """07:00 in New York (EDT) is 11:00 UTC."""
        session = make_session(utc(2026, 3, 10, 12), timezone="America/New_York", session_id="ny")
        modified = engine.apply_scenario(
            session, scenario_for(session, extra_block_minutes=30, extra_block_start_hour=7)
        )
        first = modified.samples[0]
        assert first.ambient_lux == 10000.0
        assert (first.timestamp.hour, first.timestamp.minute) == (11, 0)


class TestComparison:
    """Tests for side-by-side comparison helpers."""

    def test_compare_deltas(self, engine, evening_session):
        comparison = engine.compare(
            evening_session,
            scenario_for(evening_session, exposure_change_percent=-50, window_start_hour=19, window_end_hour=23),
        )
        assert comparison.msi_delta < 0
        assert comparison.dose_delta < 0
        assert comparison.health_score_delta >= 0

    def test_simulate_from_result_keeps_light_type(self, engine, pipeline, evening_session):
        base = pipeline.process(evening_session, "daylight_6500k")
        simulated = engine.simulate_from_result(
            evening_session, base, scenario_for(evening_session)
        )
        assert simulated.light_type == "daylight_6500k"
        assert simulated.total_dose_x == pytest.approx(base.total_dose_x)
