"""
Tests for chronotherapy plan generation.
"""

import sys
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from chronolight.planning import NOT_ENOUGH_DATA_PLAN, MultiDayPlanner, TherapyPlanner

from helpers import make_results, utc


@pytest.fixture
def planner():
    return TherapyPlanner()


class TestTherapyPlanner:
    """Tests for single-session plans."""

    def test_advance_title(self, planner):
        plan = planner.generate_plan(make_results(utc(2026, 3, 10, 8), phase_shift=0.5))
        assert plan.title == "Advance your sleep phase"

    def test_delay_title(self, planner):
        plan = planner.generate_plan(make_results(utc(2026, 3, 10, 22), phase_shift=-0.5))
        assert plan.title == "Reduce late-night circadian delay"
        assert "counteract the delay" in plan.morning_light_block

    def test_night_without_shift(self, planner):
        plan = planner.generate_plan(make_results(utc(2026, 3, 10, 21), msi=0.05))
        assert plan.title == "Protect your biological night"
        assert "minimal direct phase-shifting effect" in plan.description
        assert "00:00" in plan.ideal_bedtime

    def test_daytime_maintenance(self, planner):
        plan = planner.generate_plan(make_results(utc(2026, 3, 10, 13)))
        assert plan.title == "Maintain healthy circadian light exposure"
        assert "23:00" in plan.ideal_bedtime
        assert plan.screen_guidance.startswith("Use screens freely")

    def test_description_reports_msi_and_shift(self, planner):
        plan = planner.generate_plan(make_results(utc(2026, 3, 10, 8), msi=0.123, phase_shift=0.5))
        assert "12.3%" in plan.description
        assert "30 minutes earlier" in plan.description

    def test_high_evening_suppression_screen_guidance(self, planner):
        plan = planner.generate_plan(make_results(utc(2026, 3, 10, 21), msi=0.3))
        assert "amber glasses" in plan.screen_guidance
        assert "dim light zone" in plan.evening_dim_block

    def test_uses_local_start_hour(self, planner):
        """12:00 UTC is 21:00 in Tokyo."""
        plan = planner.generate_plan(make_results(utc(2026, 3, 10, 12), timezone="Asia/Tokyo"))
        assert plan.title == "Protect your biological night"

    @pytest.mark.parametrize(
        "shift,fragment",
        [(0.05, "remain stable"), (0.3, "3-5 days"), (-1.0, "5-10 days")],
    )
    def test_recovery_timeline(self, planner, shift, fragment):
        plan = planner.generate_plan(make_results(utc(2026, 3, 10, 12), phase_shift=shift))
        assert fragment in plan.recovery_timeline


class TestMultiDayPlanner:
    """Tests for history-based plans."""

    def test_empty_history(self):
        assert MultiDayPlanner().plan_from_history([]) is NOT_ENOUGH_DATA_PLAN

    def test_accumulates_shifts(self):
        history = [make_results(utc(2026, 3, d, 8), phase_shift=0.4) for d in (10, 11)]
        planner = MultiDayPlanner()
        assert planner.accumulate(history).phase_offset_hours == pytest.approx(0.8)
        plan = planner.plan_from_history(history)
        assert plan.title == "Advance your circadian phase over several days"
        assert "48 minutes" in plan.description
        assert "5-10 days" in plan.recovery_timeline

    def test_large_delay(self):
        history = [make_results(utc(2026, 3, d, 22), phase_shift=-1.0) for d in (10, 11)]
        plan = MultiDayPlanner().plan_from_history(history)
        assert plan.title == "Correct a delayed circadian phase over several days"
        assert "10-14 days" in plan.recovery_timeline

    def test_balanced_history_stabilizes(self):
        history = [
            make_results(utc(2026, 3, 10, 8), phase_shift=0.3),
            make_results(utc(2026, 3, 10, 22), phase_shift=-0.3),
        ]
        plan = MultiDayPlanner().plan_from_history(history)
        assert plan.title == "Stabilize your circadian rhythm"
        assert "3-5 days" in plan.recovery_timeline
