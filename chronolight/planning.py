"""
Chronotherapy plan generation.

Turns processed results into actionable guidance:
- TherapyPlanner: one session -> plan driven by MSI, phase shift and timing
- MultiDayPlanner: several sessions -> plan driven by the accumulated shift

Plans are advisory text, not clinical prescriptions.
"""

import math
from collections.abc import Sequence

from .circadian_math import clamp, local_hour
from .science.clock import ClockModel, ClockState
from .science.prc import MINIMAL_SHIFT_HOURS
from .types import ChronoPlan, ResultsModel

# Shifts beyond this many hours set the plan's headline goal
SIGNIFICANT_SHIFT_HOURS = 0.25

# Multi-day thresholds on the accumulated shift (hours)
MULTI_DAY_SHIFT_HOURS = 0.5
MULTI_DAY_LARGE_SHIFT_HOURS = 1.5


def _is_biological_night(hour: int) -> bool:
    """Evening/night window used for plan wording (7 PM - 4 AM)."""
    return hour >= 19 or hour < 4


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


class TherapyPlanner:
    """Single-session plan."""

    def generate_plan(self, results: ResultsModel) -> ChronoPlan:
        """
        Generate a plan from one session's results.

        The session's local start hour stands in for the user's current
        schedule.

        Args:
            results: Processed session results

        Returns:
            ChronoPlan with one recommendation per section
        """
        msi = results.msi_predicted
        shift = results.phase_shift
        hour = local_hour(results.start_time, results.timezone)

        return ChronoPlan(
            title=self._title(shift, hour),
            description=self._description(msi, shift, hour),
            morning_light_block=self._morning_light_block(shift),
            evening_dim_block=self._evening_dim_block(msi, hour),
            ideal_bedtime=self._ideal_bedtime(hour, shift),
            screen_guidance=self._screen_guidance(msi, hour),
            recovery_timeline=self._recovery_timeline(shift),
        )

    @staticmethod
    def _title(shift: float, hour: int) -> str:
        if shift > SIGNIFICANT_SHIFT_HOURS:
            return "Advance your sleep phase"
        if shift < -SIGNIFICANT_SHIFT_HOURS:
            return "Reduce late-night circadian delay"
        if _is_biological_night(hour):
            return "Protect your biological night"
        return "Maintain healthy circadian light exposure"

    @staticmethod
    def _description(msi: float, shift: float, hour: int) -> str:
        parts = [f"This session produced an estimated {msi * 100:.1f}% melatonin suppression"]

        if abs(shift) >= MINIMAL_SHIFT_HOURS:
            minutes = _round_half_up(abs(shift) * 60)
            direction = "earlier" if shift > 0 else "later"
            parts.append(f" and shifted your circadian phase about {minutes} minutes {direction}. ")
        else:
            parts.append(" with minimal direct phase-shifting effect. ")

        if _is_biological_night(hour):
            parts.append(
                "Because this occurred during your biological evening or night, the focus is on "
                "reducing disruptive light before bed and strengthening your morning light signal."
            )
        elif 4 <= hour < 11:
            parts.append(
                "Because this exposure occurred in the morning window, it can be used to gently "
                "advance your clock and anchor your day."
            )
        else:
            parts.append(
                "Daytime exposure is generally helpful; the main goal is to avoid strong "
                "circadian light at night and secure consistent morning light."
            )

        return "".join(parts)

    @staticmethod
    def _morning_light_block(shift: float) -> str:
        if shift < -MINIMAL_SHIFT_HOURS:
            return (
                "Aim for 30-45 minutes of bright light (>=1,000 lux; outdoor light or a bright "
                "window) between 07:00 and 09:00 to counteract the delay."
            )
        if shift > MINIMAL_SHIFT_HOURS:
            return (
                "Maintain 20-30 minutes of bright light (>=1,000 lux) between 07:00 and 09:00 "
                "to support an earlier sleep schedule."
            )
        return (
            "Target 20-30 minutes of bright light (>=1,000 lux) in the first 2 hours after "
            "waking to keep your circadian clock stable."
        )

    @staticmethod
    def _evening_dim_block(msi: float, hour: int) -> str:
        if hour >= 19 or hour < 1 or msi > 0.2:
            return (
                'Create a "dim light zone": keep melanopic lux below 20 (very dim, warm light) '
                "starting 2-3 hours before your target bedtime."
            )
        return "In the 2 hours before bed, prefer warm, low-intensity light and avoid bright overhead lighting."

    @staticmethod
    def _ideal_bedtime(hour: int, shift: float) -> str:
        if hour < 18:
            target = 23  # Daytime recording: assume a ~23:00 bedtime
        elif hour < 22:
            target = (hour + 3) % 24
        else:
            target = (hour + 1) % 24

        # Lean against the predicted shift, at most one hour
        target = _round_half_up(target + clamp(-shift, -1.0, 1.0)) % 24
        return f"Aim for a consistent bedtime around {target:02d}:00 each night."

    @staticmethod
    def _screen_guidance(msi: float, hour: int) -> str:
        if not _is_biological_night(hour):
            return "Use screens freely in daytime, but avoid carrying heavy screen use into the late evening."
        if msi > 0.2:
            return (
                "Avoid blue-rich screens (phones, laptops, TVs) in the 2-3 hours before bed. "
                "If you must use screens, enable strong blue-light filters or use amber glasses."
            )
        return "Try to keep screens out of bed and finish stimulating content at least 1 hour before sleep."

    @staticmethod
    def _recovery_timeline(shift: float) -> str:
        magnitude = abs(shift)
        if magnitude < MINIMAL_SHIFT_HOURS:
            return "With consistent light hygiene, your circadian rhythm should remain stable over the coming week."
        if magnitude < 0.5:
            return "With the suggested plan, expect your internal clock to realign over ~3-5 days of consistent timing."
        return (
            "Larger phase shifts typically require 5-10 days of consistent light timing and "
            "sleep schedule to fully stabilize."
        )


NOT_ENOUGH_DATA_PLAN = ChronoPlan(
    title="Not enough data",
    description="Record several sessions across different days to generate a multi-day chronotherapy plan.",
    morning_light_block="Aim for 20-30 minutes of bright light in the first 2 hours after waking.",
    evening_dim_block="Keep light dim and warm in the 2-3 hours before bedtime.",
    ideal_bedtime="Keep a consistent bedtime and wake time.",
    screen_guidance="Avoid bright screens in bed; finish stimulating content at least 1 hour before sleep.",
    recovery_timeline="Once more sessions are recorded, the days needed for realignment can be estimated.",
)


class MultiDayPlanner:
    """Plan from a chronological history of results."""

    def __init__(self, clock_model: ClockModel | None = None):
        self.clock_model = clock_model or ClockModel()

    def accumulate(self, history: Sequence[ResultsModel]) -> ClockState:
        """Clock state after applying every session's phase shift in order."""
        state = ClockState()
        for results in history:
            state = self.clock_model.apply_shift(state, results.phase_shift)
        return state

    def plan_from_history(self, history: Sequence[ResultsModel]) -> ChronoPlan:
        """
        Generate a multi-day plan.

        Args:
            history: Results in chronological order

        Returns:
            ChronoPlan; NOT_ENOUGH_DATA_PLAN when the history is empty
        """
        if not history:
            return NOT_ENOUGH_DATA_PLAN

        net_shift = self.accumulate(history).phase_offset_hours
        magnitude = abs(net_shift)

        if net_shift > MULTI_DAY_SHIFT_HOURS:
            title = "Advance your circadian phase over several days"
        elif net_shift < -MULTI_DAY_SHIFT_HOURS:
            title = "Correct a delayed circadian phase over several days"
        else:
            title = "Stabilize your circadian rhythm"

        if magnitude < MULTI_DAY_SHIFT_HOURS:
            recovery = "With consistent light timing, you should stabilize within 3-5 days."
        elif magnitude < MULTI_DAY_LARGE_SHIFT_HOURS:
            recovery = "Expect 5-10 days of consistent behavior to bring your clock closer to local time."
        else:
            recovery = "For larger shifts, plan on 10-14 days of structured light exposure and sleep timing."

        return ChronoPlan(
            title=title,
            description=(
                "Based on your recent recordings, your internal clock appears to be shifted by "
                f"{_round_half_up(net_shift * 60)} minutes relative to local time. "
                "This plan uses repeated morning light and evening dimming to gradually realign it."
            ),
            morning_light_block=(
                "For the next 7-10 days, get 30-45 minutes of bright light (>=1,000 lux) "
                "within 1-2 hours of waking. Outdoor daylight works best."
            ),
            evening_dim_block=(
                'Each evening, create a "dim light zone" starting 2-3 hours before your target '
                "bedtime: use warm, low-intensity lighting and minimize overhead lights."
            ),
            ideal_bedtime="Choose a target bedtime and wake time that you can keep consistent for at least a week.",
            screen_guidance=(
                "Stop using bright screens 1-2 hours before bed, or use strong blue-light "
                "filters or amber glasses."
            ),
            recovery_timeline=recovery,
        )
