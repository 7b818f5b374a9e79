"""
Cumulative circadian clock state across sessions.
"""

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class ClockState:
    """Internal phase offset relative to local time."""

    phase_offset_hours: float = 0.0  # Positive = clock ahead (advanced)


class ClockModel:
    """Accumulates predicted phase shifts into a clock state."""

    def apply_shift(self, state: ClockState, shift_hours: float) -> ClockState:
        return replace(state, phase_offset_hours=state.phase_offset_hours + shift_hours)
