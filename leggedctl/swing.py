"""Swing phase bookkeeping for feet that follow a gait's mode schedule."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence


class SwingScheduleError(RuntimeError):
    """Raised when a swing phase has no defined lift-off or touch-down time."""


@dataclass(frozen=True)
class SwingTrajectoryConfig:
    """Shape parameters of the vertical swing trajectory of a foot."""

    lift_off_velocity: float = 0.0
    touch_down_velocity: float = 0.0
    swing_height: float = 0.1
    swing_time_scale: float = 0.15

    def __post_init__(self) -> None:
        if self.swing_time_scale <= 0.0:
            raise ValueError("swing time scale must be positive")


def find_index(index: int, contact_flags: Sequence[bool]) -> tuple[int, int]:
    """Phase indices that bound the swing containing phase ``index``.

    The start is the last stance phase before ``index`` (``-1`` if there is
    none); the end is the last swing phase of the run (the final phase if the
    run never ends). A stance phase yields ``(0, 0)``.
    """
    flags = list(contact_flags)
    if not 0 <= index < len(flags):
        raise IndexError(f"phase {index} is outside a schedule of {len(flags)} phases")
    if flags[index]:
        return 0, 0

    start = next((ip for ip in range(index - 1, -1, -1) if flags[ip]), -1)
    final = next((ip - 1 for ip in range(index + 1, len(flags)) if flags[ip]), len(flags) - 1)
    return start, final


def update_foot_schedule(contact_flags: Sequence[bool]) -> tuple[list[int], list[int]]:
    """Start and final swing indices for every phase of one foot; stance phases get 0."""
    flags = list(contact_flags)
    bounds = [find_index(i, flags) for i in range(len(flags))]
    starts = [start for start, _ in bounds]
    finals = [final for _, final in bounds]
    return starts, finals


def _describe_schedule(index: int, phase_ids: Sequence[int]) -> str:
    phases = ",  ".join(f"[{i}]: {mode}" for i, mode in enumerate(phase_ids))
    return f"Subsystem: {index} out of {len(phase_ids) - 1}\n{phases}"


def check_indices_valid(
    leg: int, index: int, start_index: int, final_index: int, phase_ids: Sequence[int]
) -> None:
    """Raise if the swing at ``index`` starts before or ends after the schedule."""
    phase_ids = list(phase_ids)
    num_subsystems = len(phase_ids)
    if start_index < 0:
        raise SwingScheduleError(
            f"The time of take-off for the first swing of the EE with ID {leg} is not defined.\n"
            + _describe_schedule(index, phase_ids)
        )
    if final_index >= num_subsystems - 1:
        raise SwingScheduleError(
            f"The time of touch-down for the last swing of the EE with ID {leg} is not defined.\n"
            + _describe_schedule(index, phase_ids)
        )


def swing_trajectory_scaling(start_time: float, final_time: float, swing_time_scale: float) -> float:
    """Shrink factor for short swings, capped at one."""
    return min(1.0, (final_time - start_time) / swing_time_scale)


def max_height_sequence(
    lift_off_heights: Sequence[Sequence[float]], touch_down_heights: Sequence[Sequence[float]]
) -> list[list[float]]:
    """Per foot and phase, the higher of the lift-off and touch-down heights."""
    if len(lift_off_heights) != len(touch_down_heights):
        raise ValueError("lift-off and touch-down heights cover different numbers of feet")
    result = []
    for lift_off, touch_down in zip(lift_off_heights, touch_down_heights):
        if len(lift_off) != len(touch_down):
            raise ValueError("lift-off and touch-down heights cover different numbers of phases")
        result.append([max(lo, td) for lo, td in zip(lift_off, touch_down)])
    return result