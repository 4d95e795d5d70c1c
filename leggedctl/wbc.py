"""Whole-body control: tasks on joint accelerations, contact forces and torques.

The decision variables are ``x = [qdd, F, tau]``: generalized accelerations,
the three force components of every contact point, and actuated joint torques.
Kinematic quantities (mass matrix, Jacobians, their time derivatives, foot
positions and velocities) are supplied by the caller.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

import numpy as np

from .hoqp import HoQp
from .qp import solve_qp
from .task import Task, concatenate_matrices, concatenate_vectors


@dataclass(frozen=True)
class WbcSettings:
    """Task parameters shared by all whole-body controllers."""

    torque_limits: tuple[float, ...] = field(default_factory=lambda: (35.0, 35.0, 35.0))
    friction_coeff: float = 0.7
    swing_kp: float = 350.0
    swing_kd: float = 37.0

    def __post_init__(self) -> None:
        limits = tuple(float(value) for value in np.asarray(self.torque_limits, dtype=float).reshape(-1))
        if not limits:
            raise ValueError("torque limits must not be empty")
        object.__setattr__(self, "torque_limits", limits)


@dataclass(frozen=True)
class WbcWeights:
    """Weights of the soft tasks of the weighted controller."""

    swing_leg: float = 100.0
    base_accel: float = 1.0
    contact_force: float = 0.01


class WbcBase:
    """Builds the tasks of a whole-body controller for a legged robot."""

    def __init__(self, num_generalized: int, num_contacts: int, num_actuated: int, settings: WbcSettings) -> None:
        if num_generalized < 6 + num_actuated:
            raise ValueError("generalized coordinates must cover a floating base and every actuated joint")
        if num_contacts < 0 or num_actuated < 0:
            raise ValueError("dimensions must not be negative")
        if (2 * num_actuated) % len(settings.torque_limits):
            raise ValueError(
                f"{len(settings.torque_limits)} torque limits cannot be repeated over {num_actuated} joints"
            )
        self.num_generalized = num_generalized
        self.num_contacts = num_contacts
        self.num_actuated = num_actuated
        self.settings = settings
        self._contact_flags: list[bool] = [False] * num_contacts

    @property
    def num_decision_vars(self) -> int:
        """Size of ``[qdd, F, tau]``."""
        return self.num_generalized + 3 * self.num_contacts + self.num_actuated

    @property
    def contact_flags(self) -> list[bool]:
        return list(self._contact_flags)

    @property
    def num_stance(self) -> int:
        """Number of feet currently in contact."""
        return sum(self._contact_flags)

    def set_contact_flags(self, flags: Sequence[bool]) -> None:
        """Set which feet are in stance."""
        flags = [bool(flag) for flag in flags]
        if len(flags) != self.num_contacts:
            raise ValueError(f"expected {self.num_contacts} contact flags, got {len(flags)}")
        self._contact_flags = flags

    def _force_column(self, foot: int) -> int:
        return self.num_generalized + 3 * foot

    def _jacobian(self, j, name: str) -> np.ndarray:
        j = np.asarray(j, dtype=float)
        expected = (3 * self.num_contacts, self.num_generalized)
        if j.shape != expected:
            raise ValueError(f"{name} has shape {j.shape}, expected {expected}")
        return j

    def _velocity(self, v) -> np.ndarray:
        v = np.asarray(v, dtype=float).reshape(-1)
        if v.size != self.num_generalized:
            raise ValueError(f"velocity has {v.size} entries, expected {self.num_generalized}")
        return v

    def _foot_vectors(self, values, name: str) -> np.ndarray:
        values = np.asarray(values, dtype=float)
        if values.shape != (self.num_contacts, 3):
            raise ValueError(f"{name} has shape {values.shape}, expected {(self.num_contacts, 3)}")
        return values

    def formulate_floating_base_eom_task(self, mass_matrix, nle, j) -> Task:
        """``M qdd - J^T F - S^T tau = -nle``."""
        ng, na = self.num_generalized, self.num_actuated
        mass_matrix = np.asarray(mass_matrix, dtype=float)
        if mass_matrix.shape != (ng, ng):
            raise ValueError(f"mass matrix has shape {mass_matrix.shape}, expected {(ng, ng)}")
        nle = np.asarray(nle, dtype=float).reshape(-1)
        if nle.size != ng:
            raise ValueError(f"nonlinear effects have {nle.size} entries, expected {ng}")
        j = self._jacobian(j, "contact jacobian")

        selection = np.zeros((na, ng))
        selection[:, 6:6 + na] = np.eye(na)
        a = np.hstack([mass_matrix, -j.T, -selection.T])
        return Task(a, -nle)

    def formulate_torque_limits_task(self) -> Task:
        """``-limit <= tau <= limit``, the limits repeating over the legs."""
        na = self.num_actuated
        start = self.num_generalized + 3 * self.num_contacts
        d = np.zeros((2 * na, self.num_decision_vars))
        d[:na, start:start + na] = np.eye(na)
        d[na:, start:start + na] = -np.eye(na)
        limits = np.asarray(self.settings.torque_limits)
        f = np.tile(limits, 2 * na // limits.size)
        return Task(np.zeros((0, 0)), np.zeros(0), d, f)

    def formulate_no_contact_motion_task(self, j, dj, v) -> Task:
        """Feet in stance do not accelerate: ``J qdd = -Jdot v``."""
        j = self._jacobian(j, "contact jacobian")
        dj = self._jacobian(dj, "contact jacobian derivative")
        v = self._velocity(v)
        stance = [i for i, flag in enumerate(self._contact_flags) if flag]
        a = np.zeros((3 * len(stance), self.num_decision_vars))
        b = np.zeros(3 * len(stance))
        for row, foot in enumerate(stance):
            rows = slice(3 * row, 3 * row + 3)
            foot_rows = slice(3 * foot, 3 * foot + 3)
            a[rows, :self.num_generalized] = j[foot_rows]
            b[rows] = -dj[foot_rows] @ v
        return Task(a, b)

    def formulate_friction_cone_task(self) -> Task:
        """Swinging feet carry no force; stance forces stay in the friction pyramid."""
        mu = self.settings.friction_coeff
        flags = self._contact_flags
        num_stance = self.num_stance
        num_swing = self.num_contacts - num_stance

        a = np.zeros((3 * num_swing, self.num_decision_vars))
        swing = [i for i, flag in enumerate(flags) if not flag]
        for row, foot in enumerate(swing):
            column = self._force_column(foot)
            a[3 * row:3 * row + 3, column:column + 3] = np.eye(3)
        b = np.zeros(a.shape[0])

        pyramid = np.array(
            [
                [0.0, 0.0, -1.0],
                [1.0, 0.0, -mu],
                [-1.0, 0.0, -mu],
                [0.0, 1.0, -mu],
                [0.0, -1.0, -mu],
            ]
        )
        d = np.zeros((5 * num_stance + 3 * num_swing, self.num_decision_vars))
        stance = [i for i, flag in enumerate(flags) if flag]
        for row, foot in enumerate(stance):
            column = self._force_column(foot)
            d[5 * row:5 * row + 5, column:column + 3] = pyramid
        f = np.zeros(d.shape[0])
        return Task(a, b, d, f)

    def formulate_swing_leg_task(self, j, dj, v, pos_measured, vel_measured, pos_desired, vel_desired) -> Task:
        """Swinging feet track their desired motion with a PD acceleration."""
        j = self._jacobian(j, "contact jacobian")
        dj = self._jacobian(dj, "contact jacobian derivative")
        v = self._velocity(v)
        pos_measured = self._foot_vectors(pos_measured, "measured positions")
        vel_measured = self._foot_vectors(vel_measured, "measured velocities")
        pos_desired = self._foot_vectors(pos_desired, "desired positions")
        vel_desired = self._foot_vectors(vel_desired, "desired velocities")

        swing = [i for i, flag in enumerate(self._contact_flags) if not flag]
        a = np.zeros((3 * len(swing), self.num_decision_vars))
        b = np.zeros(3 * len(swing))
        for row, foot in enumerate(swing):
            accel = self.settings.swing_kp * (pos_desired[foot] - pos_measured[foot]) + self.settings.swing_kd * (
                vel_desired[foot] - vel_measured[foot]
            )
            rows = slice(3 * row, 3 * row + 3)
            foot_rows = slice(3 * foot, 3 * foot + 3)
            a[rows, :self.num_generalized] = j[foot_rows]
            b[rows] = accel - dj[foot_rows] @ v
        return Task(a, b)

    def formulate_contact_force_task(self, input_desired) -> Task:
        """Contact forces follow the forces of the desired input."""
        size = 3 * self.num_contacts
        input_desired = np.asarray(input_desired, dtype=float).reshape(-1)
        if input_desired.size < size:
            raise ValueError(f"desired input has {input_desired.size} entries, expected at least {size}")
        a = np.zeros((size, self.num_decision_vars))
        for foot in range(self.num_contacts):
            column = self._force_column(foot)
            a[3 * foot:3 * foot + 3, column:column + 3] = np.eye(3)
        return Task(a, input_desired[:size])


def solve_weighted(constraints: Task, weighted_task: Task, num_decision_vars: int) -> np.ndarray:
    """Least squares on ``weighted_task`` subject to every row of ``constraints``.

    Equality rows of ``constraints`` hold exactly and its inequality rows bound
    from above.
    """
    n = num_decision_vars
    constraint_a = concatenate_matrices(constraints.a, constraints.d)
    if constraint_a.shape[1] == 0:
        constraint_a = np.zeros((0, n))
    lower = concatenate_vectors(constraints.b, np.full(constraints.f.size, -np.inf))
    upper = concatenate_vectors(constraints.b, constraints.f)

    cost_a = weighted_task.a
    if cost_a.shape[1] == 0:
        h = np.zeros((n, n))
        g = np.zeros(n)
    else:
        if cost_a.shape[1] != n:
            raise ValueError(f"weighted task has {cost_a.shape[1]} columns, expected {n}")
        h = cost_a.T @ cost_a
        g = -cost_a.T @ weighted_task.b
    return solve_qp(h, g, constraint_a, lower, upper)


def solve_hierarchical(tasks: Sequence[Task]) -> np.ndarray:
    """Solve tasks in strict priority, the first one highest."""
    tasks = list(tasks)
    if not tasks:
        raise ValueError("at least one task is needed")
    problem: HoQp | None = None
    for task in tasks:
        problem = HoQp(task, problem)
    return problem.solutions