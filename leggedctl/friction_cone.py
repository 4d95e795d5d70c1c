"""Friction cone constraint on the contact force of one foot."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Sequence

import numpy as np

ContactFlags = Callable[[float], Sequence[bool]]


def contact_forces(u, contact_point_index: int) -> np.ndarray:
    """The three force components of one contact point in the input vector."""
    u = np.asarray(u, dtype=float).reshape(-1)
    start = 3 * contact_point_index
    if start + 3 > u.size:
        raise IndexError(f"contact point {contact_point_index} is outside an input of size {u.size}")
    return u[start:start + 3].copy()


@dataclass
class LinearApproximation:
    """Value of a vector function with its first derivatives."""

    f: np.ndarray
    dfdx: np.ndarray
    dfdu: np.ndarray


@dataclass
class QuadraticApproximation:
    """Value of a vector function with first and second derivatives, one per row."""

    f: np.ndarray
    dfdx: np.ndarray
    dfdu: np.ndarray
    dfdxx: list[np.ndarray] = field(default_factory=list)
    dfduu: list[np.ndarray] = field(default_factory=list)
    dfdux: list[np.ndarray] = field(default_factory=list)


@dataclass(frozen=True)
class FrictionConeConfig:
    """Parameters of the smoothed friction cone."""

    friction_coefficient: float = 0.7
    regularization: float = 25.0
    gripper_force: float = 0.0
    hessian_diagonal_shift: float = 1e-6

    def __post_init__(self) -> None:
        if self.friction_coefficient <= 0.0:
            raise ValueError("friction coefficient must be positive")
        if self.regularization <= 0.0:
            raise ValueError("regularization must be positive")
        if self.hessian_diagonal_shift < 0.0:
            raise ValueError("hessian diagonal shift must not be negative")


class FrictionConeConstraint:
    """``mu (F_z + F_grip) - sqrt(F_x^2 + F_y^2 + eps) >= 0`` for a foot in stance."""

    def __init__(self, contact_flags: ContactFlags, config: FrictionConeConfig, contact_point_index: int) -> None:
        self._contact_flags = contact_flags
        self.config = config
        self.contact_point_index = contact_point_index
        self._t_r_w = np.eye(3)

    def is_active(self, time: float) -> bool:
        """The constraint holds while the foot is in contact."""
        return bool(self._contact_flags(time)[self.contact_point_index])

    def cone_constraint(self, local_force) -> np.ndarray:
        """Cone value for a force expressed in the terrain frame."""
        fx, fy, fz = np.asarray(local_force, dtype=float).reshape(3)
        tangent_norm = np.sqrt(fx * fx + fy * fy + self.config.regularization)
        return np.array([self.config.friction_coefficient * (fz + self.config.gripper_force) - tangent_norm])

    def get_value(self, time: float, state, u) -> np.ndarray:
        return self.cone_constraint(self._t_r_w @ contact_forces(u, self.contact_point_index))

    def _cone_local_derivatives(self, local_force: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        fx, fy, _ = local_force
        reg = self.config.regularization
        fx2, fy2 = fx * fx, fy * fy
        tangent_square = fx2 + fy2 + reg
        tangent_norm = np.sqrt(tangent_square)
        pow32 = tangent_norm * tangent_square
        gradient = np.array([-fx / tangent_norm, -fy / tangent_norm, self.config.friction_coefficient])
        hessian = np.zeros((3, 3))
        hessian[0, 0] = -(fy2 + reg) / pow32
        hessian[0, 1] = hessian[1, 0] = fx * fy / pow32
        hessian[1, 1] = -(fx2 + reg) / pow32
        return gradient, hessian

    def _input_derivatives(self, u: np.ndarray) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        forces = contact_forces(u, self.contact_point_index)
        local_force = self._t_r_w @ forces
        d_local, d2_local = self._cone_local_derivatives(local_force)
        dcone_du = d_local @ self._t_r_w
        d2cone_du2 = self._t_r_w.T @ d2_local @ self._t_r_w
        return self.cone_constraint(local_force), dcone_du, d2cone_du2

    def _first_order(self, u: np.ndarray, dcone_du: np.ndarray) -> np.ndarray:
        dfdu = np.zeros((1, u.size))
        start = 3 * self.contact_point_index
        dfdu[0, start:start + 3] = dcone_du
        return dfdu

    def get_linear_approximation(self, time: float, state, u) -> LinearApproximation:
        state = np.asarray(state, dtype=float).reshape(-1)
        u = np.asarray(u, dtype=float).reshape(-1)
        value, dcone_du, _ = self._input_derivatives(u)
        return LinearApproximation(value, np.zeros((1, state.size)), self._first_order(u, dcone_du))

    def get_quadratic_approximation(self, time: float, state, u) -> QuadraticApproximation:
        state = np.asarray(state, dtype=float).reshape(-1)
        u = np.asarray(u, dtype=float).reshape(-1)
        value, dcone_du, d2cone_du2 = self._input_derivatives(u)
        shift = self.config.hessian_diagonal_shift
        start = 3 * self.contact_point_index
        dfduu = np.zeros((u.size, u.size))
        dfduu[start:start + 3, start:start + 3] = d2cone_du2
        dfduu -= shift * np.eye(u.size)
        dfdxx = -shift * np.eye(state.size)
        return QuadraticApproximation(
            f=value,
            dfdx=np.zeros((1, state.size)),
            dfdu=self._first_order(u, dcone_du),
            dfdxx=[dfdxx],
            dfduu=[dfduu],
            dfdux=[np.zeros((u.size, state.size))],
        )