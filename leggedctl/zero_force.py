"""Equality constraint that forces the contact force of a swinging foot to zero."""

from __future__ import annotations

import numpy as np

from .friction_cone import ContactFlags, LinearApproximation, contact_forces


class ZeroForceConstraint:
    """``F_i = 0`` while foot ``i`` is not in contact."""

    def __init__(self, contact_flags: ContactFlags, contact_point_index: int) -> None:
        self._contact_flags = contact_flags
        self.contact_point_index = contact_point_index

    def is_active(self, time: float) -> bool:
        """The constraint holds while the foot swings."""
        return not self._contact_flags(time)[self.contact_point_index]

    def get_value(self, time: float, state, u) -> np.ndarray:
        return contact_forces(u, self.contact_point_index)

    def get_linear_approximation(self, time: float, state, u) -> LinearApproximation:
        state = np.asarray(state, dtype=float).reshape(-1)
        u = np.asarray(u, dtype=float).reshape(-1)
        dfdu = np.zeros((3, u.size))
        start = 3 * self.contact_point_index
        dfdu[:, start:start + 3] = np.eye(3)
        return LinearApproximation(
            f=self.get_value(time, state, u),
            dfdx=np.zeros((3, state.size)),
            dfdu=dfdu,
        )