"""Prioritised tasks made of equality and inequality rows on the decision variables."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np


def _as_matrix(value) -> np.ndarray:
    matrix = np.asarray(value, dtype=float)
    if matrix.ndim == 2:
        return matrix
    if matrix.size == 0:
        return matrix.reshape(0, 0)
    raise ValueError(f"expected a two-dimensional matrix, got shape {matrix.shape}")


def _as_vector(value) -> np.ndarray:
    vector = np.asarray(value, dtype=float)
    if vector.ndim <= 1:
        return vector.reshape(-1)
    if vector.ndim == 2 and 1 in vector.shape:
        return vector.reshape(-1)
    raise ValueError(f"expected a vector, got shape {vector.shape}")


def concatenate_matrices(m1, m2) -> np.ndarray:
    """Stack two matrices vertically; a matrix without columns counts as absent."""
    m1 = _as_matrix(m1)
    m2 = _as_matrix(m2)
    if m1.shape[1] == 0:
        return m2
    if m2.shape[1] == 0:
        return m1
    if m1.shape[1] != m2.shape[1]:
        raise ValueError(f"column count mismatch: {m1.shape[1]} and {m2.shape[1]}")
    return np.vstack([m1, m2])


def concatenate_vectors(v1, v2) -> np.ndarray:
    """Join two vectors end to end."""
    return np.concatenate([_as_vector(v1), _as_vector(v2)])


@dataclass(eq=False)
class Task:
    """A task ``a x = b`` together with ``d x <= f``."""

    a: np.ndarray = field(default_factory=lambda: np.zeros((0, 0)))
    b: np.ndarray = field(default_factory=lambda: np.zeros(0))
    d: np.ndarray = field(default_factory=lambda: np.zeros((0, 0)))
    f: np.ndarray = field(default_factory=lambda: np.zeros(0))

    def __post_init__(self) -> None:
        self.a = _as_matrix(self.a)
        self.b = _as_vector(self.b)
        self.d = _as_matrix(self.d)
        self.f = _as_vector(self.f)

    @classmethod
    def empty(cls, num_decision_vars: int) -> "Task":
        """A task with no rows over ``num_decision_vars`` variables."""
        return cls(
            np.zeros((0, num_decision_vars)),
            np.zeros(0),
            np.zeros((0, num_decision_vars)),
            np.zeros(0),
        )

    def __add__(self, other: "Task") -> "Task":
        if not isinstance(other, Task):
            return NotImplemented
        return Task(
            concatenate_matrices(self.a, other.a),
            concatenate_vectors(self.b, other.b),
            concatenate_matrices(self.d, other.d),
            concatenate_vectors(self.f, other.f),
        )

    def __mul__(self, scalar: float) -> "Task":
        if isinstance(scalar, Task):
            return NotImplemented
        scalar = float(scalar)
        return Task(scalar * self.a, scalar * self.b, scalar * self.d, scalar * self.f)

    __rmul__ = __mul__