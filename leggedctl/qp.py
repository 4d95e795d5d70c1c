"""Dense convex quadratic programming with two-sided linear constraints."""

from __future__ import annotations

import numpy as np
from scipy.optimize import minimize

_FEASIBILITY_TOL = 1e-6


class QpError(RuntimeError):
    """Raised when a quadratic program has no feasible solution."""


def _objective(h: np.ndarray, g: np.ndarray, x: np.ndarray) -> float:
    return float(0.5 * x @ h @ x + g @ x)


def _rhs_scale(*vectors: np.ndarray) -> float:
    finite = [np.abs(v).max() for v in vectors if v.size]
    return 1.0 + (max(finite) if finite else 0.0)


def _run_slsqp(h, g, eq_a, eq_b, ineq_a, ineq_b) -> np.ndarray:
    constraints = []
    if eq_a.shape[0]:
        constraints.append(
            {"type": "eq", "fun": lambda x: eq_a @ x - eq_b, "jac": lambda x: eq_a}
        )
    if ineq_a.shape[0]:
        constraints.append(
            {"type": "ineq", "fun": lambda x: ineq_b - ineq_a @ x, "jac": lambda x: -ineq_a}
        )
    result = minimize(
        lambda x: _objective(h, g, x),
        np.zeros(g.size),
        jac=lambda x: h @ x + g,
        method="SLSQP",
        constraints=constraints,
        options={"ftol": 1e-14, "maxiter": 1000},
    )
    x = np.asarray(result.x, dtype=float)
    if not np.all(np.isfinite(x)):
        raise QpError(f"solver failed: {result.message}")
    return x


def _polish(h, g, eq_a, eq_b, ineq_a, ineq_b, x) -> np.ndarray:
    """Refine ``x`` by solving the KKT system of its active set."""
    n = g.size
    tol = 1e-7 * _rhs_scale(eq_b, ineq_b)
    active = ineq_a @ x - ineq_b > -tol
    constraint_a = np.vstack([eq_a, ineq_a[active]])
    constraint_b = np.concatenate([eq_b, ineq_b[active]])
    k = constraint_a.shape[0]
    kkt = np.zeros((n + k, n + k))
    kkt[:n, :n] = h
    kkt[:n, n:] = constraint_a.T
    kkt[n:, :n] = constraint_a
    rhs = np.concatenate([-g, constraint_b])
    solution = np.linalg.lstsq(kkt, rhs, rcond=None)[0]
    if np.linalg.norm(kkt @ solution - rhs) > 1e-8 * (1.0 + np.linalg.norm(rhs)):
        return x
    candidate = solution[:n]
    multipliers = solution[n + eq_a.shape[0]:]
    if np.any(multipliers < -tol):
        return x
    if ineq_a.shape[0] and np.any(ineq_a @ candidate - ineq_b > tol):
        return x
    current = _objective(h, g, x)
    if _objective(h, g, candidate) > current + 1e-9 * (1.0 + abs(current)):
        return x
    return candidate


def solve_qp(h, g, a=None, lower_a=None, upper_a=None) -> np.ndarray:
    """Minimise ``0.5 x'hx + g'x`` subject to ``lower_a <= a x <= upper_a``.

    A missing bound vector means no bound on that side; rows whose lower and
    upper bounds coincide are treated as equalities.
    """
    g = np.asarray(g, dtype=float).reshape(-1)
    n = g.size
    h = np.asarray(h, dtype=float)
    if h.size == 0 and n == 0:
        h = np.zeros((0, 0))
    if h.shape != (n, n):
        raise ValueError(f"hessian shape {h.shape} does not match {n} variables")

    a = np.zeros((0, n)) if a is None else np.asarray(a, dtype=float)
    if a.size == 0:
        a = a.reshape(a.shape[0] if a.ndim == 2 else 0, n)
    if a.ndim != 2 or a.shape[1] != n:
        raise ValueError(f"constraint matrix shape {a.shape} does not match {n} variables")
    m = a.shape[0]

    lower = np.full(m, -np.inf) if lower_a is None else np.asarray(lower_a, dtype=float).reshape(-1)
    upper = np.full(m, np.inf) if upper_a is None else np.asarray(upper_a, dtype=float).reshape(-1)
    if lower.size != m or upper.size != m:
        raise ValueError(f"bounds must have {m} entries")
    if np.any(lower > upper) or np.any(upper == -np.inf) or np.any(lower == np.inf):
        raise QpError("constraint bounds admit no value")

    equal = lower == upper
    upper_rows = ~equal & np.isfinite(upper)
    lower_rows = ~equal & np.isfinite(lower)
    eq_a, eq_b = a[equal], upper[equal]
    ineq_a = np.vstack([a[upper_rows], -a[lower_rows]])
    ineq_b = np.concatenate([upper[upper_rows], -lower[lower_rows]])
    hs = 0.5 * (h + h.T)

    if n == 0:
        x = np.zeros(0)
    else:
        x = _run_slsqp(hs, g, eq_a, eq_b, ineq_a, ineq_b)
        x = _polish(hs, g, eq_a, eq_b, ineq_a, ineq_b, x)

    violation = 0.0
    if ineq_a.shape[0]:
        violation = max(violation, float(np.max(ineq_a @ x - ineq_b)))
    if eq_a.shape[0]:
        violation = max(violation, float(np.max(np.abs(eq_a @ x - eq_b))))
    if violation > _FEASIBILITY_TOL * _rhs_scale(eq_b, ineq_b):
        raise QpError(f"problem is infeasible (violation {violation:.3g})")
    return x