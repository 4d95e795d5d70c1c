"""Hierarchical optimisation: each task is solved in the null space of those above it."""

from __future__ import annotations

import numpy as np
from scipy.linalg import null_space

from .qp import solve_qp
from .task import Task, concatenate_vectors


def _kernel(matrix: np.ndarray) -> np.ndarray:
    if matrix.shape[1] == 0:
        return np.zeros((0, 0))
    return null_space(matrix)


class HoQp:
    """One priority level of a hierarchical quadratic program.

    Equality rows of the task enter the cost, inequality rows are relaxed by
    slack variables; everything fixed by higher levels is kept as is.
    """

    def __init__(self, task: Task, higher_problem: "HoQp | None" = None) -> None:
        self._task = task
        self._higher = higher_problem

        if higher_problem is not None:
            z_prev = higher_problem.stacked_z_matrix
            tasks_prev = higher_problem.stacked_tasks
            slack_prev = higher_problem.stacked_slack_solutions
            x_prev = higher_problem.solutions
            num_decision = z_prev.shape[1]
        else:
            num_decision = max(task.a.shape[1], task.d.shape[1])
            tasks_prev = Task.empty(num_decision)
            z_prev = np.eye(num_decision)
            slack_prev = np.zeros(0)
            x_prev = np.zeros(num_decision)

        num_slack = task.d.shape[0]
        num_prev_slack = tasks_prev.d.shape[0]
        has_eq = task.a.shape[0] > 0
        has_ineq = num_slack > 0

        self._z_prev = z_prev
        self._x_prev = x_prev
        self._stacked_tasks = task + tasks_prev

        size = num_decision + num_slack
        h = np.zeros((size, size))
        c = np.zeros(size)
        if has_eq:
            a_z = task.a @ z_prev
            h[:num_decision, :num_decision] = a_z.T @ a_z + 1e-12 * np.eye(num_decision)
            c[:num_decision] = a_z.T @ (task.a @ x_prev - task.b)
        h[num_decision:, num_decision:] = np.eye(num_slack)

        d = np.zeros((2 * num_slack + num_prev_slack, size))
        d[:num_slack, num_decision:] = -np.eye(num_slack)
        d[num_slack:num_slack + num_prev_slack, :num_decision] = tasks_prev.d @ z_prev
        prev_rhs = tasks_prev.f - tasks_prev.d @ x_prev
        if prev_rhs.size != slack_prev.size:
            raise ValueError("slack solutions of the higher levels do not match their tasks")
        prev_rhs = prev_rhs + slack_prev
        if has_ineq:
            d[num_slack + num_prev_slack:, :num_decision] = task.d @ z_prev
            d[num_slack + num_prev_slack:, num_decision:] = -np.eye(num_slack)
            current_rhs = task.f - task.d @ x_prev
        else:
            current_rhs = np.zeros(0)
        f = np.concatenate([np.zeros(num_slack), prev_rhs, current_rhs])

        solution = solve_qp(h, c, d, None, f)
        self._decision = solution[:num_decision]
        slack = solution[num_decision:]

        if has_eq:
            self._stacked_z = z_prev @ _kernel(task.a @ z_prev)
        else:
            self._stacked_z = z_prev

        if higher_problem is not None:
            self._stacked_slack = concatenate_vectors(higher_problem.stacked_slack_solutions, slack)
        else:
            self._stacked_slack = slack

    @property
    def stacked_z_matrix(self) -> np.ndarray:
        """Basis of the null space left free by this and all higher levels."""
        return self._stacked_z

    @property
    def stacked_tasks(self) -> Task:
        """This task stacked on top of all higher-level tasks."""
        return self._stacked_tasks

    @property
    def stacked_slack_solutions(self) -> np.ndarray:
        """Slack values of the higher levels followed by this level's."""
        return self._stacked_slack

    @property
    def solutions(self) -> np.ndarray:
        """The decision variables found at this level."""
        return self._x_prev + self._z_prev @ self._decision

    @property
    def num_slack_vars(self) -> int:
        """Number of inequality rows in the stacked tasks."""
        return self._stacked_tasks.d.shape[0]