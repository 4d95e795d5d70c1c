import numpy as np
import pytest

from leggedctl.hoqp import HoQp
from leggedctl.task import Task


def _source_tasks():
    rng = np.random.default_rng(0)
    a0 = rng.uniform(-1.0, 1.0, (2, 4))
    d0 = rng.uniform(-1.0, 1.0, (2, 4))
    task0 = Task(a0, np.ones(2), d0, np.ones(2))
    task1 = Task(np.ones((2, 4)), np.ones(2), d0.copy(), np.ones(2))
    return task0, task1


def test_two_tasks_keep_higher_priority_equality():
    task0, task1 = _source_tasks()
    hoqp0 = HoQp(task0)
    hoqp1 = HoQp(task1, hoqp0)
    x0 = hoqp0.solutions
    x1 = hoqp1.solutions
    np.testing.assert_allclose(task0.a @ x0, task0.b, atol=1e-6)
    np.testing.assert_allclose(task0.a @ x1, task0.b, atol=1e-6)


def test_two_tasks_inequalities_hold_with_slack():
    task0, task1 = _source_tasks()
    hoqp0 = HoQp(task0)
    hoqp1 = HoQp(task1, hoqp0)
    x0 = hoqp0.solutions
    x1 = hoqp1.solutions
    slack0 = hoqp0.stacked_slack_solutions
    slack1 = hoqp1.stacked_slack_solutions
    assert x0.shape == (4,)
    assert x1.shape == (4,)
    assert slack0.shape == (2,)
    assert slack1.shape == (4,)

    violation0 = task0.d @ x0 - (task0.f + slack0)
    assert float(violation0.max()) <= 1e-6

    y1 = task1.d @ x1
    violation1 = y1 - (task1.f + slack1[: y1.size])
    assert float(violation1.max()) <= 1e-6


def test_stacked_slack_starts_with_higher_slack():
    task0, task1 = _source_tasks()
    hoqp0 = HoQp(task0)
    hoqp1 = HoQp(task1, hoqp0)
    slack1 = hoqp1.stacked_slack_solutions
    assert slack1.size == task0.d.shape[0] + task1.d.shape[0]
    np.testing.assert_allclose(slack1[: task0.d.shape[0]], hoqp0.stacked_slack_solutions)
    assert np.all(slack1 >= -1e-7)


def test_stacked_tasks_and_slack_count():
    task0, task1 = _source_tasks()
    hoqp1 = HoQp(task1, HoQp(task0))
    np.testing.assert_array_equal(hoqp1.stacked_tasks.a, np.vstack([task1.a, task0.a]))
    assert hoqp1.num_slack_vars == task0.d.shape[0] + task1.d.shape[0]


def test_z_matrix_spans_null_space():
    task0, _ = _source_tasks()
    hoqp0 = HoQp(task0)
    z = hoqp0.stacked_z_matrix
    assert z.shape == (4, 2)
    np.testing.assert_allclose(task0.a @ z, np.zeros((2, 2)), atol=1e-10)


def test_lower_priority_cannot_override_higher():
    task0 = Task(np.array([[1.0, 0.0, 0.0]]), np.array([1.0]), np.zeros((0, 0)), np.zeros(0))
    task1 = Task(
        np.array([[1.0, 0.0, 0.0], [0.0, 1.0, 0.0]]),
        np.array([5.0, 2.0]),
        np.zeros((0, 0)),
        np.zeros(0),
    )
    x = HoQp(task1, HoQp(task0)).solutions
    assert x[0] == pytest.approx(1.0, abs=1e-6)
    assert x[1] == pytest.approx(2.0, abs=1e-6)


def test_feasible_inequalities_need_no_slack():
    d = np.eye(2)
    f = np.array([-1.0, -2.0])
    hoqp = HoQp(Task(np.zeros((0, 0)), np.zeros(0), d, f))
    assert np.all(d @ hoqp.solutions <= f + 1e-6)
    np.testing.assert_allclose(hoqp.stacked_slack_solutions, np.zeros(2), atol=1e-6)


def test_conflicting_inequalities_are_relaxed():
    d = np.array([[1.0], [-1.0]])
    f = np.array([-1.0, -1.0])
    hoqp = HoQp(Task(np.zeros((0, 0)), np.zeros(0), d, f))
    slack = hoqp.stacked_slack_solutions
    x = hoqp.solutions
    assert slack.sum() >= 2.0 - 1e-6
    assert np.all(d @ x <= f + slack + 1e-6)
    assert x[0] == pytest.approx(0.0, abs=1e-5)