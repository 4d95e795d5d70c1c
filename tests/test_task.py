import numpy as np
import pytest

from leggedctl.task import Task, concatenate_matrices, concatenate_vectors


def _sample_task():
    return Task(
        np.arange(6.0).reshape(2, 3),
        np.array([1.0, 2.0]),
        np.arange(3.0).reshape(1, 3),
        np.array([4.0]),
    )


def test_default_task_has_no_rows():
    task = Task()
    assert task.a.shape == (0, 0)
    assert task.b.size == 0
    assert task.d.shape == (0, 0)
    assert task.f.size == 0


def test_empty_task_keeps_columns():
    task = Task.empty(5)
    assert task.a.shape == (0, 5)
    assert task.d.shape == (0, 5)


def test_add_stacks_rows_in_order():
    t1 = _sample_task()
    t2 = _sample_task() * 3.0
    total = t1 + t2
    np.testing.assert_array_equal(total.a, np.vstack([t1.a, t2.a]))
    np.testing.assert_array_equal(total.b, np.concatenate([t1.b, t2.b]))
    np.testing.assert_array_equal(total.d, np.vstack([t1.d, t2.d]))
    np.testing.assert_array_equal(total.f, np.concatenate([t1.f, t2.f]))


def test_add_with_empty_task_is_identity():
    task = _sample_task()
    for total in (task + Task(), Task() + task, task + Task.empty(3)):
        np.testing.assert_array_equal(total.a, task.a)
        np.testing.assert_array_equal(total.d, task.d)
        np.testing.assert_array_equal(total.b, task.b)


def test_multiplication_scales_every_part():
    task = _sample_task()
    for scaled in (task * 2.5, 2.5 * task):
        np.testing.assert_allclose(scaled.a, task.a * 2.5)
        np.testing.assert_allclose(scaled.b, task.b * 2.5)
        np.testing.assert_allclose(scaled.d, task.d * 2.5)
        np.testing.assert_allclose(scaled.f, task.f * 2.5)


def test_multiplying_empty_task_stays_empty():
    scaled = Task.empty(4) * 10.0
    assert scaled.a.shape == (0, 4)
    assert scaled.b.size == 0


def test_concatenate_matrices_skips_matrix_without_columns():
    m = np.ones((2, 3))
    np.testing.assert_array_equal(concatenate_matrices(np.zeros((0, 0)), m), m)
    np.testing.assert_array_equal(concatenate_matrices(m, np.zeros((4, 0))), m)


def test_concatenate_matrices_rejects_column_mismatch():
    with pytest.raises(ValueError):
        concatenate_matrices(np.ones((2, 3)), np.ones((2, 4)))


def test_adding_tasks_of_different_width_raises():
    with pytest.raises(ValueError):
        _sample_task() + Task(np.ones((1, 2)), [0.0], np.ones((1, 2)), [0.0])


def test_concatenate_vectors_joins():
    joined = concatenate_vectors([1.0, 2.0], [3.0])
    np.testing.assert_array_equal(joined, np.array([1.0, 2.0, 3.0]))
    np.testing.assert_array_equal(concatenate_vectors([], [5.0]), np.array([5.0]))


def test_one_dimensional_matrix_rejected():
    with pytest.raises(ValueError):
        Task(np.ones(3), [1.0], np.zeros((0, 0)), [])