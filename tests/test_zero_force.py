import numpy as np
import pytest

from leggedctl.zero_force import ZeroForceConstraint

FLAGS = (True, False, True, False)
STATE = np.arange(24, dtype=float)
INPUT = np.arange(1.0, 19.0)


@pytest.mark.parametrize("index", range(4))
def test_active_when_not_in_contact(index):
    constraint = ZeroForceConstraint(lambda t: FLAGS, index)
    assert constraint.is_active(0.3) is (not FLAGS[index])


def test_value_is_contact_force():
    constraint = ZeroForceConstraint(lambda t: FLAGS, 1)
    np.testing.assert_array_equal(constraint.get_value(0.0, STATE, INPUT), INPUT[3:6])


def test_linear_approximation_is_exact():
    constraint = ZeroForceConstraint(lambda t: FLAGS, 2)
    approx = constraint.get_linear_approximation(0.0, STATE, INPUT)
    np.testing.assert_array_equal(approx.f, INPUT[6:9])
    np.testing.assert_array_equal(approx.dfdu @ INPUT, approx.f)
    assert approx.dfdx.shape == (3, STATE.size)
    assert not approx.dfdx.any()
    assert approx.dfdu.sum() == 3.0


def test_out_of_range_contact_raises():
    constraint = ZeroForceConstraint(lambda t: FLAGS, 3)
    with pytest.raises(IndexError):
        constraint.get_value(0.0, STATE, np.zeros(6))