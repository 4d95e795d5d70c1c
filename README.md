# leggedctl

Whole-body control building blocks for legged robots, written with NumPy and SciPy.

## What it contains

- `leggedctl.task`: `Task`, a set of equality rows `a x = b` and inequality
  rows `d x <= f`. Tasks stack with `+` and scale with `*`. `Task.empty(n)`
  gives a task with no rows over `n` decision variables.
  `concatenate_matrices` and `concatenate_vectors` do the stacking.
- `leggedctl.qp`: `solve_qp(h, g, a, lower_a, upper_a)` minimises
  `0.5 x'hx + g'x` subject to `lower_a <= a x <= upper_a`. A missing bound
  means no bound on that side. Rows with equal bounds are treated as
  equalities. It raises `QpError` when the problem is infeasible.
- `leggedctl.hoqp`: `HoQp(task, higher_problem=None)`, one level of a
  hierarchical (strict priority) QP. Each level is solved in the null space
  of the levels above it. Slack variables relax inequalities that cannot be
  met. The properties are `solutions`, `stacked_z_matrix`, `stacked_tasks`,
  `stacked_slack_solutions` and `num_slack_vars`.
- `leggedctl.hardware`: the joint and contact-sensor handles and their
  resource managers. They raise `HardwareInterfaceError` when a handle is
  missing its sensor, state or command, or when a name cannot be found.
  - `JointState` and `JointCommand` hold a joint's data.
  - `HybridJointHandle` offers position, velocity, effort and the five
    command fields, plus `set_command`.
  - `ContactSensorHandle` offers `is_contact()`.
  - `ContactSensorInterface` and `HybridJointInterface` provide
    `register_handle`, `get_handle`, `get_names`, `claims` and
    `clear_claims`. Only the joint interface records claims.
- `leggedctl.friction_cone`: `FrictionConeConstraint` with
  `FrictionConeConfig`. It gives the smoothed cone value and its linear and
  quadratic approximations (`LinearApproximation`, `QuadraticApproximation`).
  `contact_forces(u, i)` extracts one foot's force from the input vector.
- `leggedctl.zero_force`: `ZeroForceConstraint`, which keeps a swinging
  foot's force at zero. It gives the value and the linear approximation.
- `leggedctl.swing`: swing-phase helpers, with `SwingTrajectoryConfig` and
  `SwingScheduleError`:
  - `find_index`
  - `update_foot_schedule`
  - `check_indices_valid`
  - `swing_trajectory_scaling`
  - `max_height_sequence`
- `leggedctl.wbc`: the whole-body controller, with `WbcSettings` and
  `WbcWeights`.
  - `WbcBase` formulates the tasks over `x = [qdd, F, tau]`: floating-base
    equations of motion, torque limits, friction pyramid, no contact motion,
    swing-leg tracking and contact-force tracking.
  - `solve_weighted(constraints, weighted_task, n)` solves the weighted
    least-squares form.
  - `solve_hierarchical(tasks)` solves the strict-priority form, with the
    first task highest.

## Installing

    pip install .

To run the tests:

    pip install ".[test]"
    pytest

## Example

    import numpy as np
    from leggedctl.task import Task
    from leggedctl.hoqp import HoQp

    a = np.array([[1.0, 1.0, 0.0, 0.0], [0.0, 1.0, -1.0, 0.0]])
    top = Task(a, np.ones(2), np.eye(4)[:2], np.ones(2))
    low = Task(np.ones((2, 4)), np.ones(2), np.eye(4)[:2], np.ones(2))

    high = HoQp(top)
    problem = HoQp(low, high)
    x = problem.solutions

The lower-priority task is met only as far as it does not disturb the
higher-priority one.

## What it does not do

- It has no robot model. The caller supplies the mass matrix, nonlinear
  effects, contact Jacobians and their time derivatives, and the foot
  positions and velocities that `WbcBase` needs.
- It contains no model-predictive controller and no gait generator.
- It does not compute swing height trajectories. `leggedctl.swing` covers
  only the scheduling and scaling helpers.
- It talks to no real hardware. The handles read and write plain Python
  objects.
- It has no command-line program.