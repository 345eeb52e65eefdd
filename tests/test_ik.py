"""Tests for closed-form inverse kinematics."""

import jax
import jax.numpy as jnp
import numpy as np
import pytest

from ur_kinematics import Elbow, IKSolutions, Pose, RobotModel, RobotType, Shoulder, Wrist, link_parameters
from ur_kinematics import ik
from ur_kinematics.chain import forward_kinematics_world
from ur_kinematics.transforms import rotation, so3

# Bent elbow, wrist well away from the base axis and from alignment.
GENERIC_Q = jnp.array([0.4, -0.3, 1.8, -0.6, 1.2, 0.5])

# Straight elbow with the wrist 2 link continuing along the arm.
MAX_REACH_Q = jnp.array([0.3, -0.7, 0.0, 0.0, 2.0, 0.4])


def closest_solution_error(solutions: IKSolutions, q) -> float:
    """Largest wrapped joint error of the row nearest to ``q``."""
    diff = jnp.abs(rotation.wrap_angle(solutions.joint_angles - q[None, :]))
    return float(jnp.nanmin(jnp.max(diff, axis=-1)))


def test_branch_ordering():
    """Rows enumerate shoulder, then wrist, then elbow."""
    assert len(ik.BRANCHES) == ik.NUM_SOLUTIONS == 8
    assert IKSolutions.branch(0) == (Shoulder.LEFT, Wrist.UP, Elbow.DOWN)
    assert IKSolutions.branch(1) == (Shoulder.LEFT, Wrist.UP, Elbow.UP)
    assert IKSolutions.branch(2) == (Shoulder.LEFT, Wrist.DOWN, Elbow.DOWN)
    assert IKSolutions.branch(7) == (Shoulder.RIGHT, Wrist.DOWN, Elbow.UP)


@pytest.mark.parametrize("index", [-1, 8])
def test_branch_out_of_range(index):
    with pytest.raises(ValueError):
        IKSolutions.branch(index)


@pytest.mark.parametrize("robot_type", [RobotType.UR3, RobotType.UR5, RobotType.UR10])
def test_roundtrip_recovers_joint_angles(robot_type):
    """FK then IK returns the original configuration among the eight rows."""
    robot = RobotModel(robot_type)
    tip = robot.forward_kinematics(GENERIC_Q)

    solutions = robot.inverse_kinematics(tip)

    assert solutions.joint_angles.shape == (8, 6)
    assert closest_solution_error(solutions, GENERIC_Q) < 1e-6


def test_roundtrip_row_matches_branch():
    """The recovering row is the one whose signs match the configuration."""
    params = link_parameters(RobotType.UR5)
    tip = Pose.from_matrix(forward_kinematics_world(params, GENERIC_Q)[-1])
    solutions = ik.inverse_kinematics(params, tip)

    # theta5 > 0 and theta3 > 0, so wrist up and elbow up.
    matches = [
        i for i in range(8)
        if float(jnp.max(jnp.abs(rotation.wrap_angle(solutions.joint_angles[i] - GENERIC_Q)))) < 1e-6
    ]
    assert len(matches) == 1
    _, wrist, elbow = IKSolutions.branch(matches[0])
    assert wrist == Wrist.UP
    assert elbow == Elbow.UP


@pytest.mark.parametrize("robot_type", [RobotType.UR5, RobotType.UR10])
def test_generic_pose_has_eight_solutions(robot_type):
    """Every row reaches a pose in the middle of the workspace."""
    params = link_parameters(robot_type)
    tip = Pose.from_matrix(forward_kinematics_world(params, GENERIC_Q)[-1])

    solutions = ik.inverse_kinematics(params, tip)

    assert int(solutions.num_valid) == 8
    assert bool(jnp.all(solutions.valid))
    for q in solutions.joint_angles:
        T = forward_kinematics_world(params, q)[-1]
        np.testing.assert_allclose(T, tip.matrix, atol=1e-8)


def test_elbow_and_wrist_signs():
    """Elbow and wrist branches fix the signs of theta3 and theta5."""
    params = link_parameters(RobotType.UR5)
    tip = Pose.from_matrix(forward_kinematics_world(params, GENERIC_Q)[-1])
    q = ik.inverse_kinematics(params, tip).joint_angles

    for i in range(8):
        _, wrist, elbow = IKSolutions.branch(i)
        assert float(q[i, 4]) * wrist > 0
        assert float(q[i, 2]) * elbow > 0
        assert abs(float(q[i, 2])) <= jnp.pi


def test_random_roundtrips():
    """Well-conditioned random configurations are always recovered."""
    robot = RobotModel(RobotType.UR10)
    keys = jax.random.split(jax.random.PRNGKey(0), 30)
    checked = 0

    for key in keys:
        q = jax.random.uniform(key, (6,), minval=-2 * jnp.pi, maxval=2 * jnp.pi)
        tip = robot.forward_kinematics(q)
        wrist_center = robot.general_transforms[5, :2, 3]

        # Skip aligned wrists, stretched or folded elbows and shoulder singularities.
        if abs(float(jnp.sin(q[4]))) < 0.1 or abs(float(jnp.sin(q[2]))) < 0.1:
            continue
        if float(jnp.linalg.norm(wrist_center)) < float(robot.link_parameters.lateral_offset) + 0.05:
            continue

        solutions = robot.inverse_kinematics(tip)
        assert int(solutions.num_valid) >= 1
        assert closest_solution_error(solutions, q) < 1e-5
        checked += 1

    assert checked > 0


def test_roundtrip_with_end_effector():
    """The tool length is backed off before solving the wrist."""
    robot = RobotModel(RobotType.UR10, end_effector=True, end_effector_length=0.15)
    tip = robot.forward_kinematics(GENERIC_Q)

    solutions = robot.inverse_kinematics(tip)

    assert closest_solution_error(solutions, GENERIC_Q) < 1e-6


def test_far_target_is_unreachable():
    """A pose meters away from the base yields no solution at all."""
    params = link_parameters(RobotType.UR5)
    solutions = ik.inverse_kinematics(params, Pose.from_rpy([2.0, 2.0, 2.0], [0.0, 0.0, 0.0]))

    assert int(solutions.num_valid) == 0
    assert not bool(jnp.any(solutions.valid))
    assert bool(jnp.all(jnp.isnan(solutions.joint_angles[:, 2])))


def test_wrist_inside_shoulder_offset_is_unreachable():
    """A wrist center closer to the base axis than the shoulder offset has no theta1."""
    params = link_parameters(RobotType.UR5)
    target = Pose.from_rpy([0.01, 0.0, 0.6], [0.0, 0.0, 0.0])

    solutions = ik.inverse_kinematics(params, target)

    assert int(solutions.num_valid) == 0
    assert bool(jnp.all(jnp.isnan(solutions.joint_angles[:, 0])))


def test_maximum_reach_has_one_configuration():
    """A fully stretched arm is only reached by its own shoulder and wrist.

    Both elbow rows of that branch collapse onto theta3 = 0; every other
    branch would need a longer arm and stays NaN.
    """
    params = link_parameters(RobotType.UR5)
    tip = Pose.from_matrix(forward_kinematics_world(params, MAX_REACH_Q)[-1])

    solutions = ik.inverse_kinematics(params, tip)

    assert int(solutions.num_valid) in (1, 2)
    reachable = solutions.joint_angles[solutions.valid]
    for q in reachable:
        np.testing.assert_allclose(rotation.wrap_angle(q - MAX_REACH_Q), jnp.zeros(6), atol=1e-6)
        np.testing.assert_allclose(forward_kinematics_world(params, q)[-1], tip.matrix, atol=1e-8)


def test_straight_elbow_roundtrip():
    """theta3 = 0 is recovered even though the elbow cosine sits on -1."""
    robot = RobotModel(RobotType.UR5)
    q = jnp.array([0.3, -0.7, 0.0, 0.2, 1.0, 0.4])
    tip = robot.forward_kinematics(q)

    solutions = robot.inverse_kinematics(tip)

    assert int(solutions.num_valid) >= 1
    assert closest_solution_error(solutions, q) < 1e-6


def test_beyond_stretched_arm_loses_solutions():
    """Pushing the stretched-arm pose 1 cm outward leaves it out of reach."""
    params = link_parameters(RobotType.UR5)
    tip = Pose.from_matrix(forward_kinematics_world(params, MAX_REACH_Q)[-1])
    at_reach = int(ik.inverse_kinematics(params, tip).num_valid)

    theta2 = MAX_REACH_Q[1]
    arm_direction = so3.rot_z(MAX_REACH_Q[0]) @ jnp.array([jnp.sin(theta2), 0.0, jnp.cos(theta2)])
    target = Pose(tip.position + 0.01 * arm_direction, tip.rotation)
    solutions = ik.inverse_kinematics(params, target)

    assert int(solutions.num_valid) < at_reach


@pytest.mark.parametrize("robot_type", [RobotType.UR5, RobotType.UR10])
def test_singular_wrist_roundtrip(robot_type):
    """With theta5 = 0 every row still reaches the tip and theta6 is pinned to 0."""
    params = link_parameters(robot_type)
    q = GENERIC_Q.at[4].set(0.0)
    tip = Pose.from_matrix(forward_kinematics_world(params, q)[-1])

    solutions = ik.inverse_kinematics(params, tip)

    assert int(solutions.num_valid) == 8
    for row in solutions.joint_angles:
        np.testing.assert_allclose(forward_kinematics_world(params, row)[-1], tip.matrix, atol=1e-6)

    singular = jnp.abs(jnp.sin(solutions.joint_angles[:, 4])) < ik.WRIST_SINGULARITY_TOLERANCE
    assert int(jnp.sum(singular)) >= 2
    np.testing.assert_array_equal(solutions.joint_angles[singular, 5], 0.0)

    # Only theta4 + theta6 is determined on the original arm configuration.
    arm_error = jnp.max(jnp.abs(rotation.wrap_angle(solutions.joint_angles[:, :3] - q[:3])), axis=-1)
    row = int(jnp.argmin(arm_error))
    assert float(arm_error[row]) < 1e-6
    np.testing.assert_allclose(
        rotation.wrap_angle(solutions.joint_angles[row, 3] + solutions.joint_angles[row, 5] - (q[3] + q[5])),
        0.0,
        atol=1e-6,
    )


def test_valid_mask_flags_nan_rows():
    q = jnp.zeros((8, 6)).at[3, 2].set(jnp.nan).at[6, 0].set(jnp.nan)
    solutions = IKSolutions(joint_angles=q)

    expected = jnp.array([True, True, True, False, True, True, False, True])
    np.testing.assert_array_equal(solutions.valid, expected)
    assert int(solutions.num_valid) == 6
    assert len(solutions) == 8
    assert RobotModel.is_reachable(q[0])
    assert not RobotModel.is_reachable(q[3])
    with pytest.raises(ValueError):
        RobotModel.is_reachable(q)


@pytest.mark.parametrize("theta5", [0.0, -0.0, 1e-9, jnp.pi, 2 * jnp.pi])
def test_wrist_roll_singular(theta5):
    """Aligned wrist axes leave theta6 undetermined; it is reported as 0."""
    T61 = jnp.eye(4).at[:3, :3].set(so3.rot_z(0.7))
    assert float(ik.wrist_roll(jnp.asarray(theta5), T61)) == 0.0


def test_wrist_roll_regular():
    T61 = jnp.eye(4).at[:3, :3].set(so3.rot_z(0.3))
    np.testing.assert_allclose(ik.wrist_roll(jnp.asarray(jnp.pi / 2), T61), -0.3, atol=1e-12)


def test_inverse_kinematics_jit():
    """Test IK is JIT compatible."""
    params = link_parameters(RobotType.UR5)
    tip = Pose.from_matrix(forward_kinematics_world(params, GENERIC_Q)[-1])

    expected = ik.inverse_kinematics(params, tip).joint_angles
    result = jax.jit(ik.inverse_kinematics)(params, tip).joint_angles

    np.testing.assert_allclose(result, expected, rtol=1e-10, atol=1e-10)


def test_inverse_kinematics_leaves_model_unchanged():
    robot = RobotModel(RobotType.UR5)
    tip = robot.forward_kinematics(GENERIC_Q)
    general = robot.general_transforms

    robot.inverse_kinematics(Pose.from_rpy([0.3, 0.2, 0.4], [0.1, 0.2, 0.3]))

    np.testing.assert_allclose(robot.joint_angles, GENERIC_Q)
    np.testing.assert_allclose(robot.general_transforms, general)
    np.testing.assert_allclose(robot.tip_pose.position, tip.position)
