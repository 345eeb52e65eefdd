"""Analytical inverse kinematics for UR arms.

The wrist of a UR arm is decoupled from its positioning joints, so every tip
pose is reached by up to eight joint configurations: the cartesian product of
three binary choices (shoulder, wrist, elbow). All eight are computed in a
single closed-form pass; branches that cannot reach the target come out as
NaN instead of raising.
"""

import enum
import itertools
from typing import Tuple

import jax
import jax.numpy as jnp
from flax import struct
from jax import Array

from .core import LinkParameters, Pose
from .transforms import mdh, rotation, se3


class Shoulder(enum.IntEnum):
    """Sign applied to the shoulder angle phi when solving theta1."""

    LEFT = 1
    RIGHT = -1


class Wrist(enum.IntEnum):
    """Sign of theta5."""

    UP = 1
    DOWN = -1


class Elbow(enum.IntEnum):
    """Sign of theta3: DOWN bends to (-pi, 0], UP to [0, pi]."""

    DOWN = -1
    UP = 1


# Row i of a solution set is BRANCHES[i]; row = 4 * shoulder + 2 * wrist + elbow.
BRANCHES: Tuple[Tuple[Shoulder, Wrist, Elbow], ...] = tuple(itertools.product(Shoulder, Wrist, Elbow))
NUM_SOLUTIONS = len(BRANCHES)

_BRANCH_SIGNS = jnp.array([[float(s), float(w), float(e)] for s, w, e in BRANCHES])

# Rounding slack on arccos / arcsin arguments. Anything further past +-1 is
# a target out of reach and stays NaN.
DOMAIN_TOLERANCE = 1e-9

# |sin(theta5)| below this counts as aligned joint 4 and joint 6 axes.
WRIST_SINGULARITY_TOLERANCE = 1e-6


def _clamp_unit(x: Array) -> Array:
    return jnp.where(jnp.abs(x) <= 1.0 + DOMAIN_TOLERANCE, jnp.clip(x, -1.0, 1.0), x)


def _arccos(x: Array) -> Array:
    return jnp.arccos(_clamp_unit(x))


def _arcsin(x: Array) -> Array:
    return jnp.arcsin(_clamp_unit(x))


@struct.dataclass
class IKSolutions:
    """The eight candidate joint configurations for one target pose.

    Attributes:
        joint_angles: Array of shape (8, 6) in radians. A row holding any NaN
                      does not reach the target.
    """
    joint_angles: Array

    @property
    def valid(self) -> Array:
        """Boolean mask of shape (8,), True where the row reaches the target."""
        return is_reachable(self.joint_angles)

    @property
    def num_valid(self) -> Array:
        return jnp.sum(self.valid)

    @staticmethod
    def branch(index: int) -> Tuple[Shoulder, Wrist, Elbow]:
        """Branch choices that produced row ``index``."""
        if not 0 <= index < NUM_SOLUTIONS:
            raise ValueError(f"Solution index must be in [0, {NUM_SOLUTIONS}), got {index}")
        return BRANCHES[index]

    def __len__(self) -> int:
        return NUM_SOLUTIONS


def is_reachable(joint_angles: Array) -> Array:
    """True for every (..., 6) row that contains no NaN."""
    return ~jnp.any(jnp.isnan(joint_angles), axis=-1)


def wrist_roll(theta5: Array, T61: Array) -> Array:
    """Solve theta6 from theta5 and the frame 6 to frame 1 transform.

    With sin(theta5) at 0 the joint 4 and joint 6 axes line up and only
    theta4 + theta6 is determined; theta6 is then set to 0 and theta4 takes
    the whole rotation.
    """
    sin5 = jnp.sin(theta5)
    singular = jnp.abs(sin5) < WRIST_SINGULARITY_TOLERANCE
    safe_sin5 = jnp.where(singular, 1.0, sin5)
    theta6 = jnp.pi / 2 + jnp.arctan2(-T61[1, 1] / safe_sin5, T61[0, 1] / safe_sin5)
    return jnp.where(singular, 0.0, theta6)


def _solve_branch(params: LinkParameters, T06: Array, wrist_center: Array, signs: Array) -> Array:
    """Joint angles of one branch, shape (6,)."""
    shoulder, wrist, elbow = signs[0], signs[1], signs[2]
    d, a = params.d, params.a
    offset = params.lateral_offset
    half_pi = jnp.pi / 2

    # theta1
    psi = jnp.arctan2(wrist_center[1], wrist_center[0])
    phi = _arccos(offset / jnp.hypot(wrist_center[0], wrist_center[1]))
    theta1 = half_pi + psi + shoulder * phi - jnp.pi

    T01 = mdh.transform(0.0, 0.0, d[0], theta1)
    T16 = se3.multiply(se3.inverse(T01), T06)

    # theta5 and theta6
    theta5 = wrist * _arccos((T16[1, 3] - offset) / d[5])
    theta6 = wrist_roll(theta5, se3.inverse(T16))

    T45 = mdh.transform(0.0, a[2], d[4], half_pi) @ mdh.transform(half_pi, 0.0, 0.0, theta5)
    T56 = mdh.transform(-half_pi, 0.0, 0.0, -half_pi) @ mdh.transform(0.0, a[3], d[5], theta6)
    T64 = se3.inverse(T45 @ T56)
    T14 = T16 @ T64

    # theta3: law of cosines in the plane of joints 2 to 4
    reach = jnp.hypot(T14[0, 3], T14[2, 3])
    psi3 = _arccos((reach ** 2 - a[1] ** 2 - a[0] ** 2) / (-2 * a[0] * a[1]))
    theta3 = jnp.pi - elbow * psi3
    theta3 = jnp.where(theta3 > jnp.pi, theta3 - 2 * jnp.pi, theta3)

    # theta2
    theta2 = half_pi - jnp.arctan2(T14[2, 3], T14[0, 3]) + _arcsin(a[1] * jnp.sin(-elbow * psi3) / reach)

    # theta4
    T12 = mdh.transform(-half_pi, 0.0, d[1], theta2 - half_pi)
    T23 = mdh.transform(0.0, a[0], d[2], theta3)
    T03 = T01 @ T12 @ T23
    T34 = se3.inverse(T03) @ T06 @ T64
    theta4 = jnp.arctan2(T34[1, 0], T34[0, 0])

    return jnp.stack([theta1, theta2, theta3, theta4, theta5, theta6])


def inverse_kinematics_matrix(params: LinkParameters, T07: Array) -> IKSolutions:
    """Solve all eight branches for a 4x4 target tip transform.

    Args:
        params: Link dimensions of the arm
        T07: (4, 4) base-to-tip transform

    Returns:
        IKSolutions with joint angles of shape (8, 6)
    """
    T07 = jnp.asarray(T07, dtype=float)
    d = params.d

    # Frame 5 origin, reached by backing off along the tip z axis.
    wrist_center = se3.apply(T07, jnp.array([0.0, 0.0, -d[5] - d[6]]))
    T06 = se3.multiply(T07, se3.translation(jnp.array([0.0, 0.0, -d[6]])))

    solve = jax.vmap(_solve_branch, in_axes=(None, None, None, 0))
    return IKSolutions(joint_angles=solve(params, T06, wrist_center, _BRANCH_SIGNS))


def inverse_kinematics(params: LinkParameters, target: Pose) -> IKSolutions:
    """Solve all eight branches for a target tip pose.

    The target transform is rebuilt from the pose position and its
    roll-pitch-yaw angles.

    Args:
        params: Link dimensions of the arm
        target: Desired tip pose

    Returns:
        IKSolutions with joint angles of shape (8, 6)
    """
    alpha, beta, gamma = rotation.split_rpy(target.rpy)
    T07 = se3.from_position_and_rotation(target.position, rotation.rpy_to_matrix(alpha, beta, gamma))
    return inverse_kinematics_matrix(params, T07)
