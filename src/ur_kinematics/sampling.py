"""Random joint configurations and the reachable poses they produce."""

from typing import TYPE_CHECKING

import jax
import jax.numpy as jnp
import jax.random as jrandom

from .core import NUM_JOINTS, Pose
from .transforms import rotation

if TYPE_CHECKING:
    from .robot import RobotModel

# UR joints turn through [-360, 360] degrees.
JOINT_LIMIT_DEG = 360


def random_joint_angles(key: jax.Array) -> jax.Array:
    """Draw six whole-degree joint angles uniformly from the joint range.

    Args:
        key: JAX PRNG key

    Returns:
        Array of shape (6,) in radians
    """
    degrees = jrandom.randint(key, (NUM_JOINTS,), -JOINT_LIMIT_DEG, JOINT_LIMIT_DEG + 1)
    return rotation.to_radians(degrees.astype(jnp.float64))


def random_reachable_pose(robot: "RobotModel", key: jax.Array) -> Pose:
    """Run forward kinematics at random joint angles.

    The returned tip pose is reachable by construction. The robot is left at
    the sampled configuration.
    """
    return robot.forward_kinematics(random_joint_angles(key))
