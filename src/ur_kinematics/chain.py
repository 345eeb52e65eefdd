"""Core kinematics algorithm: forward kinematics over the MDH chain.

The arm is described by nine reference frames: the six joints, two phantom
frames (4' and 5') that align the wrist axes, and the tip frame 7. Each frame
follows from the previous one through one MDH row; the world pose of a frame
is the ordered product of all rows up to it.
"""

from typing import Dict, Tuple

import jax
import jax.numpy as jnp
from jax import Array

from .core import LinkParameters, Pose
from .core.link_parameters import NUM_JOINTS
from .transforms import mdh

# Frame-to-frame labels of the nine MDH rows.
LINK_LABELS = ("0T1", "1T2", "2T3", "3T4", "4T4'", "4'T5", "5T5'", "5'T6", "6T7")

# Base-to-frame labels of the nine cumulative transforms.
WORLD_LABELS = ("0T1", "0T2", "0T3", "0T4", "0T4'", "0T5", "0T5'", "0T6", "0T7")

# Cumulative frames holding a joint; 4 and 6 are the phantom frames.
JOINT_FRAMES = (0, 1, 2, 3, 5, 7)
TIP_FRAME = 8


def mdh_table(params: LinkParameters, q: Array) -> Array:
    """Build the MDH parameter table for the given joint angles.

    Args:
        params: Link dimensions of the arm
        q: Joint angles array of shape (6,) in radians

    Returns:
        Array of shape (9, 4) with rows (alpha, a, d, theta)
    """
    q = jnp.asarray(q, dtype=float)
    d, a = params.d, params.a
    half_pi = jnp.pi / 2

    return jnp.array([
        [0.0, 0.0, d[0], q[0]],                 # 0T1
        [-half_pi, 0.0, d[1], q[1] - half_pi],  # 1T2
        [0.0, a[0], d[2], q[2]],                # 2T3
        [0.0, a[1], d[3], q[3]],                # 3T4
        [0.0, a[2], d[4], half_pi],             # 4T4'
        [half_pi, 0.0, 0.0, q[4]],              # 4'T5
        [-half_pi, 0.0, 0.0, -half_pi],         # 5T5'
        [0.0, a[3], d[5], q[5]],                # 5'T6
        [0.0, 0.0, d[6], 0.0],                  # 6T7
    ])


def compose(link_transforms: Array) -> Array:
    """Accumulate frame-to-frame transforms into base-to-frame transforms.

    Args:
        link_transforms: Array of shape (N, 4, 4), frame i-1 to frame i

    Returns:
        Array of shape (N, 4, 4) where entry i is the product of entries 0..i
    """

    def scan_body(carry, T_parent_to_child):
        """Extends the chain by one frame."""
        T_world_to_child = carry @ T_parent_to_child
        return T_world_to_child, T_world_to_child

    identity = jnp.eye(4, dtype=link_transforms.dtype)
    _, world_transforms = jax.lax.scan(scan_body, identity, link_transforms)
    return world_transforms


def forward_kinematics_world(params: LinkParameters, q: Array) -> Array:
    """Internal FK function returning array of world transforms.

    Args:
        params: Link dimensions of the arm
        q: Joint angles array of shape (6,) in radians

    Returns:
        Array of shape (9, 4, 4) with the base-to-frame transform of every frame
    """
    return compose(mdh.transforms(mdh_table(params, q)))


def forward_kinematics(params: LinkParameters, q: Array) -> Dict[str, Array]:
    """Compute forward kinematics for all reference frames of the arm.

    Args:
        params: Link dimensions of the arm
        q: Joint angles array of shape (6,) in radians

    Returns:
        Dictionary mapping frame labels ("0T1" ... "0T7") to 4x4 world poses
    """
    q = jnp.asarray(q, dtype=float)
    if q.shape != (NUM_JOINTS,):
        raise ValueError(f"Expected {NUM_JOINTS} joint angles, got shape {q.shape}")

    world_transforms = forward_kinematics_world(params, q)
    return {name: world_transforms[i] for i, name in enumerate(WORLD_LABELS)}


def frame_poses(world_transforms: Array) -> Tuple[Tuple[Pose, ...], Pose]:
    """Split world transforms into the six joint poses and the tip pose."""
    joint_poses = tuple(Pose.from_matrix(world_transforms[i]) for i in JOINT_FRAMES)
    return joint_poses, Pose.from_matrix(world_transforms[TIP_FRAME])
