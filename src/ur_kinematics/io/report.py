"""Plain-text reports of robot state.

Angles are printed in degrees and lengths in meters.
"""

from typing import TYPE_CHECKING, List

import numpy as np

from ..chain import LINK_LABELS, WORLD_LABELS
from ..core import Pose
from ..transforms import rotation

if TYPE_CHECKING:
    from ..robot import RobotModel


def _matrix(T) -> str:
    return np.array2string(np.asarray(T), precision=5, suppress_small=True)


def format_pose(pose: Pose) -> str:
    """One-line position and orientation of a pose."""
    x, y, z = np.asarray(pose.position)
    alpha, beta, gamma = np.asarray(rotation.to_degrees(pose.rpy))
    return (
        f"x {x:.6g} y {y:.6g} z {z:.6g} (meters) "
        f"alpha {alpha:.6g} beta {beta:.6g} gamma {gamma:.6g} (degrees)"
    )


def format_robot(robot: "RobotModel") -> str:
    """Multi-line report of a robot: dimensions, joint values and transforms."""
    lines: List[str] = [
        f"Robot type: {robot.robot_type.value}",
        f"Number of DoFs: {len(robot.joint_angles)}",
        "Link dimensions",
        "Translations in the z-axis (meters):",
    ]
    lines += [f"d{i + 1}: {value:.6g}" for i, value in enumerate(np.asarray(robot.d))]
    lines.append("Translations in the x-axis (meters):")
    lines += [f"a{i + 2}: {value:.6g}" for i, value in enumerate(np.asarray(robot.a))]

    lines.append("Joint values (degrees):")
    degrees = np.asarray(rotation.to_degrees(robot.joint_angles))
    lines += [f"Theta{i + 1}: {value:.6g}" for i, value in enumerate(degrees)]

    lines.append("Tip pose:")
    lines.append(format_pose(robot.tip_pose))

    lines.append("Individual Transformation Matrices:")
    for label, T in zip(LINK_LABELS, robot.individual_transforms):
        lines += [label, _matrix(T)]

    lines.append("General Transformation Matrices:")
    for label, T in zip(WORLD_LABELS, robot.general_transforms):
        lines += [label, _matrix(T)]

    lines.append("Joint poses: {x, y, z} meters {alpha, beta, gamma} degrees")
    for i, pose in enumerate(robot.joint_poses):
        position = ", ".join(f"{v:.6g}" for v in np.asarray(pose.position))
        angles = ", ".join(f"{v:.6g}" for v in np.asarray(rotation.to_degrees(pose.rpy)))
        lines.append(f"J{i + 1}: {{{position}}} {{{angles}}}")

    return "\n".join(lines)
