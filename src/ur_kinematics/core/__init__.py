"""Core data structures for UR kinematics.

This module provides the link dimension tables of the supported arms and the
pose representation shared by the forward and inverse solvers.
"""

from .link_parameters import (
    LINK_DIMENSIONS,
    NUM_FRAMES,
    NUM_JOINTS,
    LinkParameters,
    RobotType,
    link_parameters,
    resolve_robot_type,
)
from .pose import Pose

__all__ = [
    "LINK_DIMENSIONS",
    "NUM_FRAMES",
    "NUM_JOINTS",
    "LinkParameters",
    "Pose",
    "RobotType",
    "link_parameters",
    "resolve_robot_type",
]
