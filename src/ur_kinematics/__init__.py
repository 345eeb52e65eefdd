"""
UR Kinematics: forward and inverse kinematics for Universal Robots arms.

This library provides JIT-compilable modified Denavit-Hartenberg forward
kinematics and closed-form inverse kinematics for the UR3, UR5 and UR10,
built on JAX.
"""

import jax
jax.config.update("jax_enable_x64", True)

# Import core modules
from . import transforms
from . import core
from . import chain
from . import ik
from . import io
from .core import LinkParameters, Pose, RobotType, link_parameters
from .ik import Elbow, IKSolutions, Shoulder, Wrist, inverse_kinematics
from .chain import forward_kinematics
from .robot import RobotModel
from .sampling import random_joint_angles, random_reachable_pose

__version__ = "0.1.0"
__all__ = [
    "transforms",
    "core",
    "chain",
    "ik",
    "io",
    "Elbow",
    "IKSolutions",
    "LinkParameters",
    "Pose",
    "RobotModel",
    "RobotType",
    "Shoulder",
    "Wrist",
    "forward_kinematics",
    "inverse_kinematics",
    "link_parameters",
    "random_joint_angles",
    "random_reachable_pose",
]
