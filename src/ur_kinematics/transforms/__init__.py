"""
JAX-based transforms for serial-arm kinematics.

This module provides pure, JIT-compilable implementations of:
- SO(3) rotations (so3 module)
- SE(3) rigid body transforms (se3 module)
- modified Denavit-Hartenberg link transforms (mdh module)
- angle conversions and roll-pitch-yaw decomposition (rotation module)
"""

from . import so3
from . import se3
from . import mdh
from . import rotation

__all__ = [
    "so3",
    "se3",
    "mdh",
    "rotation",
]
