"""Text output for robot state.

This module formats poses and whole robot models for logs and terminals.
"""

from .report import format_pose, format_robot

__all__ = ["format_pose", "format_robot"]
