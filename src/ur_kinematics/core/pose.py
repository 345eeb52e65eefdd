"""Position + orientation of a frame, implemented with JAX."""

from __future__ import annotations

from dataclasses import dataclass

import jax
import jax.numpy as jnp
from jax.tree_util import register_pytree_node_class

from ..transforms import rotation, se3

Array = jax.Array


@register_pytree_node_class  # let Pose work with jit / vmap
@dataclass(frozen=True)
class Pose:
    """Immutable frame pose: position in meters and a 3x3 rotation matrix.

    The orientation is exposed as roll-pitch-yaw angles through :attr:`rpy`,
    see :mod:`ur_kinematics.transforms.rotation` for the convention.
    """
    position: Array  # shape (3,)
    rotation: Array  # shape (3, 3)

    # Constructors
    @classmethod
    def from_matrix(cls, matrix: Array) -> "Pose":
        matrix = jnp.asarray(matrix, dtype=float)
        if matrix.shape != (4, 4):
            raise ValueError(f"matrix must have shape (4,4), got {matrix.shape}")
        return cls(se3.get_position(matrix), se3.get_rotation(matrix))

    @classmethod
    def from_rpy(cls, position, rpy) -> "Pose":
        position = jnp.asarray(position, dtype=float)
        if position.shape != (3,):
            raise ValueError(f"position must have shape (3,), got {position.shape}")
        alpha, beta, gamma = rotation.split_rpy(rpy)
        return cls(position, rotation.rpy_to_matrix(alpha, beta, gamma))

    @classmethod
    def identity(cls) -> "Pose":
        return cls(jnp.zeros(3), jnp.eye(3))

    # PyTree boiler-plate
    def tree_flatten(self):
        return (self.position, self.rotation), None

    @classmethod
    def tree_unflatten(cls, aux, children):
        position, rot = children
        return cls(position, rot)

    # Convenience helpers
    @property
    def rpy(self) -> Array:
        """Orientation as [alpha, beta, gamma] in radians."""
        return rotation.matrix_to_rpy(self.rotation)

    @property
    def matrix(self) -> Array:
        """4x4 homogeneous transform of the pose."""
        return se3.from_position_and_rotation(self.position, self.rotation)
