"""SO(3) rotation primitives in JAX.

Elementary rotations about the principal axes plus the few group operations
the kinematic chain needs. All functions are pure, JIT-able, and broadcast
over leading batch dimensions.
"""

import jax
import jax.numpy as jnp

Array = jax.Array


def _principal_rotation(theta: Array, axis: int) -> Array:
    theta = jnp.asarray(theta, dtype=float)
    c, s = jnp.cos(theta), jnp.sin(theta)
    zeros = jnp.zeros_like(theta)
    ones = jnp.ones_like(theta)

    if axis == 0:
        rows = [
            [ones, zeros, zeros],
            [zeros, c, -s],
            [zeros, s, c],
        ]
    elif axis == 1:
        rows = [
            [c, zeros, s],
            [zeros, ones, zeros],
            [-s, zeros, c],
        ]
    else:
        rows = [
            [c, -s, zeros],
            [s, c, zeros],
            [zeros, zeros, ones],
        ]

    return jnp.stack([jnp.stack(row, axis=-1) for row in rows], axis=-2)


def rot_x(theta: Array) -> Array:
    """
    Rotation about the X axis.

    Args:
        theta: (...) angle(s) in radians

    Returns:
        (..., 3, 3) rotation matrix
    """
    return _principal_rotation(theta, 0)


def rot_y(theta: Array) -> Array:
    """
    Rotation about the Y axis.

    Args:
        theta: (...) angle(s) in radians

    Returns:
        (..., 3, 3) rotation matrix
    """
    return _principal_rotation(theta, 1)


def rot_z(theta: Array) -> Array:
    """
    Rotation about the Z axis.

    Args:
        theta: (...) angle(s) in radians

    Returns:
        (..., 3, 3) rotation matrix
    """
    return _principal_rotation(theta, 2)


def multiply(R1: Array, R2: Array) -> Array:
    """
    Multiply two rotation matrices.

    Args:
        R1: (..., 3, 3) first rotation matrix
        R2: (..., 3, 3) second rotation matrix

    Returns:
        (..., 3, 3) result of R1 @ R2
    """
    return jnp.matmul(R1, R2)


def inverse(R: Array) -> Array:
    """
    Compute inverse of rotation matrix.

    For rotation matrices, the inverse is simply the transpose.

    Args:
        R: (..., 3, 3) rotation matrix

    Returns:
        (..., 3, 3) inverse rotation matrix
    """
    return jnp.swapaxes(R, -1, -2)
