"""Angle conversions and roll-pitch-yaw utilities in JAX.

The roll-pitch-yaw triple (alpha, beta, gamma) of a rotation matrix R is
defined by

    R = Rx(-gamma) @ Ry(-beta) @ Rz(-alpha)

i.e. R is the transpose of Rz(alpha) @ Ry(beta) @ Rx(gamma). ``matrix_to_rpy``
and ``rpy_to_matrix`` are exact inverses of each other for
beta in (-pi/2, pi/2).
"""

from typing import Tuple, Union

import jax
import jax.numpy as jnp

from . import so3

# Type aliases
Array = jax.Array
Scalar = Union[float, Array]


def to_radians(degrees: Scalar) -> Array:
    """Convert degrees to radians."""
    return jnp.asarray(degrees, dtype=float) * jnp.pi / 180.0


def to_degrees(radians: Scalar) -> Array:
    """Convert radians to degrees."""
    return jnp.asarray(radians, dtype=float) * 180.0 / jnp.pi


def wrap_angle(theta: Scalar) -> Array:
    """Wrap angle(s) into (-pi, pi]."""
    theta = jnp.asarray(theta, dtype=float)
    wrapped = jnp.mod(theta + jnp.pi, 2 * jnp.pi) - jnp.pi
    return jnp.where(wrapped == -jnp.pi, jnp.pi, wrapped)


def rpy_to_matrix(alpha: Scalar, beta: Scalar, gamma: Scalar) -> Array:
    """
    Build a rotation matrix from roll-pitch-yaw angles.

    Intrinsic rotations about X, Y and Z, in that order, by -gamma, -beta and
    -alpha. This is the inverse of :func:`matrix_to_rpy`.

    Args:
        alpha: (...) yaw-like angle, radians
        beta: (...) pitch angle, radians
        gamma: (...) roll-like angle, radians

    Returns:
        (..., 3, 3) rotation matrix
    """
    alpha = jnp.asarray(alpha, dtype=float)
    beta = jnp.asarray(beta, dtype=float)
    gamma = jnp.asarray(gamma, dtype=float)
    return so3.multiply(so3.multiply(so3.rot_x(-gamma), so3.rot_y(-beta)), so3.rot_z(-alpha))


def matrix_to_rpy(R: Array) -> Array:
    """
    Decompose a rotation matrix into roll-pitch-yaw angles.

    General case::

        beta  = -asin(R[0, 2])
        gamma = atan2(R[1, 2] / cos(beta), R[2, 2] / cos(beta))
        alpha = atan2(R[0, 1] / cos(beta), R[0, 0] / cos(beta))

    When R[0, 2] is exactly -1 or +1 (beta = +pi/2 or -pi/2) alpha and gamma
    are not independent. alpha is then fixed to 0 and gamma takes the whole
    remaining rotation about the collapsed axis.

    Args:
        R: (..., 3, 3) rotation matrix

    Returns:
        (..., 3) array [alpha, beta, gamma] with beta in [-pi/2, pi/2]
    """
    R = jnp.asarray(R, dtype=float)
    r02 = R[..., 0, 2]

    beta = -jnp.arcsin(jnp.clip(r02, -1.0, 1.0))
    cos_beta = jnp.cos(beta)
    gamma = jnp.arctan2(R[..., 1, 2] / cos_beta, R[..., 2, 2] / cos_beta)
    alpha = jnp.arctan2(R[..., 0, 1] / cos_beta, R[..., 0, 0] / cos_beta)

    # Gimbal lock
    pitch_up = r02 == -1.0
    pitch_down = r02 == 1.0
    locked = pitch_up | pitch_down

    # gamma - alpha when pitched up, gamma + alpha when pitched down
    locked_gamma = jnp.where(
        pitch_up,
        jnp.arctan2(R[..., 1, 0], R[..., 2, 0]),
        jnp.arctan2(-R[..., 1, 0], -R[..., 2, 0]),
    )

    alpha = jnp.where(locked, 0.0, alpha)
    beta = jnp.where(pitch_up, jnp.pi / 2, jnp.where(pitch_down, -jnp.pi / 2, beta))
    gamma = jnp.where(locked, locked_gamma, gamma)

    return jnp.stack([alpha, beta, gamma], axis=-1)


def split_rpy(rpy: Array) -> Tuple[Array, Array, Array]:
    """Unpack a (..., 3) roll-pitch-yaw array into its three components."""
    rpy = jnp.asarray(rpy, dtype=float)
    return rpy[..., 0], rpy[..., 1], rpy[..., 2]
