"""Modified Denavit-Hartenberg link transforms.

One MDH row (alpha, a, d, theta) describes the transform from frame i-1 to
frame i as

    Rx(alpha) @ Tx(a) @ Tz(d) @ Rz(theta)
"""

import jax
import jax.numpy as jnp

Array = jax.Array


def transform(alpha, a, d, theta) -> Array:
    """
    Homogeneous transform of a single MDH row.

    Args:
        alpha: (...) twist angle about the previous x axis, radians
        a: (...) link length along the previous x axis, meters
        d: (...) link offset along the new z axis, meters
        theta: (...) joint angle about the new z axis, radians

    Returns:
        (..., 4, 4) homogeneous transformation matrix
    """
    alpha, a, d, theta = jnp.broadcast_arrays(
        *(jnp.asarray(v, dtype=float) for v in (alpha, a, d, theta))
    )
    ca, sa = jnp.cos(alpha), jnp.sin(alpha)
    ct, st = jnp.cos(theta), jnp.sin(theta)
    zeros = jnp.zeros_like(theta)
    ones = jnp.ones_like(theta)

    return jnp.stack([
        jnp.stack([ct, -st, zeros, a], axis=-1),
        jnp.stack([st * ca, ct * ca, -sa, -d * sa], axis=-1),
        jnp.stack([st * sa, ct * sa, ca, d * ca], axis=-1),
        jnp.stack([zeros, zeros, zeros, ones], axis=-1),
    ], axis=-2)


def transforms(table: Array) -> Array:
    """
    Individual transforms of every row of an MDH table.

    Args:
        table: (..., N, 4) rows of (alpha, a, d, theta)

    Returns:
        (..., N, 4, 4) frame-to-frame transforms
    """
    table = jnp.asarray(table, dtype=float)
    return transform(table[..., 0], table[..., 1], table[..., 2], table[..., 3])
