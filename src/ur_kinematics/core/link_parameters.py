"""Link dimension tables for the supported Universal Robots arms.

The tables are laid out for the MDH frame convention used by
:mod:`ur_kinematics.chain`: seven offsets along z (``d0..d6``, the last one
reserved for an end-effector) and four offsets along x (``a0..a3``), in
meters.
"""

import enum
from logging import getLogger
from typing import Dict, Tuple, Union

import jax.numpy as jnp
from flax import struct
from jax import Array

logger = getLogger(__name__)

NUM_JOINTS = 6
NUM_FRAMES = 9
NUM_TRANS_Z = 7
NUM_TRANS_X = 4


class RobotType(enum.Enum):
    """Supported arm sizes."""

    UR3 = "UR3"
    UR5 = "UR5"
    UR10 = "UR10"


DEFAULT_ROBOT_TYPE = RobotType.UR10

_ALIASES: Dict[str, RobotType] = {
    "SMALL": RobotType.UR3,
    "MEDIUM": RobotType.UR5,
    "LARGE": RobotType.UR10,
}

# (d0..d6, a0..a3). d1 + d2 + d3 + d4 is the lateral shoulder-to-wrist offset,
# a0 and a1 are the upper arm and forearm, a2 the wrist 2 link and d5 the
# wrist 3 link. d6 is zero until an end-effector is attached.
LINK_DIMENSIONS: Dict[RobotType, Tuple[Tuple[float, ...], Tuple[float, ...]]] = {
    RobotType.UR3: (
        (0.1519, 0.1198, -0.0925, 0.0, 0.08505, 0.0819, 0.0),
        (0.24365, 0.21325, 0.08535, 0.0),
    ),
    RobotType.UR5: (
        (0.089159, 0.13585, -0.1197, 0.0, 0.093, 0.0823, 0.0),
        (0.425, 0.39225, 0.09465, 0.0),
    ),
    RobotType.UR10: (
        (0.1273, 0.220941, -0.1719, 0.0, 0.1149, 0.0922, 0.0),
        (0.612, 0.5723, 0.1157, 0.0),
    ),
}


@struct.dataclass
class LinkParameters:
    """Immutable link dimensions of one arm.

    Attributes:
        d: Array of shape (7,) with the z-axis offsets d0..d6 in meters.
        a: Array of shape (4,) with the x-axis offsets a0..a3 in meters.
    """
    d: Array
    a: Array

    @classmethod
    def create(cls, d, a) -> "LinkParameters":
        d = jnp.asarray(d, dtype=float)
        a = jnp.asarray(a, dtype=float)
        if d.shape != (NUM_TRANS_Z,):
            raise ValueError(f"d must have shape ({NUM_TRANS_Z},), got {d.shape}")
        if a.shape != (NUM_TRANS_X,):
            raise ValueError(f"a must have shape ({NUM_TRANS_X},), got {a.shape}")
        return cls(d=d, a=a)

    @property
    def lateral_offset(self) -> Array:
        """Offset between the shoulder and the wrist along the joint 2 axis."""
        return self.d[1] + self.d[2] + self.d[3] + self.d[4]

    def with_end_effector(self, length: float) -> "LinkParameters":
        """Return a copy whose last z-offset is extended by ``length`` meters."""
        return self.replace(d=self.d.at[NUM_TRANS_Z - 1].add(length))


def resolve_robot_type(robot_type: Union[RobotType, str]) -> RobotType:
    """Map a type tag (enum, model name or size class) to a :class:`RobotType`.

    Unknown tags fall back to :data:`DEFAULT_ROBOT_TYPE`, the largest arm.
    """
    if isinstance(robot_type, RobotType):
        return robot_type

    key = str(robot_type).strip().upper()
    if key in _ALIASES:
        return _ALIASES[key]
    try:
        return RobotType(key)
    except ValueError:
        logger.warning(
            "Unknown robot type %r, using %s link dimensions", robot_type, DEFAULT_ROBOT_TYPE.value
        )
        return DEFAULT_ROBOT_TYPE


def link_parameters(
    robot_type: Union[RobotType, str], end_effector_length: float = 0.0
) -> LinkParameters:
    """Look up the link dimensions of ``robot_type``.

    Args:
        robot_type: Arm variant; unknown tags use the UR10 table.
        end_effector_length: Added to the last z-offset, meters.

    Returns:
        LinkParameters for the variant.
    """
    d, a = LINK_DIMENSIONS[resolve_robot_type(robot_type)]
    params = LinkParameters.create(d, a)
    if end_effector_length:
        params = params.with_end_effector(end_effector_length)
    return params
