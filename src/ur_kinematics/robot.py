"""Stateful UR arm model.

:class:`RobotModel` keeps the joint state of one arm and the transforms of its
latest forward kinematics call, on top of the pure solvers in
:mod:`ur_kinematics.chain` and :mod:`ur_kinematics.ik`. Instances share no
state; use one per caller.
"""

from logging import getLogger
from typing import Tuple, Union

import jax
import jax.numpy as jnp
from jax import Array

from . import chain, ik
from .core import LinkParameters, Pose, RobotType, link_parameters, resolve_robot_type
from .core.link_parameters import NUM_FRAMES, NUM_JOINTS
from .io import format_robot
from .sampling import random_reachable_pose
from .transforms import mdh

logger = getLogger(__name__)


class RobotModel:
    """A UR3, UR5 or UR10 arm, optionally carrying an end-effector.

    Example::

        robot = RobotModel(RobotType.UR5)
        tip = robot.forward_kinematics(jnp.zeros(6))
        solutions = robot.inverse_kinematics(tip)
        reachable = solutions.joint_angles[solutions.valid]
    """

    def __init__(
        self,
        robot_type: Union[RobotType, str] = RobotType.UR10,
        end_effector: bool = False,
        end_effector_length: float = 0.0,
    ) -> None:
        self._robot_type = resolve_robot_type(robot_type)
        self._end_effector = bool(end_effector)
        self._params = link_parameters(
            self._robot_type, end_effector_length if self._end_effector else 0.0
        )

        self._joint_angles = jnp.zeros(NUM_JOINTS)
        self._mdh_table = chain.mdh_table(self._params, self._joint_angles)

        identities = jnp.broadcast_to(jnp.eye(4), (NUM_FRAMES, 4, 4))
        self._individual_transforms = identities
        self._general_transforms = identities
        self._joint_poses = tuple(Pose.identity() for _ in range(NUM_JOINTS))
        self._tip_pose = Pose.identity()

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(robot_type={self._robot_type.value!r}, "
            f"end_effector={self._end_effector})"
        )

    def __str__(self) -> str:
        return format_robot(self)

    # Query interface
    @property
    def robot_type(self) -> RobotType:
        return self._robot_type

    @property
    def end_effector(self) -> bool:
        return self._end_effector

    @property
    def link_parameters(self) -> LinkParameters:
        return self._params

    @property
    def d(self) -> Array:
        """z-axis offsets d0..d6 in meters."""
        return self._params.d

    @property
    def a(self) -> Array:
        """x-axis offsets a0..a3 in meters."""
        return self._params.a

    @property
    def joint_angles(self) -> Array:
        return self._joint_angles

    def joint_angle(self, index: int) -> float:
        if not 0 <= index < NUM_JOINTS:
            raise ValueError(f"Joint index must be in [0, {NUM_JOINTS}), got {index}")
        return float(self._joint_angles[index])

    @property
    def mdh_table(self) -> Array:
        return self._mdh_table

    @property
    def individual_transforms(self) -> Array:
        """Frame-to-frame transforms of the latest forward kinematics, (9, 4, 4)."""
        return self._individual_transforms

    @property
    def general_transforms(self) -> Array:
        """Base-to-frame transforms of the latest forward kinematics, (9, 4, 4)."""
        return self._general_transforms

    @property
    def joint_poses(self) -> Tuple[Pose, ...]:
        return self._joint_poses

    @property
    def tip_pose(self) -> Pose:
        return self._tip_pose

    # State updates
    def set_joint_angles(self, q: Array) -> None:
        """Overwrite the joint angles. The MDH table is not rebuilt."""
        q = jnp.asarray(q, dtype=float)
        if q.shape != (NUM_JOINTS,):
            raise ValueError(f"Expected {NUM_JOINTS} joint angles, got shape {q.shape}")
        self._joint_angles = q

    def rebuild_mdh_table(self) -> None:
        self._mdh_table = chain.mdh_table(self._params, self._joint_angles)

    # Kinematics
    def forward_kinematics(self, q: Array) -> Pose:
        """Move the arm to ``q`` (radians) and return the tip pose.

        Joint poses and all intermediate transforms are stored on the model.
        """
        self.set_joint_angles(q)
        self.rebuild_mdh_table()

        self._individual_transforms = mdh.transforms(self._mdh_table)
        self._general_transforms = chain.compose(self._individual_transforms)
        self._joint_poses, self._tip_pose = chain.frame_poses(self._general_transforms)

        logger.debug("Forward kinematics for %s at %s", self._robot_type.value, self._joint_angles)
        return self._tip_pose

    def inverse_kinematics(self, target: Pose) -> ik.IKSolutions:
        """Solve the eight joint configurations reaching ``target``.

        The model state is left unchanged; check ``IKSolutions.valid`` or
        :meth:`is_reachable` before using a row.
        """
        solutions = ik.inverse_kinematics(self._params, target)
        logger.debug(
            "Inverse kinematics for %s: %d of %d solutions reachable",
            self._robot_type.value,
            int(solutions.num_valid),
            ik.NUM_SOLUTIONS,
        )
        return solutions

    @staticmethod
    def is_reachable(joint_angles: Array) -> bool:
        """True if a single (6,) solution row holds no NaN.

        Use ``IKSolutions.valid`` for the mask over all eight rows.
        """
        joint_angles = jnp.asarray(joint_angles, dtype=float)
        if joint_angles.shape != (NUM_JOINTS,):
            raise ValueError(f"Expected one solution row of {NUM_JOINTS} angles, got shape {joint_angles.shape}")
        return bool(ik.is_reachable(joint_angles))

    def random_reachable_pose(self, key: jax.Array) -> Pose:
        """Drive the arm to random joint angles and return the resulting tip pose."""
        return random_reachable_pose(self, key)
