"""Pose solver that maps a DH chain onto an iterative bone-chain solver."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Tuple

import numpy as np

from .fabrik import BoneChain, FabrikBone, FabrikChain, JointType
from .kinematics import link_length, translation
from .types import DhChain

logger = logging.getLogger(__name__)

UP_AXIS = np.array([0.0, 0.0, 1.0])
FORWARD_AXIS = np.array([1.0, 0.0, 0.0])
BASE_UNIT_VECTOR = UP_AXIS.copy()


@dataclass(frozen=True)
class SolverConfig:
    default_bone_length: float = 10.0
    max_iterations: int = 20
    solve_distance_threshold: float = 1.0
    min_iteration_change: float = 0.01


ChainFactory = Callable[[SolverConfig], BoneChain]


def _fabrik_chain(config: SolverConfig) -> BoneChain:
    return FabrikChain(
        max_iterations=config.max_iterations,
        solve_distance_threshold=config.solve_distance_threshold,
        min_iteration_change=config.min_iteration_change,
    )


def target_position(target: np.ndarray) -> np.ndarray:
    """Position of a target given either as a 3-vector or a 4x4 pose."""

    arr = np.asarray(target, dtype=float)
    if arr.shape == (4, 4):
        return translation(arr)
    if arr.shape == (3,):
        return arr
    raise ValueError(f"Expected a 3-vector or 4x4 pose as target, got shape {arr.shape}")


def angles_between(directions: Sequence[np.ndarray]) -> np.ndarray:
    """Angle between every consecutive pair of direction vectors.

    Zero-length vectors give NaN; see :func:`sanitize_angles`.
    """

    angles = []
    with np.errstate(divide="ignore", invalid="ignore"):
        for first, second in zip(directions[:-1], directions[1:]):
            first = np.asarray(first, dtype=float)
            second = np.asarray(second, dtype=float)
            cos = (first @ second) / (np.linalg.norm(first) * np.linalg.norm(second))
            angles.append(np.arccos(np.clip(cos, -1.0, 1.0)))
    return np.array(angles, dtype=float)


def sanitize_angles(angles: np.ndarray) -> np.ndarray:
    angles = np.asarray(angles, dtype=float)
    return np.where(np.isfinite(angles), angles, 0.0)


class FabrikPoseSolver:
    """Solves a DH chain by treating every link as a hinged bone.

    Known approximations: every joint after the base hinges about the previous
    bone's up axis, because DH parameters alone do not say whether a link acts
    along ``r`` or ``d``, and no hinge limits are applied. Only the target
    position is used; orientation is not constrained.
    """

    def __init__(self, config: SolverConfig | None = None, chain_factory: Optional[ChainFactory] = None):
        self.config = SolverConfig() if config is None else config
        self.chain_factory = _fabrik_chain if chain_factory is None else chain_factory

    def build_bone_chain(self, chain: DhChain) -> BoneChain:
        default = self.config.default_bone_length
        bone_chain = self.chain_factory(self.config)
        bone_chain.set_fixed_base_mode(True)

        for index, dh_param in enumerate(chain.links):
            # The last link has nothing downstream to measure against.
            if index == chain.dof - 1:
                length = default
            else:
                length = link_length(dh_param, default)

            if index == 0:
                bone_chain.add_bone(FabrikBone(np.zeros(3), FORWARD_AXIS * length))
            else:
                bone_chain.add_consecutive_hinged_bone(FORWARD_AXIS, length, JointType.LOCAL_HINGE, UP_AXIS)
        return bone_chain

    def solve(
        self, target: np.ndarray, joint_space_vector: np.ndarray, chain: DhChain
    ) -> Tuple[np.ndarray, float]:
        """Return joint angles (one per link, radians) and the solve error.

        ``joint_space_vector`` is only checked against the chain; every solve
        starts from a straight chain.
        """

        if np.asarray(joint_space_vector).shape != (chain.dof,):
            raise ValueError("The joint angles and DH params must have equal size.")
        if chain.dof == 0:
            raise ValueError("Cannot solve a chain without links.")
        position = target_position(target)

        bone_chain = self.build_bone_chain(chain)
        error = float(bone_chain.solve_for_target(*position))

        directions = [BASE_UNIT_VECTOR] + list(bone_chain.directions)
        angles = sanitize_angles(angles_between(directions))

        if error > self.config.solve_distance_threshold:
            logger.warning(
                "Solve for %s on %r stopped with residual %.6g", position, chain.name or "chain", error
            )
        return angles, error
