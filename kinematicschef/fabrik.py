"""Forward and backward reaching inverse kinematics over 3D bone chains."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Protocol, Sequence, Tuple

import numpy as np

logger = logging.getLogger(__name__)

FORWARD = np.array([1.0, 0.0, 0.0])
_EPS = 1e-12


class JointType(Enum):
    BALL = "ball"
    GLOBAL_HINGE = "global_hinge"
    LOCAL_HINGE = "local_hinge"


def _normalise(vec: np.ndarray) -> np.ndarray:
    nrm = np.linalg.norm(vec)
    return np.zeros(3) if nrm < _EPS else vec / nrm


def _perpendicular(vec: np.ndarray) -> np.ndarray:
    helper = FORWARD if abs(vec @ FORWARD) < 0.9 else np.array([0.0, 1.0, 0.0])
    return _normalise(np.cross(vec, helper))


def rotation_between(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Shortest-arc rotation taking unit vector ``a`` onto unit vector ``b``."""

    v = np.cross(a, b)
    c = float(a @ b)
    if np.linalg.norm(v) < _EPS:
        if c > 0.0:
            return np.eye(3)
        u = _perpendicular(a)
        return 2.0 * np.outer(u, u) - np.eye(3)
    K = np.array([[0.0, -v[2], v[1]], [v[2], 0.0, -v[0]], [-v[1], v[0], 0.0]])
    return np.eye(3) + K + K @ K / (1.0 + c)


@dataclass
class FabrikBone:
    """Rigid segment between two points. Its length never changes once built."""

    start: np.ndarray
    end: np.ndarray
    joint_type: JointType = JointType.BALL
    hinge_axis: Optional[np.ndarray] = None
    length: float = field(init=False)

    def __post_init__(self) -> None:
        self.start = np.asarray(self.start, dtype=float).copy()
        self.end = np.asarray(self.end, dtype=float).copy()
        if self.hinge_axis is not None:
            self.hinge_axis = _normalise(np.asarray(self.hinge_axis, dtype=float))
        self.length = float(np.linalg.norm(self.end - self.start))

    @property
    def direction(self) -> np.ndarray:
        return _normalise(self.end - self.start)


class BoneChain(Protocol):
    """Narrow contract the pose solver needs from an iterative bone solver."""

    def set_fixed_base_mode(self, fixed: bool) -> None:
        ...

    def add_bone(self, bone: FabrikBone) -> None:
        ...

    def add_consecutive_hinged_bone(
        self, direction: np.ndarray, length: float, joint_type: JointType, hinge_axis: np.ndarray
    ) -> None:
        ...

    def solve_for_target(self, x: float, y: float, z: float) -> float:
        ...

    @property
    def directions(self) -> List[np.ndarray]:
        ...


class FabrikChain:
    """Chain of bones solved with FABRIK.

    The best configuration seen while iterating is kept, so the residual
    returned by :meth:`solve_for_target` never grows when more iterations are
    allowed. ``LOCAL_HINGE`` axes are given in the previous bone's frame, whose
    forward (x) axis is that bone's direction.
    """

    def __init__(
        self,
        max_iterations: int = 20,
        solve_distance_threshold: float = 1.0,
        min_iteration_change: float = 0.01,
    ):
        if max_iterations < 1:
            raise ValueError(f"max_iterations must be at least 1, got {max_iterations}")
        self.max_iterations = max_iterations
        self.solve_distance_threshold = solve_distance_threshold
        self.min_iteration_change = min_iteration_change
        self.fixed_base = True
        self._bones: List[FabrikBone] = []
        self._base_location = np.zeros(3)

    @property
    def bones(self) -> Tuple[FabrikBone, ...]:
        return tuple(self._bones)

    @property
    def directions(self) -> List[np.ndarray]:
        return [bone.direction for bone in self._bones]

    def set_fixed_base_mode(self, fixed: bool) -> None:
        self.fixed_base = fixed

    def add_bone(self, bone: FabrikBone) -> None:
        if not self._bones:
            self._base_location = bone.start.copy()
        self._bones.append(bone)

    def add_consecutive_hinged_bone(
        self,
        direction: np.ndarray,
        length: float,
        joint_type: JointType,
        hinge_axis: np.ndarray,
    ) -> None:
        if not self._bones:
            raise ValueError("Add a base bone before adding consecutive bones")
        unit = _normalise(np.asarray(direction, dtype=float))
        if not unit.any():
            raise ValueError("Bone direction must not be the zero vector")
        start = self._bones[-1].end
        self._bones.append(FabrikBone(start, start + unit * length, joint_type, hinge_axis))

    def _world_hinge(self, index: int) -> Optional[np.ndarray]:
        bone = self._bones[index]
        if bone.joint_type is JointType.BALL or bone.hinge_axis is None:
            return None
        if bone.joint_type is JointType.GLOBAL_HINGE or index == 0:
            return bone.hinge_axis
        inner = self._bones[index - 1].direction
        if not inner.any():
            return bone.hinge_axis
        return rotation_between(FORWARD, inner) @ bone.hinge_axis

    def _constrain(self, index: int, direction: np.ndarray, fallback: np.ndarray) -> np.ndarray:
        hinge = self._world_hinge(index)
        if hinge is None:
            return direction
        projected = _normalise(direction - (direction @ hinge) * hinge)
        if projected.any():
            return projected
        projected = _normalise(fallback - (fallback @ hinge) * hinge)
        return projected if projected.any() else _perpendicular(hinge)

    def _solve_pass(self, target: np.ndarray) -> float:
        bones = self._bones
        last = len(bones) - 1

        for i in range(last, -1, -1):
            bone = bones[i]
            previous = bone.direction
            bone.end = target.copy() if i == last else bones[i + 1].start.copy()
            direction = _normalise(bone.end - bone.start)
            if not direction.any():
                direction = previous
            direction = self._constrain(i, direction, previous)
            bone.start = bone.end - direction * bone.length

        for i, bone in enumerate(bones):
            previous = bone.direction
            if i == 0:
                if self.fixed_base:
                    bone.start = self._base_location.copy()
            else:
                bone.start = bones[i - 1].end.copy()
            direction = _normalise(bone.end - bone.start)
            if not direction.any():
                direction = previous
            direction = self._constrain(i, direction, previous)
            bone.end = bone.start + direction * bone.length

        return float(np.linalg.norm(bones[last].end - target))

    def _snapshot(self) -> List[Tuple[np.ndarray, np.ndarray]]:
        return [(bone.start.copy(), bone.end.copy()) for bone in self._bones]

    def _restore(self, snapshot: Sequence[Tuple[np.ndarray, np.ndarray]]) -> None:
        for bone, (start, end) in zip(self._bones, snapshot):
            bone.start = start.copy()
            bone.end = end.copy()

    def solve_for_target(self, x: float, y: float, z: float) -> float:
        """Move the chain towards ``(x, y, z)`` and return the residual distance."""

        if not self._bones:
            raise ValueError("Cannot solve an empty bone chain")
        target = np.array([x, y, z], dtype=float)

        best_distance = np.inf
        best = self._snapshot()
        last_distance = np.inf
        iterations = 0
        for iterations in range(1, self.max_iterations + 1):
            distance = self._solve_pass(target)
            if distance < best_distance:
                best_distance = distance
                best = self._snapshot()
            if distance <= self.solve_distance_threshold:
                break
            if abs(distance - last_distance) < self.min_iteration_change:
                break
            last_distance = distance

        self._restore(best)
        logger.debug("FABRIK finished after %d iteration(s), residual %.6g", iterations, best_distance)
        return float(best_distance)
