"""Inverse kinematics engine orchestrating classification and solving."""
from __future__ import annotations

import logging
from typing import Protocol, Sequence, Tuple

import numpy as np

from .classifier import ChainIdentifier, DhClassifier
from .elements import DhChainElement, RevoluteJoint, SphericalWrist
from .kinematics import forward_kinematics
from .solver import FabrikPoseSolver
from .types import DhChain

logger = logging.getLogger(__name__)


class DhInverseSolver(Protocol):
    """Anything that maps a target pose to joint angles for a DH chain."""

    def inverse_kinematics(self, target: np.ndarray, joint_space_vector: np.ndarray, chain: DhChain) -> np.ndarray:
        ...


class InverseKinematicsEngine:
    """Computes joint angles for a DH chain.

    The whole chain is solved iteratively for the target position. When the
    target is a 4x4 pose, every spherical wrist found in the chain is then
    re-solved in closed form for the target orientation. A wrist that cannot be
    solved analytically raises :class:`~kinematicschef.classifier.ClassifierError`
    instead of falling back to the iterative angles.

    The iterative angles are unsigned angles between consecutive bones, not DH
    joint values. Forward kinematics of the returned vector therefore does not
    reproduce the solved position, and the returned solve error describes the
    bone chain rather than that vector. The wrist orientation is exact relative
    to the arm angles it is given.
    """

    def __init__(
        self,
        chain_identifier: ChainIdentifier | None = None,
        dh_classifier: DhClassifier | None = None,
        pose_solver: FabrikPoseSolver | None = None,
    ):
        self.chain_identifier = ChainIdentifier() if chain_identifier is None else chain_identifier
        self.dh_classifier = DhClassifier() if dh_classifier is None else dh_classifier
        self.pose_solver = FabrikPoseSolver() if pose_solver is None else pose_solver

    def inverse_kinematics(self, target: np.ndarray, joint_space_vector: np.ndarray, chain: DhChain) -> np.ndarray:
        """Calculate the joint angles necessary to meet ``target``."""

        return self.inverse_kinematics_with_error(target, joint_space_vector, chain)[0]

    def inverse_kinematics_with_error(
        self, target: np.ndarray, joint_space_vector: np.ndarray, chain: DhChain
    ) -> Tuple[np.ndarray, float]:
        """Calculate the joint angles necessary to meet ``target`` and the solve error.

        :param target: 3-vector position or 4x4 homogeneous pose.
        :param joint_space_vector: current joint values, one per link.
        :param chain: the DH description of the arm.
        """

        q = np.asarray(joint_space_vector, dtype=float)
        if q.shape != (chain.dof,):
            raise ValueError("The joint angles and DH params must have equal size.")

        elements = self.chain_identifier.identify_chain(chain.links)
        covered = tuple(param for element in elements for param in element.dh_params)
        if covered != chain.links:
            raise ValueError("Classification does not partition the chain links in order.")

        angles, error = self.pose_solver.solve(target, q, chain)

        pose = np.asarray(target, dtype=float)
        if pose.shape != (4, 4):
            return angles, error
        return self._solve_wrists(pose, chain, elements, np.array(angles, dtype=float)), error

    def _solve_wrists(
        self,
        pose: np.ndarray,
        chain: DhChain,
        elements: Sequence[DhChainElement],
        angles: np.ndarray,
    ) -> np.ndarray:
        R_goal = pose[:3, :3] @ np.asarray(chain.frames.T_tool, dtype=float)[:3, :3].T

        offset = 0
        for element in elements:
            size = len(element.dh_params)
            if isinstance(element, RevoluteJoint):
                pass
            elif isinstance(element, SphericalWrist):
                Ts = forward_kinematics(chain, angles, with_tool=False)
                R_before = Ts[offset][:3, :3]
                R_after = Ts[offset + size][:3, :3].T @ Ts[-1][:3, :3]
                orientation = R_before.T @ R_goal @ R_after.T
                euler = self.dh_classifier.derive_euler_angles(element, orientation)
                angles[offset : offset + size] = euler.as_array()
                logger.debug("Wrist at link %d solved analytically: %s", offset, euler)
            else:
                raise TypeError(f"Unsupported chain element: {element!r}")
            offset += size
        return angles
