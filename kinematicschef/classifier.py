"""Classification of DH chains into kinematic substructures."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .elements import DhChainElement, RevoluteJoint, SphericalWrist
from .kinematics import joint_axes
from .types import DhParam

logger = logging.getLogger(__name__)

WRIST_SIZE = 3


class ClassifierError(ValueError):
    """Raised when a substructure cannot be solved analytically."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


@dataclass(frozen=True)
class EulerAngles:
    """ZYZ Euler angles of a spherical wrist, expressed as its joint values."""

    phi: float
    theta: float
    psi: float

    def as_array(self) -> np.ndarray:
        return np.array([self.phi, self.theta, self.psi], dtype=float)


def _closest_points(
    p1: np.ndarray, d1: np.ndarray, p2: np.ndarray, d2: np.ndarray, tolerance: float
) -> Optional[Tuple[np.ndarray, np.ndarray]]:
    """Closest points of two lines, ``None`` when they are parallel."""

    if np.linalg.norm(np.cross(d1, d2)) <= tolerance:
        return None
    w0 = p1 - p2
    a = d1 @ d1
    b = d1 @ d2
    c = d2 @ d2
    d = d1 @ w0
    e = d2 @ w0
    denom = a * c - b * b
    s = (b * e - c * d) / denom
    t = (a * e - b * d) / denom
    return p1 + s * d1, p2 + t * d2


def is_spherical_wrist(dh_params: Sequence[DhParam], tolerance: float = 1e-6) -> bool:
    """Check whether three links have concurrent rotation axes.

    Consecutive axes must not be parallel, the first two must intersect and the
    third must pass through that intersection.
    """

    if len(dh_params) != WRIST_SIZE:
        return False
    (p1, d1), (p2, d2), (p3, d3) = joint_axes(dh_params)

    closest = _closest_points(p1, d1, p2, d2, tolerance)
    if closest is None:
        return False
    c1, c2 = closest
    if np.linalg.norm(c1 - c2) > tolerance:
        return False
    if np.linalg.norm(np.cross(d2, d3)) <= tolerance:
        return False

    center = 0.5 * (c1 + c2)
    return bool(np.linalg.norm(np.cross(center - p3, d3)) <= tolerance)


class ChainIdentifier:
    """Partitions a DH parameter sequence into revolute joints and wrists.

    The scan is greedy: whenever the three links at the current position form a
    spherical wrist they are consumed as one, even if a later window would also
    qualify.
    """

    def __init__(self, tolerance: float = 1e-6):
        self.tolerance = tolerance

    def identify_chain(self, dh_params: Sequence[DhParam]) -> Tuple[DhChainElement, ...]:
        params = tuple(dh_params)
        elements: List[DhChainElement] = []
        index = 0
        while index < len(params):
            window = params[index : index + WRIST_SIZE]
            if len(window) == WRIST_SIZE and is_spherical_wrist(window, self.tolerance):
                elements.append(SphericalWrist(window))
                index += WRIST_SIZE
            else:
                elements.append(RevoluteJoint(params[index : index + 1]))
                index += 1
        logger.debug("Classified %d links as %s", len(params), [type(e).__name__ for e in elements])
        return tuple(elements)


def _rot_x(angle: float) -> np.ndarray:
    c, s = np.cos(angle), np.sin(angle)
    return np.array([[1.0, 0.0, 0.0], [0.0, c, -s], [0.0, s, c]])


def _wrap(angle: float) -> float:
    return float(np.arctan2(np.sin(angle), np.cos(angle)))


class DhClassifier:
    """Derives closed-form joint angles for classified substructures."""

    def __init__(self, tolerance: float = 1e-6):
        self.tolerance = tolerance

    def derive_euler_angles(
        self, wrist: SphericalWrist, orientation: np.ndarray | None = None
    ) -> EulerAngles:
        """Joint values that give a spherical wrist the requested orientation.

        ``orientation`` is the rotation of the wrist's last frame relative to the
        wrist's base frame (identity when omitted). The wrist must follow the ZYZ
        convention: ``alpha`` of the first link is ``±pi/2`` and the second link
        undoes it. The wrist rotation is then
        ``Rz(th1) Ry(s * th2) Rz(th3) Rx(alpha3)`` with ``s = -sign(alpha1)``.

        Raises :class:`ClassifierError` for non-concurrent or non-orthogonal
        axes, an invalid rotation matrix, or a gimbal-lock orientation.
        """

        first, second, third = wrist.dh_params
        tol = self.tolerance

        if not is_spherical_wrist(wrist.dh_params, tol):
            raise ClassifierError("Wrist axes do not intersect at a common point.")
        if not np.isclose(abs(first.alpha), np.pi / 2, atol=tol) or not np.isclose(
            second.alpha, -first.alpha, atol=tol
        ):
            raise ClassifierError(
                f"Wrist axes are not orthogonal in the ZYZ convention "
                f"(alpha1={first.alpha:.6g}, alpha2={second.alpha:.6g})."
            )

        R = np.eye(3) if orientation is None else np.asarray(orientation, dtype=float)
        if R.shape != (3, 3):
            raise ClassifierError(f"Expected a 3x3 orientation, got shape {R.shape}.")
        if not np.allclose(R.T @ R, np.eye(3), atol=1e-6) or not np.isclose(np.linalg.det(R), 1.0, atol=1e-6):
            raise ClassifierError("Orientation is not a proper rotation matrix.")

        M = R @ _rot_x(third.alpha).T
        sin_b = np.hypot(M[0, 2], M[1, 2])
        if sin_b <= tol:
            raise ClassifierError("Wrist is in gimbal lock for the requested orientation.")
        a = np.arctan2(M[1, 2], M[0, 2])
        b = np.arctan2(sin_b, M[2, 2])
        c = np.arctan2(M[2, 1], -M[2, 0])

        s = -np.sign(first.alpha)
        return EulerAngles(
            phi=_wrap(a - first.theta),
            theta=_wrap(s * b - second.theta),
            psi=_wrap(c - third.theta),
        )
