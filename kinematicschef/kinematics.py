"""Frame transformation math over DH chains."""
from __future__ import annotations

from typing import List, Sequence, Tuple

import numpy as np

from .types import DhChain, DhParam


def dh_matrix(dh_param: DhParam, q: float = 0.0) -> np.ndarray:
    """Homogeneous transform ``Rz(theta + q) Tz(d) Tx(r) Rx(alpha)`` of one link."""

    theta = dh_param.theta + q
    ca = np.cos(dh_param.alpha)
    sa = np.sin(dh_param.alpha)
    ct = np.cos(theta)
    st = np.sin(theta)
    return np.array(
        [
            [ct, -st * ca, st * sa, dh_param.r * ct],
            [st, ct * ca, -ct * sa, dh_param.r * st],
            [0.0, sa, ca, dh_param.d],
            [0.0, 0.0, 0.0, 1.0],
        ],
        dtype=float,
    )


def compose(*transforms: np.ndarray) -> np.ndarray:
    T = np.eye(4)
    for transform in transforms:
        T = T @ transform
    return T


def point_matrix(x: float, y: float, z: float) -> np.ndarray:
    T = np.eye(4)
    T[:3, 3] = (x, y, z)
    return T


def translation(T: np.ndarray) -> np.ndarray:
    return np.array(T[:3, 3], dtype=float)


def link_length(dh_param: DhParam, default_length: float) -> float:
    """Length of the link a DH parameter describes.

    The origin is moved by the link's frame transformation and the distance it
    travelled is the link length. A link that contributes no translation (a
    pure rotation) resolves to ``default_length`` so that downstream bone
    chains never contain a zero-length segment.
    """

    before = point_matrix(0.0, 0.0, 0.0)
    after = before @ dh_matrix(dh_param)
    length = float(np.linalg.norm(translation(after) - translation(before)))
    if np.isclose(length, 0.0):
        return float(default_length)
    return length


def forward_kinematics(chain: DhChain, q: np.ndarray, with_tool: bool = True) -> List[np.ndarray]:
    """Return homogeneous transforms for base and every joint frame.

    ``Ts[i]`` is the frame after link ``i``; the tool frame is applied to the
    last entry unless ``with_tool`` is false.
    """

    q = np.asarray(q, dtype=float)
    if q.shape != (chain.dof,):
        raise ValueError(f"Expected q of shape ({chain.dof},), got {q.shape}")
    T = np.array(chain.frames.T_base, dtype=float)
    Ts = [T.copy()]
    for link, qi in zip(chain.links, q):
        T = T @ dh_matrix(link, float(qi))
        Ts.append(T.copy())
    if with_tool:
        Ts[-1] = Ts[-1] @ np.array(chain.frames.T_tool, dtype=float)
    return Ts


def joint_axes(dh_params: Sequence[DhParam]) -> List[Tuple[np.ndarray, np.ndarray]]:
    """Rotation axis of every link as ``(point, unit direction)``.

    Axes are expressed in the base frame of the first link and evaluated at the
    links' theta offsets. Link ``i`` rotates about the z axis of the frame that
    precedes it, so the last link's own parameters never move an axis.
    """

    T = np.eye(4)
    axes = []
    for dh_param in dh_params:
        axes.append((translation(T), np.array(T[:3, 2], dtype=float)))
        T = T @ dh_matrix(dh_param)
    return axes
