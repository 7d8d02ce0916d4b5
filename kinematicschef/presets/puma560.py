"""PUMA 560 preset configuration (standard DH, metres)."""
from __future__ import annotations

import numpy as np

from ..types import DhChain, DhParam, Frames


def puma560_config() -> DhChain:
    dh = (
        DhParam(d=0.0, theta=0.0, r=0.0, alpha=np.pi / 2),
        DhParam(d=0.0, theta=0.0, r=0.4318, alpha=0.0),
        DhParam(d=0.15005, theta=0.0, r=0.0203, alpha=-np.pi / 2),
        # Joints 4-6 form a spherical wrist: concurrent axes, zero offsets.
        DhParam(d=0.4318, theta=0.0, r=0.0, alpha=np.pi / 2),
        DhParam(d=0.0, theta=0.0, r=0.0, alpha=-np.pi / 2),
        DhParam(d=0.0, theta=0.0, r=0.0, alpha=0.0),
    )
    return DhChain(links=dh, frames=Frames(T_base=np.eye(4), T_tool=np.eye(4)), name="PUMA 560")
