"""Yaskawa MotoMini preset configuration."""
from __future__ import annotations

import numpy as np

from ..types import DhChain, DhParam, Frames


def motomini_config() -> DhChain:
    dh = (
        DhParam(d=0.068, theta=0.0, r=0.000, alpha=-np.pi / 2),
        DhParam(d=0.0, theta=-np.pi / 2, r=0.103, alpha=0.0),
        DhParam(d=0.0, theta=np.pi / 2, r=0.165, alpha=-np.pi / 2),
        DhParam(d=0.0, theta=0.0, r=0.165, alpha=np.pi / 2),
        DhParam(d=0.0, theta=0.0, r=0.000, alpha=-np.pi / 2),
        # The flange offset is carried by d6, so the tool frame stays identity.
        DhParam(d=0.040, theta=0.0, r=0.000, alpha=0.0),
    )
    return DhChain(links=dh, frames=Frames(T_base=np.eye(4), T_tool=np.eye(4)), name="Yaskawa MotoMini")
