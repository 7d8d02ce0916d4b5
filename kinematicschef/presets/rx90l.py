"""Staubli RX-90L preset configuration."""
from __future__ import annotations

import numpy as np

from ..types import DhChain, DhParam, Frames


def rx90l_config() -> DhChain:
    dh = (
        DhParam(d=0.350, theta=0.0, r=0.000, alpha=-np.pi / 2),
        DhParam(d=0.0, theta=-np.pi / 2, r=0.450, alpha=0.0),
        DhParam(d=0.0, theta=np.pi / 2, r=0.050, alpha=-np.pi / 2),
        DhParam(d=0.0, theta=0.0, r=0.425, alpha=np.pi / 2),
        DhParam(d=0.0, theta=0.0, r=0.000, alpha=-np.pi / 2),
        DhParam(d=0.100, theta=0.0, r=0.000, alpha=0.0),
    )
    return DhChain(links=dh, frames=Frames(T_base=np.eye(4), T_tool=np.eye(4)), name="Staubli RX-90L")
