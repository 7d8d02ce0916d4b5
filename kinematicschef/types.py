"""Shared dataclasses for DH chain descriptions."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

import numpy as np


@dataclass(frozen=True)
class DhParam:
    """Standard Denavit–Hartenberg parameters of one link."""

    d: float
    theta: float
    r: float
    alpha: float


@dataclass(frozen=True)
class Frames:
    """Base and tool frames for a chain description."""

    T_base: np.ndarray = field(default_factory=lambda: np.eye(4))
    T_tool: np.ndarray = field(default_factory=lambda: np.eye(4))


@dataclass(frozen=True)
class DhChain:
    """Read-only serial chain described by DH parameters."""

    links: tuple[DhParam, ...]
    frames: Frames = field(default_factory=Frames)
    name: str = ""

    @classmethod
    def from_params(cls, params: Iterable[DhParam], name: str = "") -> "DhChain":
        return cls(links=tuple(params), name=name)

    @property
    def dof(self) -> int:
        return len(self.links)
