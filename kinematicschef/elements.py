"""Kinematic substructures a DH chain is partitioned into."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Union

from .types import DhParam


def _checked(dh_params: Iterable[DhParam], count: int, kind: str) -> tuple[DhParam, ...]:
    params = tuple(dh_params)
    if len(params) != count:
        raise ValueError(f"A {kind} needs exactly {count} DH param(s), got {len(params)}")
    return params


@dataclass(frozen=True)
class RevoluteJoint:
    """A single rotational degree of freedom."""

    dh_params: tuple[DhParam, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "dh_params", _checked(self.dh_params, 1, "revolute joint"))


@dataclass(frozen=True)
class SphericalWrist:
    """Three consecutive revolute joints whose axes meet at one point."""

    dh_params: tuple[DhParam, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "dh_params", _checked(self.dh_params, 3, "spherical wrist"))


DhChainElement = Union[RevoluteJoint, SphericalWrist]
