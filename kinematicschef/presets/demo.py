"""Demo utilities that solve and plot preset chains."""

from __future__ import annotations

from typing import Iterable

import matplotlib.pyplot as plt
import numpy as np

from ..engine import InverseKinematicsEngine
from ..solver import FabrikPoseSolver, SolverConfig, target_position
from ..types import DhChain

DEMO_CONFIG = SolverConfig(
    default_bone_length=0.1,
    max_iterations=100,
    solve_distance_threshold=1e-3,
    min_iteration_change=1e-6,
)


class ChainDemo:
    """Convenience wrapper exposing IK solves and plots for one chain."""

    def __init__(self, chain: DhChain, config: SolverConfig = DEMO_CONFIG) -> None:
        self.chain = chain
        self.pose_solver = FabrikPoseSolver(config)
        self.engine = InverseKinematicsEngine(pose_solver=self.pose_solver)

    # ------------------------------------------------------------------
    # Inverse kinematics helpers
    # ------------------------------------------------------------------
    def solve(self, target: np.ndarray) -> tuple[np.ndarray, float]:
        return self.engine.inverse_kinematics_with_error(target, np.zeros(self.chain.dof), self.chain)

    def solve_path(self, targets: Iterable[np.ndarray]) -> tuple[np.ndarray, np.ndarray]:
        """Solve every target in turn; returns stacked angles and errors."""

        qs, errors = [], []
        for target in targets:
            q, error = self.solve(target)
            qs.append(q)
            errors.append(error)
        return np.array(qs), np.array(errors)

    def bone_points(self, target: np.ndarray) -> np.ndarray:
        """Joint positions of the solved bone chain, base first."""

        bone_chain = self.pose_solver.build_bone_chain(self.chain)
        bone_chain.solve_for_target(*target_position(target))
        bones = bone_chain.bones
        return np.array([bones[0].start] + [bone.end for bone in bones], dtype=float)

    @staticmethod
    def build_circle(center=(0.4, 0.0, 0.3), radius: float = 0.1, samples: int = 60) -> np.ndarray:
        """Horizontal circular path of target positions."""

        t = np.linspace(0.0, 2.0 * np.pi, samples, endpoint=False)
        xs = center[0] + radius * np.cos(t)
        ys = center[1] + radius * np.sin(t)
        zs = np.full_like(t, center[2])
        return np.stack([xs, ys, zs], axis=1)

    # ------------------------------------------------------------------
    # Visualisation helpers
    # ------------------------------------------------------------------
    def plot_solution(self, target: np.ndarray, title: str | None = None):
        pts = self.bone_points(target)
        goal = target_position(target)
        fig = plt.figure(figsize=(7, 6))
        ax = fig.add_subplot(111, projection="3d")
        ax.plot(pts[:, 0], pts[:, 1], pts[:, 2], lw=3, marker="o")
        ax.scatter([goal[0]], [goal[1]], [goal[2]], s=40, c="r")
        ax.set_xlabel("X [m]")
        ax.set_ylabel("Y [m]")
        ax.set_zlabel("Z [m]")
        ax.set_title(title or f"{self.chain.name} solution")
        plt.show()
        return fig

    def plot_path(self, q: np.ndarray, errors: np.ndarray):
        fig, axs = plt.subplots(2, 1, figsize=(10, 6), sharex=True)
        samples = np.arange(q.shape[0])
        axs[0].plot(samples, np.rad2deg(q))
        axs[0].set_ylabel("q [deg]")
        axs[1].plot(samples, errors)
        axs[1].set_ylabel("solve error [m]")
        axs[1].set_xlabel("sample")
        for ax in axs:
            ax.grid(True)
        plt.tight_layout()
        plt.show()
        return fig
