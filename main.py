"""PUMA 560 inverse kinematics demos executed directly without a command-line parser."""

from __future__ import annotations

import logging

import numpy as np

from kinematicschef import ClassifierError
from kinematicschef.kinematics import point_matrix
from kinematicschef.presets import ChainDemo, puma560_config


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    demo = ChainDemo(puma560_config())

    # Position-only target: the iterative solve is returned as-is.
    target = np.array([0.3, 0.2, 0.4])
    q, error = demo.solve(target)
    print("q [deg]:", np.round(np.rad2deg(q), 2))
    print("solve error:", error)
    demo.plot_solution(target)

    # Full pose target: the wrist is solved in closed form for the orientation.
    pose = point_matrix(0.3, 0.2, 0.4)
    pose[:3, :3] = np.array([[0.0, 0.0, 1.0], [0.0, 1.0, 0.0], [-1.0, 0.0, 0.0]])
    try:
        q_pose, error_pose = demo.solve(pose)
    except ClassifierError as exc:
        print("wrist could not be solved:", exc.reason)
    else:
        print("q [deg] with orientation:", np.round(np.rad2deg(q_pose), 2))
        print("solve error:", error_pose)

    q_path, errors = demo.solve_path(demo.build_circle())
    demo.plot_path(q_path, errors)


if __name__ == "__main__":
    main()
