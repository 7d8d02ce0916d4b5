"""Inverse kinematics for serial arms described by DH parameters."""
from .classifier import ChainIdentifier, ClassifierError, DhClassifier, EulerAngles, is_spherical_wrist
from .elements import DhChainElement, RevoluteJoint, SphericalWrist
from .engine import DhInverseSolver, InverseKinematicsEngine
from .fabrik import FabrikBone, FabrikChain, JointType
from .kinematics import compose, dh_matrix, forward_kinematics, link_length
from .solver import FabrikPoseSolver, SolverConfig
from .types import DhChain, DhParam, Frames

__all__ = [
    "DhParam",
    "DhChain",
    "Frames",
    "dh_matrix",
    "compose",
    "forward_kinematics",
    "link_length",
    "RevoluteJoint",
    "SphericalWrist",
    "DhChainElement",
    "ChainIdentifier",
    "DhClassifier",
    "ClassifierError",
    "EulerAngles",
    "is_spherical_wrist",
    "FabrikBone",
    "FabrikChain",
    "JointType",
    "FabrikPoseSolver",
    "SolverConfig",
    "DhInverseSolver",
    "InverseKinematicsEngine",
]
