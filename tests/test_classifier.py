import numpy as np
import pytest

from kinematicschef.classifier import (
    ChainIdentifier,
    ClassifierError,
    DhClassifier,
    EulerAngles,
    is_spherical_wrist,
)
from kinematicschef.elements import RevoluteJoint, SphericalWrist
from kinematicschef.kinematics import compose, dh_matrix
from kinematicschef.presets import motomini_config, puma560_config, rx90l_config
from kinematicschef.types import DhParam

PUMA = puma560_config().links
PUMA_WRIST = SphericalWrist(PUMA[3:])

A = DhParam(d=0.0, theta=0.0, r=0.0, alpha=np.pi / 2)
B = DhParam(d=0.0, theta=0.0, r=0.0, alpha=-np.pi / 2)


def random_params(rng, count):
    return [
        DhParam(
            d=float(rng.choice([0.0, rng.uniform(-1, 1)])),
            theta=float(rng.uniform(-np.pi, np.pi)),
            r=float(rng.choice([0.0, rng.uniform(-1, 1)])),
            alpha=float(rng.choice([0.0, np.pi / 2, -np.pi / 2, rng.uniform(-np.pi, np.pi)])),
        )
        for _ in range(count)
    ]


def flatten(elements):
    return [param for element in elements for param in element.dh_params]


def wrist_rotation(params, q):
    return compose(*[dh_matrix(p, qi) for p, qi in zip(params, q)])[:3, :3]


# ----------------------------------------------------------------------
# Chain identification
# ----------------------------------------------------------------------
def test_empty_chain_gives_empty_classification():
    assert ChainIdentifier().identify_chain([]) == ()


@pytest.mark.parametrize("count", [1, 2])
def test_short_chain_is_all_revolute(count):
    params = [A, B][:count]
    elements = ChainIdentifier().identify_chain(params)
    assert len(elements) == count
    assert all(isinstance(e, RevoluteJoint) for e in elements)


def test_puma_classifies_as_three_joints_and_wrist():
    elements = ChainIdentifier().identify_chain(PUMA)
    assert [type(e) for e in elements] == [RevoluteJoint, RevoluteJoint, RevoluteJoint, SphericalWrist]
    assert elements[-1].dh_params == PUMA[3:]


def test_greedy_scan_prefers_first_wrist():
    elements = ChainIdentifier().identify_chain([A, B, A, B])
    assert [type(e) for e in elements] == [SphericalWrist, RevoluteJoint]
    assert elements[0].dh_params == (A, B, A)


@pytest.mark.parametrize("chain", [puma560_config(), rx90l_config(), motomini_config()])
def test_presets_are_partitioned_exactly(chain):
    assert tuple(flatten(ChainIdentifier().identify_chain(chain.links))) == chain.links


def test_random_chains_are_partitioned_exactly():
    rng = np.random.default_rng(7)
    identifier = ChainIdentifier()
    for count in range(0, 12):
        params = random_params(rng, count)
        assert flatten(identifier.identify_chain(params)) == params


def test_offset_axes_are_not_a_wrist():
    shifted = DhParam(d=0.0, theta=0.0, r=0.1, alpha=np.pi / 2)
    assert not is_spherical_wrist([shifted, B, A])
    assert not is_spherical_wrist([A, DhParam(d=0.2, theta=0.0, r=0.0, alpha=-np.pi / 2), A])


def test_parallel_axes_are_not_a_wrist():
    flat = DhParam(d=0.0, theta=0.0, r=0.0, alpha=0.0)
    assert not is_spherical_wrist([flat, A, B])


def test_wrist_check_needs_three_links():
    assert not is_spherical_wrist([A, B])


# ----------------------------------------------------------------------
# Euler angle derivation
# ----------------------------------------------------------------------
def test_euler_angles_recover_joint_values():
    q = (0.3, -0.7, -0.4)
    angles = DhClassifier().derive_euler_angles(PUMA_WRIST, wrist_rotation(PUMA[3:], q))
    assert isinstance(angles, EulerAngles)
    np.testing.assert_allclose(angles.as_array(), q, atol=1e-9)


@pytest.mark.parametrize("q", [(1.2, 0.5, -2.0), (-2.5, 2.0, 0.1), (0.0, -1.5, 3.0)])
def test_euler_angles_reproduce_orientation(q):
    R = wrist_rotation(PUMA[3:], q)
    angles = DhClassifier().derive_euler_angles(PUMA_WRIST, R)
    np.testing.assert_allclose(wrist_rotation(PUMA[3:], angles.as_array()), R, atol=1e-9)


def test_euler_angles_account_for_offsets_and_twist():
    params = (
        DhParam(d=0.3, theta=0.2, r=0.0, alpha=-np.pi / 2),
        DhParam(d=0.0, theta=-0.4, r=0.0, alpha=np.pi / 2),
        DhParam(d=0.1, theta=0.1, r=0.05, alpha=0.6),
    )
    R = wrist_rotation(params, (0.5, 0.9, -1.0))
    angles = DhClassifier().derive_euler_angles(SphericalWrist(params), R)
    np.testing.assert_allclose(wrist_rotation(params, angles.as_array()), R, atol=1e-9)


def test_identity_orientation_is_gimbal_lock():
    with pytest.raises(ClassifierError, match="gimbal lock"):
        DhClassifier().derive_euler_angles(PUMA_WRIST)


def test_non_orthogonal_wrist_is_rejected():
    wrist = SphericalWrist(
        [
            DhParam(d=0.0, theta=0.0, r=0.0, alpha=np.pi / 3),
            DhParam(d=0.0, theta=0.0, r=0.0, alpha=-np.pi / 3),
            DhParam(d=0.0, theta=0.0, r=0.0, alpha=0.0),
        ]
    )
    with pytest.raises(ClassifierError, match="not orthogonal"):
        DhClassifier().derive_euler_angles(wrist, wrist_rotation(PUMA[3:], (0.1, 0.2, 0.3)))


def test_non_concurrent_wrist_is_rejected():
    wrist = SphericalWrist([DhParam(d=0.0, theta=0.0, r=0.1, alpha=np.pi / 2), B, A])
    with pytest.raises(ClassifierError) as excinfo:
        DhClassifier().derive_euler_angles(wrist, wrist_rotation(PUMA[3:], (0.1, 0.2, 0.3)))
    assert "common point" in excinfo.value.reason


def test_invalid_rotation_is_rejected():
    R = 2.0 * wrist_rotation(PUMA[3:], (0.1, 0.2, 0.3))
    with pytest.raises(ClassifierError):
        DhClassifier().derive_euler_angles(PUMA_WRIST, R)


def test_classifier_error_is_a_value_error():
    assert issubclass(ClassifierError, ValueError)
    assert ClassifierError("Wrist 1 invalid.").reason == "Wrist 1 invalid."
