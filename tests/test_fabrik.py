import numpy as np
import pytest

from kinematicschef.fabrik import FabrikBone, FabrikChain, JointType, rotation_between

UP = np.array([0.0, 0.0, 1.0])
X = np.array([1.0, 0.0, 0.0])


def hinged_chain(count=4, length=1.0, **kwargs):
    chain = FabrikChain(**kwargs)
    chain.set_fixed_base_mode(True)
    chain.add_bone(FabrikBone(np.zeros(3), X * length))
    for _ in range(count - 1):
        chain.add_consecutive_hinged_bone(X, length, JointType.LOCAL_HINGE, UP)
    return chain


def test_bone_direction_and_length():
    bone = FabrikBone([0.0, 0.0, 0.0], [0.0, 3.0, 4.0])
    assert bone.length == pytest.approx(5.0)
    np.testing.assert_allclose(bone.direction, [0.0, 0.6, 0.8])


def test_zero_length_bone_has_zero_direction():
    np.testing.assert_allclose(FabrikBone(np.ones(3), np.ones(3)).direction, np.zeros(3))


def test_single_bone_reaches_target_on_sphere():
    chain = FabrikChain()
    chain.add_bone(FabrikBone(np.zeros(3), X * 2.0))
    assert chain.solve_for_target(0.0, 0.0, 2.0) == pytest.approx(0.0, abs=1e-12)
    np.testing.assert_allclose(chain.directions[0], UP, atol=1e-12)


def test_consecutive_bone_needs_a_base_bone():
    with pytest.raises(ValueError):
        FabrikChain().add_consecutive_hinged_bone(X, 1.0, JointType.LOCAL_HINGE, UP)


def test_zero_direction_is_rejected():
    chain = hinged_chain(1)
    with pytest.raises(ValueError):
        chain.add_consecutive_hinged_bone(np.zeros(3), 1.0, JointType.BALL, UP)


def test_empty_chain_cannot_be_solved():
    with pytest.raises(ValueError):
        FabrikChain().solve_for_target(1.0, 0.0, 0.0)


def test_at_least_one_iteration_is_required():
    with pytest.raises(ValueError):
        FabrikChain(max_iterations=0)


def test_solve_preserves_lengths_and_fixed_base():
    chain = hinged_chain(4, length=1.5, solve_distance_threshold=1e-6, min_iteration_change=0.0)
    chain.solve_for_target(1.0, 2.0, 2.5)
    bones = chain.bones
    np.testing.assert_allclose(bones[0].start, np.zeros(3))
    for bone in bones:
        assert np.linalg.norm(bone.end - bone.start) == pytest.approx(1.5)
    for inner, outer in zip(bones[:-1], bones[1:]):
        np.testing.assert_allclose(inner.end, outer.start)


def test_residual_never_grows_with_more_iterations():
    errors = []
    for iterations in range(1, 15):
        chain = hinged_chain(4, max_iterations=iterations, solve_distance_threshold=0.0, min_iteration_change=0.0)
        errors.append(chain.solve_for_target(1.5, 1.0, 2.0))
    assert all(e >= 0.0 for e in errors)
    assert all(later <= earlier for earlier, later in zip(errors, errors[1:]))


def test_global_hinge_keeps_bone_in_plane():
    chain = FabrikChain(solve_distance_threshold=1e-6, min_iteration_change=0.0)
    chain.add_bone(FabrikBone(np.zeros(3), X))
    chain.add_consecutive_hinged_bone(X, 1.0, JointType.GLOBAL_HINGE, UP)
    chain.solve_for_target(0.5, 0.5, 1.2)
    assert chain.directions[1] @ UP == pytest.approx(0.0, abs=1e-9)


def test_local_hinge_is_perpendicular_to_inner_bones_up_axis():
    chain = hinged_chain(2, solve_distance_threshold=1e-6, min_iteration_change=0.0)
    chain.solve_for_target(0.3, 0.4, 1.5)
    inner, outer = chain.directions
    hinge = rotation_between(X, inner) @ UP
    assert outer @ hinge == pytest.approx(0.0, abs=1e-9)


@pytest.mark.parametrize(
    "a, b",
    [
        (X, UP),
        (X, X),
        (X, -X),
        (UP, np.array([0.0, -0.6, 0.8])),
    ],
)
def test_rotation_between_maps_a_onto_b(a, b):
    R = rotation_between(a, b)
    np.testing.assert_allclose(R @ a, b, atol=1e-12)
    np.testing.assert_allclose(R.T @ R, np.eye(3), atol=1e-12)
