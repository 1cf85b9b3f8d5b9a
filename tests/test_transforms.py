import math

import numpy as np
import pytest

from teddy_engine.transforms import (
    decompose_transform,
    ortho,
    perspective,
    quat_from_euler,
    quat_rotate,
    quat_to_mat4,
    rotate,
    scale,
    translate,
)


def _compose(t, r, s):
    return translate(t) @ quat_to_mat4(quat_from_euler(r)) @ scale(s)


@pytest.mark.parametrize(
    "t, r, s",
    [
        ((0.0, 0.0, 0.0), (0.0, 0.0, 0.0), (1.0, 1.0, 1.0)),
        ((1.0, -2.0, 3.5), (0.3, -0.2, 1.1), (2.0, 0.5, 3.0)),
        ((-4.0, 0.25, 9.0), (-1.0, 0.7, -2.5), (1.5, 1.5, 0.75)),
    ],
)
def test_decompose_round_trip(t, r, s):
    translation, rotation, scale_out = decompose_transform(_compose(t, r, s))
    assert np.allclose(translation, t)
    assert np.allclose(rotation, r)
    assert np.allclose(scale_out, s)


def test_decompose_clears_perspective_row():
    m = translate((3.0, 4.0, 5.0))
    m[3, 0] = 0.25
    translation, rotation, scale_out = decompose_transform(m)
    assert np.allclose(translation, (3.0, 4.0, 5.0))
    assert np.allclose(rotation, 0.0)
    assert np.allclose(scale_out, 1.0)


def test_decompose_does_not_modify_input():
    m = translate((1.0, 2.0, 3.0))
    m[3, 1] = 0.5
    before = m.copy()
    decompose_transform(m)
    assert np.array_equal(m, before)


def test_decompose_zero_weight_raises():
    m = np.identity(4)
    m[3, 3] = 0.0
    with pytest.raises(ValueError):
        decompose_transform(m)


def test_decompose_wrong_shape_raises():
    with pytest.raises(ValueError):
        decompose_transform(np.identity(3))


def test_translate_moves_points():
    p = np.array([1.0, 2.0, 3.0, 1.0])
    v = (0.5, -1.0, 4.0)
    assert np.allclose((translate(v) @ p)[:3], p[:3] + np.array(v))


@pytest.mark.parametrize("axis", [(0.0, 0.0, 1.0), (1.0, 1.0, 0.0), (2.0, -1.0, 3.0)])
def test_rotate_is_proper_rotation_fixing_axis(axis):
    m = rotate(0.8, axis)[:3, :3]
    assert np.allclose(m @ m.T, np.identity(3))
    assert math.isclose(np.linalg.det(m), 1.0)
    assert np.allclose(m @ np.array(axis), axis)


def test_rotate_about_z_matches_quaternion_roll():
    angle = 0.6
    assert np.allclose(rotate(angle, (0, 0, 1)), quat_to_mat4(quat_from_euler((0, 0, angle))))


def test_scale_is_diagonal():
    m = scale((2.0, 3.0, 4.0))
    assert np.allclose(np.diag(m), (2.0, 3.0, 4.0, 1.0))
    assert np.count_nonzero(m - np.diag(np.diag(m))) == 0


@pytest.mark.parametrize("euler", [(0.1, 0.2, 0.3), (-1.2, 0.4, 2.0), (0.0, 1.5, 0.0)])
def test_quaternion_is_unit_and_rotation_agrees_with_matrix(euler):
    q = quat_from_euler(euler)
    assert math.isclose(np.linalg.norm(q), 1.0)
    v = np.array([0.3, -1.0, 2.0])
    assert np.allclose(quat_rotate(q, v), quat_to_mat4(q)[:3, :3] @ v)


def test_ortho_maps_box_to_unit_cube():
    left, right, bottom, top, near, far = -2.0, 6.0, -1.0, 3.0, -1.0, 1.0
    m = ortho(left, right, bottom, top, near, far)
    low = m @ np.array([left, bottom, -near, 1.0])
    high = m @ np.array([right, top, -far, 1.0])
    assert np.allclose(low, (-1.0, -1.0, -1.0, 1.0))
    assert np.allclose(high, (1.0, 1.0, 1.0, 1.0))


def test_perspective_maps_clip_planes_to_depth_range():
    near, far = 0.1, 100.0
    m = perspective(math.radians(45.0), 1.5, near, far)
    near_clip = m @ np.array([0.0, 0.0, -near, 1.0])
    far_clip = m @ np.array([0.0, 0.0, -far, 1.0])
    assert math.isclose(near_clip[2] / near_clip[3], -1.0)
    assert math.isclose(far_clip[2] / far_clip[3], 1.0)