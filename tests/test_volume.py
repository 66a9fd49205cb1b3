import math

import pytest

from trimeshkit.volume import compute_volume_properties

CUBE_POINTS = [
    (0, 0, 0), (1, 0, 0), (1, 1, 0), (0, 1, 0),
    (0, 0, 1), (1, 0, 1), (1, 1, 1), (0, 1, 1),
]
CUBE_TRIANGLES = [
    (0, 2, 1), (0, 3, 2),
    (4, 5, 6), (4, 6, 7),
    (0, 1, 5), (0, 5, 4),
    (3, 7, 6), (3, 6, 2),
    (0, 4, 7), (0, 7, 3),
    (1, 2, 6), (1, 6, 5),
]


def test_unit_cube():
    props = compute_volume_properties(CUBE_POINTS, CUBE_TRIANGLES)
    assert props.volume == pytest.approx(1.0)
    assert props.signed_volume == pytest.approx(1.0)
    assert props.surface_area == pytest.approx(6.0)
    assert props.centroid == pytest.approx((0.5, 0.5, 0.5))


def test_reversed_orientation_flips_signed_volume():
    forward = compute_volume_properties(CUBE_POINTS, CUBE_TRIANGLES)
    reverse = compute_volume_properties(
        CUBE_POINTS, [tuple(reversed(t)) for t in CUBE_TRIANGLES]
    )
    assert reverse.signed_volume == pytest.approx(-forward.signed_volume)
    assert reverse.volume == pytest.approx(forward.volume)
    assert reverse.surface_area == pytest.approx(forward.surface_area)


def test_scaling_behaviour():
    base = compute_volume_properties(CUBE_POINTS, CUBE_TRIANGLES)
    scaled_points = [tuple(3 * c for c in p) for p in CUBE_POINTS]
    scaled = compute_volume_properties(scaled_points, CUBE_TRIANGLES)
    assert scaled.volume == pytest.approx(27 * base.volume)
    assert scaled.surface_area == pytest.approx(9 * base.surface_area)
    assert scaled.normalized_shape_index == pytest.approx(base.normalized_shape_index)


def test_translation_invariance():
    base = compute_volume_properties(CUBE_POINTS, CUBE_TRIANGLES)
    moved_points = [(x + 5, y - 2, z + 7) for x, y, z in CUBE_POINTS]
    moved = compute_volume_properties(moved_points, CUBE_TRIANGLES)
    assert moved.signed_volume == pytest.approx(base.signed_volume)
    assert moved.surface_area == pytest.approx(base.surface_area)
    assert moved.centroid == pytest.approx(
        (base.centroid[0] + 5, base.centroid[1] - 2, base.centroid[2] + 7)
    )


def test_shape_index_of_cube_exceeds_sphere():
    props = compute_volume_properties(CUBE_POINTS, CUBE_TRIANGLES)
    assert props.normalized_shape_index > 1.0


def test_flat_surface_has_infinite_shape_index():
    props = compute_volume_properties(
        [(0, 0, 0), (1, 0, 0), (0, 1, 0)], [(0, 1, 2)]
    )
    assert props.volume == pytest.approx(0.0)
    assert math.isinf(props.normalized_shape_index)


def test_empty_input_raises():
    with pytest.raises(ValueError):
        compute_volume_properties([], [])
    with pytest.raises(ValueError):
        compute_volume_properties(CUBE_POINTS, [])


def test_non_triangle_raises():
    with pytest.raises(ValueError):
        compute_volume_properties(CUBE_POINTS, [(0, 1, 2, 3)])