"""Volume, area and shape index of closed triangle meshes."""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

# Normalisation so that a sphere has a shape index of one.
_SPHERE_SHAPE_CONSTANT = 2.199085233


@dataclass(frozen=True)
class VolumeProperties:
    """Measures of a closed triangle mesh."""

    surface_area: float
    volume: float
    signed_volume: float
    centroid: tuple[float, float, float]
    normalized_shape_index: float


def _sub(a: Sequence[float], b: Sequence[float]) -> tuple[float, float, float]:
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def _cross(a: Sequence[float], b: Sequence[float]) -> tuple[float, float, float]:
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def _dot(a: Sequence[float], b: Sequence[float]) -> float:
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def compute_volume_properties(
    points: Iterable[Sequence[float]], triangles: Iterable[Sequence[int]]
) -> VolumeProperties:
    """Measure the volume, surface area, centroid and shape index of a mesh.

    The volume follows the discrete divergence theorem and assumes a closed
    surface. Only triangles are accepted.
    """
    pts = [tuple(float(c) for c in p) for p in points]
    cells = [tuple(int(v) for v in t) for t in triangles]
    if not pts or not cells:
        raise ValueError("no data to measure")
    for p in pts:
        if len(p) != 3:
            raise ValueError(f"a point needs 3 coordinates, got {len(p)}")

    count = len(pts)
    centroid = (
        sum(p[0] for p in pts) / count,
        sum(p[1] for p in pts) / count,
        sum(p[2] for p in pts) / count,
    )

    area = 0.0
    signed_volume = 0.0
    for cell in cells:
        if len(cell) != 3:
            raise ValueError(f"only triangles are supported, got a cell of {len(cell)}")
        p1, p2, p3 = (pts[i] for i in cell)
        u = _sub(p1, centroid)
        v = _sub(p2, centroid)
        w = _sub(p3, centroid)
        signed_volume += _dot(_cross(v, w), u) / 6.0
        n = _cross(_sub(p2, p1), _sub(p3, p1))
        area += 0.5 * math.sqrt(_dot(n, n))

    volume = abs(signed_volume)
    if volume > 0:
        shape_index = math.sqrt(area) / volume ** (1.0 / 3.0) / _SPHERE_SHAPE_CONSTANT
    else:
        shape_index = math.inf
    return VolumeProperties(
        surface_area=area,
        volume=volume,
        signed_volume=signed_volume,
        centroid=centroid,
        normalized_shape_index=shape_index,
    )