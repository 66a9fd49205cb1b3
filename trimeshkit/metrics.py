"""Clustering metrics for discrete centroidal Voronoi remeshing.

An item is either a triangle or a vertex of a surface, carrying a weight
(its area) and weighted attributes. A cluster accumulates the attributes
of its items so that its energy and centroid can be updated in constant
time when items are moved between clusters.
"""

from __future__ import annotations

import copy
import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from .mesh import SurfaceBase

_ISOTROPIC_CLAMP_RATIO = 100000.0
_L21_CLAMP_RATIO = 10000.0


def _zeros() -> list[float]:
    return [0.0, 0.0, 0.0]


def _sub3(a: Sequence[float], b: Sequence[float]) -> list[float]:
    return [a[0] - b[0], a[1] - b[1], a[2] - b[2]]


def _cross(a: Sequence[float], b: Sequence[float]) -> list[float]:
    return [
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    ]


def _norm(a: Sequence[float]) -> float:
    return math.sqrt(a[0] * a[0] + a[1] * a[1] + a[2] * a[2])


def _normalized(a: Sequence[float]) -> list[float]:
    length = _norm(a)
    if length == 0:
        return list(a)
    return [c / length for c in a]


def _distance2(a: Sequence[float], b: Sequence[float]) -> float:
    d = _sub3(a, b)
    return d[0] * d[0] + d[1] * d[1] + d[2] * d[2]


def _triangle_normal_direction(p1, p2, p3) -> list[float]:
    """Unnormalised normal of a triangle, its length twice the area."""
    return _cross(_sub3(p3, p2), _sub3(p1, p2))


def _triangle_area(p1, p2, p3) -> float:
    return 0.5 * _norm(_triangle_normal_direction(p1, p2, p3))


def _triangle_points(mesh: SurfaceBase, face: int):
    v1, v2, v3 = mesh.face_vertices(face)[:3]
    return mesh.point(v1), mesh.point(v2), mesh.point(v3)


def _vertex_faces(mesh: SurfaceBase, vertex: int) -> list[int]:
    faces: list[int] = []
    for e in mesh.vertex_edges(vertex):
        for f in mesh.edge_faces(e):
            if f >= 0 and f not in faces:
                faces.append(f)
    return faces


def clamp_weights(items: Iterable, ratio: float) -> None:
    """Clamp item weights between average/ratio and average*ratio, in place."""
    items = list(items)
    if not items:
        return
    average = sum(item.weight for item in items) / len(items)
    low = average / ratio
    high = average * ratio
    for item in items:
        if item.weight > high:
            item.weight = high
        if item.weight < low:
            item.weight = low


# ----------------------------------------------------------------------
# isotropic metric
# ----------------------------------------------------------------------
@dataclass
class IsotropicItem:
    """An item: its weighted position and its weight."""

    value: list[float] = field(default_factory=_zeros)
    weight: float = 0.0


@dataclass
class IsotropicCluster:
    """Accumulated weighted positions and weights of a cluster's items."""

    s_value: list[float] = field(default_factory=_zeros)
    s_weight: float = 0.0
    energy_value: float = 0.0


class IsotropicMetric:
    """Euclidean metric: clusters are compact around their centroid."""

    def __init__(self, gradation: float = 0.0) -> None:
        self.gradation = gradation
        self.custom_weights: Sequence[float] | None = None
        self.items: list[IsotropicItem] = []

    def set_custom_weights(self, weights: Sequence[float] | None) -> None:
        """Set per-item density indicators, raised to the gradation power."""
        self.custom_weights = None if weights is None else list(weights)

    def curvature_indicator_needed(self) -> bool:
        return self.gradation > 0

    def multiply_item_weight(self, item_id: int, factor: float) -> None:
        item = self.items[item_id]
        item.value = [c * factor for c in item.value]
        item.weight *= factor

    def item_weight(self, item_id: int) -> float:
        return self.items[item_id].weight

    def cluster_energy(self, cluster: IsotropicCluster) -> float:
        """Return the energy cached by compute_cluster_energy."""
        return cluster.energy_value

    def compute_cluster_energy(self, cluster: IsotropicCluster) -> None:
        s = cluster.s_value
        cluster.energy_value = -(s[0] * s[0] + s[1] * s[1] + s[2] * s[2]) / cluster.s_weight

    def distance_to_point(self, item: IsotropicItem, point: Sequence[float]) -> float:
        """Euclidean distance between an item's position and a point."""
        position = [c / item.weight for c in item.value]
        return math.sqrt(_distance2(point, position))

    def add(self, source: IsotropicCluster, item_id: int) -> IsotropicCluster:
        """Return a copy of ``source`` with the item added."""
        result = copy.deepcopy(source)
        self.add_item_to_cluster(item_id, result)
        return result

    def sub(self, source: IsotropicCluster, item_id: int) -> IsotropicCluster:
        """Return a copy of ``source`` with the item removed."""
        result = copy.deepcopy(source)
        self.subtract_item_from_cluster(item_id, result)
        return result

    def add_item_to_cluster(self, item_id: int, cluster: IsotropicCluster) -> None:
        item = self.items[item_id]
        cluster.s_value = [s + v for s, v in zip(cluster.s_value, item.value)]
        cluster.s_weight += item.weight

    def subtract_item_from_cluster(self, item_id: int, cluster: IsotropicCluster) -> None:
        item = self.items[item_id]
        cluster.s_value = [s - v for s, v in zip(cluster.s_value, item.value)]
        cluster.s_weight -= item.weight

    def cluster_centroid(self, cluster: IsotropicCluster) -> tuple[float, float, float]:
        w = cluster.s_weight
        return (cluster.s_value[0] / w, cluster.s_value[1] / w, cluster.s_value[2] / w)

    def set_cluster_centroid(self, cluster: IsotropicCluster, point: Sequence[float]) -> None:
        cluster.s_value = [float(c) * cluster.s_weight for c in point[:3]]

    def _custom_factor(self, index: int) -> float:
        if self.custom_weights is None:
            return 1.0
        return self.custom_weights[index] ** self.gradation

    def build_metric(
        self,
        mesh: SurfaceBase,
        clustering_type: int,
        vertex_areas: Sequence[float] | None = None,
    ) -> None:
        """Build the items from the triangles (type 0) or vertices (type 1) of a mesh.

        Vertex clustering needs the area associated with each vertex.
        """
        items: list[IsotropicItem] = []
        if clustering_type == 0:
            for face in range(mesh.number_of_faces):
                p1, p2, p3 = _triangle_points(mesh, face)
                weight = _triangle_area(p1, p2, p3) * self._custom_factor(face)
                value = [(a + b + c) / 3.0 for a, b, c in zip(p1, p2, p3)]
                items.append(IsotropicItem(value=value, weight=weight))
        else:
            if vertex_areas is None:
                raise ValueError("vertex clustering needs the vertex areas")
            for vertex in range(mesh.number_of_points):
                weight = vertex_areas[vertex] * self._custom_factor(vertex)
                items.append(
                    IsotropicItem(value=list(mesh.point(vertex)), weight=weight)
                )
        clamp_weights(items, _ISOTROPIC_CLAMP_RATIO)
        for item in items:
            item.value = [c * item.weight for c in item.value]
        self.items = items


# ----------------------------------------------------------------------
# L2,1 metric
# ----------------------------------------------------------------------
@dataclass
class L21Item:
    """An item: its weighted normal, weighted position and weight."""

    normal: list[float] = field(default_factory=_zeros)
    value: list[float] = field(default_factory=_zeros)
    weight: float = 0.0


@dataclass
class L21Cluster:
    """Accumulated weighted normals, positions and weights of a cluster."""

    energy_value: float = 0.0
    s_normal: list[float] = field(default_factory=_zeros)
    s_value: list[float] = field(default_factory=_zeros)
    s_weight: float = 0.0


class L21Metric:
    """Normal-based L2,1 metric, as in variational shape approximation."""

    def __init__(self, gradation: float = 0.0) -> None:
        self.gradation = gradation
        self.custom_weights: Sequence[float] | None = None
        self.factor = 0.0
        self.items: list[L21Item] = []

    def set_custom_weights(self, weights: Sequence[float] | None) -> None:
        """Set per-item density indicators, raised to the gradation power."""
        self.custom_weights = None if weights is None else list(weights)

    def item_weight(self, item_id: int) -> float:
        return self.items[item_id].weight

    def cluster_energy(self, cluster: L21Cluster) -> float:
        """Compute, cache and return the energy of a cluster."""
        n = cluster.s_normal
        v = cluster.s_value
        cluster.energy_value = (
            -n[0] * n[0]
            - n[1] * n[1]
            - n[2] * n[2]
            - self.factor * (v[0] * v[0] + v[1] * v[1] + v[2] * v[2])
        ) / cluster.s_weight
        return cluster.energy_value

    def distance_to_cluster(self, item: L21Item, cluster: L21Cluster) -> float:
        """Squared distance between the unit normals of an item and a cluster."""
        return _distance2(_normalized(item.normal), _normalized(cluster.s_normal))

    def distance_to_point(self, item: L21Item, point: Sequence[float]) -> float:
        """Squared distance between an item's unit normal and a point."""
        normal = _normalized([c / item.weight for c in item.normal])
        return _distance2(point, normal)

    def add_item_to_cluster(self, item_id: int, cluster: L21Cluster) -> None:
        item = self.items[item_id]
        cluster.s_value = [s + v for s, v in zip(cluster.s_value, item.value)]
        cluster.s_normal = [s + n for s, n in zip(cluster.s_normal, item.normal)]
        cluster.s_weight += item.weight

    def subtract_item_from_cluster(self, item_id: int, cluster: L21Cluster) -> None:
        item = self.items[item_id]
        cluster.s_value = [s - v for s, v in zip(cluster.s_value, item.value)]
        cluster.s_normal = [s - n for s, n in zip(cluster.s_normal, item.normal)]
        cluster.s_weight -= item.weight

    def cluster_centroid(self, cluster: L21Cluster) -> tuple[float, float, float]:
        w = cluster.s_weight
        return (cluster.s_value[0] / w, cluster.s_value[1] / w, cluster.s_value[2] / w)

    def _custom_factor(self, index: int) -> float:
        if self.custom_weights is None:
            return 1.0
        return self.custom_weights[index] ** self.gradation

    def build_metric(
        self,
        mesh: SurfaceBase,
        clustering_type: int,
        vertex_areas: Sequence[float] | None = None,
    ) -> None:
        """Build the items from the triangles (type 0) or vertices (type 1) of a mesh.

        Vertex clustering needs the area associated with each vertex.
        """
        self.factor = 0.0
        items: list[L21Item] = []
        if clustering_type == 0:
            for face in range(mesh.number_of_faces):
                p1, p2, p3 = _triangle_points(mesh, face)
                weight = _triangle_area(p1, p2, p3) * self._custom_factor(face)
                value = [(a + b + c) / 3.0 for a, b, c in zip(p1, p2, p3)]
                normal = _normalized(_triangle_normal_direction(p1, p2, p3))
                items.append(L21Item(normal=normal, value=value, weight=weight))
        else:
            if vertex_areas is None:
                raise ValueError("vertex clustering needs the vertex areas")
            for vertex in range(mesh.number_of_points):
                weight = vertex_areas[vertex] * self._custom_factor(vertex)
                normal = _zeros()
                for face in _vertex_faces(mesh, vertex):
                    p1, p2, p3 = _triangle_points(mesh, face)
                    area = _triangle_area(p1, p2, p3)
                    direction = _triangle_normal_direction(p1, p2, p3)
                    normal = [n + d * area for n, d in zip(normal, direction)]
                items.append(
                    L21Item(
                        normal=_normalized(normal),
                        value=list(mesh.point(vertex)),
                        weight=weight,
                    )
                )
        clamp_weights(items, _L21_CLAMP_RATIO)
        for item in items:
            item.value = [c * item.weight for c in item.value]
            item.normal = [c * item.weight for c in item.normal]
        self.items = items