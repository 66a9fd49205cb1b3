"""Connectivity queries and diagnostics on top of the edge-oriented surface."""

from __future__ import annotations

import math
from collections import Counter
from collections.abc import Iterable
from os import PathLike

from .mesh import SurfaceBase, _cycle_pairs

_SEPARATOR = "********************************************"


def _append_unique(target: list[int], value: int) -> None:
    if value not in target:
        target.append(value)


class SurfaceQueries(SurfaceBase):
    """A surface offering neighbourhood queries, manifoldness tests and statistics."""

    # ------------------------------------------------------------------
    # edges
    # ------------------------------------------------------------------
    def edge_number_of_adjacent_faces(self, edge: int) -> int:
        """Return how many faces are adjacent to an edge."""
        e = self._edges[edge]
        if e.non_manifold_faces is not None:
            return 2 + len(e.non_manifold_faces)
        if e.poly2 != -1:
            return 2
        if e.poly1 != -1:
            return 1
        return 0

    def number_of_boundaries(self, vertex: int) -> int:
        """Return the number of boundaries passing through a vertex."""
        boundary_edges = sum(
            1 for e in self.vertex_edges(vertex) if self._edges[e].poly2 < 0
        )
        return boundary_edges // 2

    def conquer(self, face: int, v1: int, v2: int) -> tuple[int, int]:
        """Cross the edge (v1, v2) from ``face``.

        Return the face on the other side and its third vertex, or
        ``(-1, -1)`` when there is no such face.
        """
        edge = self.is_edge(v1, v2)
        if edge < 0:
            return -1, -1
        e = self._edges[edge]
        other = e.poly2
        if other == -1:
            return -1, -1
        if other == face:
            other = e.poly1
        return other, self.third_point(other, v1, v2)

    def first_edge(self, vertex: int) -> int:
        """Return the first edge in the ring of a vertex, or -1 if it has none."""
        ring = self.vertex_edges(vertex)
        return ring[0] if ring else -1

    def boundary_edge(self, vertex: int) -> int:
        """Return a boundary edge around a vertex, or any edge if there is none.

        Returns -1 for a vertex without edges.
        """
        ring = self.vertex_edges(vertex)
        for e in ring:
            edge = self._edges[e]
            if edge.poly1 >= 0 and edge.poly2 == -1:
                return e
        return ring[0] if ring else -1

    # ------------------------------------------------------------------
    # vertices
    # ------------------------------------------------------------------
    def vertex_faces(self, vertex: int) -> list[int]:
        """Return the distinct faces adjacent to a vertex."""
        faces: list[int] = []
        for e in self.vertex_edges(vertex):
            edge = self._edges[e]
            if edge.poly1 >= 0:
                _append_unique(faces, edge.poly1)
            if edge.poly2 >= 0:
                _append_unique(faces, edge.poly2)
            for f in edge.non_manifold_faces or ():
                _append_unique(faces, f)
        return faces

    def vertex_neighbours(self, vertex: int) -> list[int]:
        """Return the vertices joined to ``vertex`` by an edge."""
        result = []
        for e in self.vertex_edges(vertex):
            edge = self._edges[e]
            result.append(edge.vertex2 if edge.vertex1 == vertex else edge.vertex1)
        return result

    def neighbours(self, vertices: Iterable[int]) -> list[int]:
        """Return the given vertices followed by their distinct neighbours.

        Useful for growing n-rings.
        """
        result: list[int] = []
        for v1 in vertices:
            _append_unique(result, v1)
            for other in self.vertex_neighbours(v1):
                _append_unique(result, other)
        return result

    def is_vertex_manifold(self, vertex: int) -> bool:
        """Return True if the faces around a vertex form a single closed fan."""
        ring = self.vertex_edges(vertex)
        remaining = len(ring)
        if remaining < 2:
            return False
        if not all(self.is_edge_manifold(e) for e in ring):
            return False

        first = ring[0]
        a, b = self.edge_vertices(first)
        first_vertex = b if a == vertex else a
        remaining -= 1
        f1, f2 = self.edge_face_pair(first)

        v2 = self.third_point(f1, vertex, first_vertex)
        while True:
            remaining -= 1
            if remaining == 0:
                return True
            f1, v2 = self.conquer(f1, vertex, v2)
            if not (f1 >= 0 and v2 != first_vertex):
                break

        if f2 < 0 or v2 == first_vertex:
            return False

        v2 = self.third_point(f2, vertex, first_vertex)
        while True:
            remaining -= 1
            if remaining == 0:
                return True
            f2, v2 = self.conquer(f2, vertex, v2)
            if not (f2 >= 0 and v2 != first_vertex):
                break
        return False

    # ------------------------------------------------------------------
    # faces
    # ------------------------------------------------------------------
    def is_face(self, v1: int, v2: int, v3: int) -> int:
        """Return the id of the triangle (v1, v2, v3), or -1 if it does not exist."""
        edge = self.is_edge(v1, v2)
        if edge < 0:
            return -1
        f1, f2 = self.edge_face_pair(edge)
        if f1 < 0:
            return -1
        if v3 == self.third_point(f1, v1, v2):
            return f1
        if f2 < 0:
            return -1
        if v3 == self.third_point(f2, v1, v2):
            return f2
        for f in reversed(self._edges[edge].non_manifold_faces or []):
            if v3 == self.third_point(f, v1, v2):
                return f
        return -1

    def face_neighbours(self, face: int) -> list[int]:
        """Return the distinct faces sharing an edge with ``face``, itself included."""
        result: list[int] = []
        for a, b in _cycle_pairs(self.face_vertices(face)):
            e = self.is_edge(a, b)
            if e < 0:
                continue
            for f in self.edge_faces(e):
                _append_unique(result, f)
        return result

    def face_neighbour_lists(self, face: int) -> list[list[int]]:
        """Return, for each existing edge of a triangle, the faces adjacent to it.

        The edges are taken in the order (v0, v1), (v0, v2), (v1, v2).
        """
        v0, v1, v2 = self.face_vertices(face)[:3]
        lists = []
        for a, b in ((v0, v1), (v0, v2), (v1, v2)):
            e = self.is_edge(a, b)
            if e != -1:
                lists.append(self.edge_faces(e))
        return lists

    def is_edge_between_faces(self, f1: int, f2: int) -> int:
        """Return the edge shared by two faces, or -1 if they share none."""
        second = self.face_vertices(f2)
        common: list[int] = []
        for v in self.face_vertices(f1):
            if v in second:
                common.append(v)
            if len(common) == 2:
                return self.is_edge(common[0], common[1])
        return -1

    # ------------------------------------------------------------------
    # diagnostics
    # ------------------------------------------------------------------
    def check_structure(self) -> list[str]:
        """Check the consistency of faces and edges.

        Return a description of every problem found; an empty list means
        the structure is sound.
        """
        problems = []
        for face in range(self.number_of_faces):
            if not self.is_face_active(face):
                continue
            for a, b in _cycle_pairs(self.face_vertices(face)):
                if self.is_edge(a, b) < 0:
                    problems.append(f"Face {face} misses edge [{a} {b}]")

        for edge in range(self.number_of_edges):
            ends = self.edge_vertices(edge)
            for face in self.edge_faces(edge):
                vertices = self.face_vertices(face)
                for v in ends:
                    if v not in vertices:
                        problems.append(
                            f"In edge {edge}: vertex {v} should be in face "
                            f"{face} but it is not"
                        )
        return problems

    def _face_valence_counts(self) -> Counter[int]:
        return Counter(
            len(self.vertex_faces(v)) for v in range(self.number_of_points)
        )

    def valence_entropy(self) -> float:
        """Return the entropy, in bits, of the distribution of vertex face counts."""
        if self.number_of_points == 0:
            raise ValueError("the valence entropy of an empty mesh is undefined")
        total = self.number_of_points
        entropy = 0.0
        for count in self._face_valence_counts().values():
            p = count / total
            entropy -= p * math.log2(p)
        return entropy

    def write_valence_table(self, path: str | PathLike[str]) -> tuple[int, int]:
        """Write a histogram of vertex face counts to a text file.

        Return the first and past-the-end degrees written.
        """
        counts = self._face_valence_counts()
        limit = max(1000, max(counts, default=0) + 2)

        low = 0
        for i in range(limit):
            if counts.get(i, 0) == 0 and counts.get(i + 1, 0) != 0:
                low = i
                break
        high = 0
        for i in range(limit):
            if counts.get(i, 0) != 0 and counts.get(i + 1, 0) == 0:
                high = i + 2

        with open(path, "w", encoding="utf-8") as out:
            for degree in range(low, high):
                value = counts.get(degree, 0)
                shown = value + 1 if value else 0
                out.write(f"Degree {degree} : {shown}\n")
        return low, high

    def describe_internals(self) -> str:
        """Return a readable dump of faces, edges and any structural problems."""
        lines = [
            _SEPARATOR,
            "*******    Internals:                  *****",
            f"{self.number_of_points} Vertices ",
            f"{self.number_of_faces} Polygons ",
            f"{self.number_of_edges} Edges ",
            _SEPARATOR,
            "*******    Polygons:                  ******",
        ]
        for face in range(self.number_of_faces):
            verts = "".join(f" {v}" for v in self.face_vertices(face))
            lines.append(f"Face {face} vertices :{verts}")
        lines.append(_SEPARATOR)
        lines.append("*******    Edges:                     ******")
        for edge in range(self.number_of_edges):
            v1, v2 = self.edge_vertices(edge)
            faces = self.edge_faces(edge)
            if faces:
                tail = ", faces :" + "".join(f" {f}" for f in faces)
            else:
                tail = ", no adjacent face"
            lines.append(f"Edge {edge} vertices :{v1} {v2}{tail}")
        lines.extend(f"Problem ! {p}" for p in self.check_structure())
        return "\n".join(lines) + "\n"