"""Edge-oriented polygonal surface with constant-time connectivity queries."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable, Sequence
from dataclasses import dataclass


def _cycle_pairs(vertices: Sequence[int]):
    """Yield consecutive (a, b) pairs around a closed polygon."""
    items = list(vertices)
    return zip(items, items[1:] + items[:1])


@dataclass
class Edge:
    """An edge between two vertices and the faces adjacent to it."""

    vertex1: int = -1
    vertex2: int = -1
    poly1: int = -1
    poly2: int = -1
    non_manifold_faces: list[int] | None = None
    active: bool = False


class SurfaceBase:
    """A polygonal mesh that keeps explicit edges and vertex rings.

    Faces, edges and vertices are addressed by integer ids. Deleted slots
    are recycled when new elements of the same kind are added.
    """

    def __init__(self) -> None:
        self._points: list[tuple[float, float, float]] = []
        self._polygons: list[list[int]] = []
        self._edges: list[Edge] = []
        self._rings: list[list[int]] = []
        self._active_vertices: list[bool] = []
        self._active_faces: list[bool] = []
        self._visited_faces: list[bool] = []
        self._vertex_garbage: deque[int] = deque()
        self._edge_garbage: deque[int] = deque()
        self._cell_garbage: dict[int, deque[int]] = {}
        self.oriented = True
        self.clean_edges = True
        self.clean_vertices = False
        self._first_time = True

    # ------------------------------------------------------------------
    # construction
    # ------------------------------------------------------------------
    @classmethod
    def from_polygons(
        cls, points: Iterable[Sequence[float]], polygons: Iterable[Sequence[int]]
    ) -> "SurfaceBase":
        """Build a surface from point coordinates and polygon vertex lists."""
        mesh = cls()
        mesh._points = [mesh._as_point(p) for p in points]
        count = len(mesh._points)
        mesh._rings = [[] for _ in range(count)]
        mesh._active_vertices = [True] * count
        mesh._polygons = [[int(v) for v in poly] for poly in polygons]
        for poly in mesh._polygons:
            if any(v < 0 or v >= count for v in poly):
                raise ValueError(
                    f"polygon {poly} refers to vertices outside the {count} created"
                )
        nfaces = len(mesh._polygons)
        mesh._active_faces = [False] * nfaces
        mesh._visited_faces = [False] * nfaces

        for face, vertices in enumerate(mesh._polygons):
            active = len(vertices) > 1 and vertices[0] != vertices[1]
            if active:
                for a, b in _cycle_pairs(vertices):
                    mesh._add_edge(a, b, face)
                mesh._active_faces[face] = True
            else:
                mesh._cell_garbage.setdefault(len(vertices), deque()).append(face)

        if mesh.oriented:
            mesh.check_normals()
        return mesh

    @staticmethod
    def _as_point(coordinates: Sequence[float]) -> tuple[float, float, float]:
        values = tuple(float(c) for c in coordinates)
        if len(values) != 3:
            raise ValueError(f"a point needs 3 coordinates, got {len(values)}")
        return values  # type: ignore[return-value]

    # ------------------------------------------------------------------
    # sizes
    # ------------------------------------------------------------------
    @property
    def number_of_points(self) -> int:
        return len(self._points)

    @property
    def number_of_faces(self) -> int:
        return len(self._polygons)

    @property
    def number_of_edges(self) -> int:
        return len(self._edges)

    # ------------------------------------------------------------------
    # adding elements
    # ------------------------------------------------------------------
    def add_vertex(self, point: Sequence[float]) -> int:
        """Add a vertex and return its id, reusing a deleted slot if any."""
        coordinates = self._as_point(point)
        if self._vertex_garbage:
            vertex = self._vertex_garbage.popleft()
            self._rings[vertex] = []
            self._points[vertex] = coordinates
        else:
            vertex = len(self._points)
            self._points.append(coordinates)
            self._rings.append([])
            self._active_vertices.append(False)
        self._active_vertices[vertex] = True
        return vertex

    def add_edge(self, v1: int, v2: int) -> int:
        """Add the edge (v1, v2) without adjacent face and return its id."""
        if v1 == v2:
            raise ValueError(f"creation of a self-loop for vertex {v1}")
        return self._add_edge(v1, v2, -1)

    def _add_edge(self, v1: int, v2: int, face: int) -> int:
        if v1 == v2:
            return -1
        edge_id = self.is_edge(v1, v2)
        if edge_id >= 0:
            edge = self._edges[edge_id]
            if edge.poly1 < 0:
                edge.poly1 = face
            elif edge.poly2 >= 0:
                if edge.non_manifold_faces is None:
                    edge.non_manifold_faces = []
                edge.non_manifold_faces.append(face)
            else:
                edge.poly2 = face
            return edge_id

        if self._edge_garbage:
            edge_id = self._edge_garbage.popleft()
        else:
            edge_id = len(self._edges)
            self._edges.append(Edge())
        self._edges[edge_id] = Edge(
            vertex1=v1, vertex2=v2, poly1=face, poly2=-1,
            non_manifold_faces=None, active=True,
        )
        self._insert_edge_in_ring(edge_id, v1)
        self._insert_edge_in_ring(edge_id, v2)
        return edge_id

    def add_face(self, v1: int, v2: int, v3: int) -> int:
        """Add the triangle (v1, v2, v3) and return its id."""
        return self.add_polygon((v1, v2, v3))

    def add_polygon(self, vertices: Iterable[int]) -> int:
        """Add a polygon and return its id, reusing a deleted slot of the same size."""
        verts = [int(v) for v in vertices]
        if any(v >= self.number_of_points or v < 0 for v in verts):
            raise ValueError(
                f"attempt to create a cell with vertices {verts} but only "
                f"{self.number_of_points} vertices have been created"
            )
        garbage = self._cell_garbage.get(len(verts))
        if garbage:
            face = garbage.popleft()
            self._polygons[face] = verts
        else:
            face = len(self._polygons)
            self._polygons.append(verts)
            self._active_faces.append(False)
            self._visited_faces.append(False)

        for a, b in _cycle_pairs(verts):
            self._add_edge(a, b, face)

        if self._first_time and face == 0:
            self._visited_faces[face] = True
            self._first_time = False
        else:
            self._visited_faces[face] = False

        self._active_faces[face] = True
        if self.oriented:
            self._conquer_orientation_from_face(face)
        return face

    def _set_face(self, face: int, v1: int, v2: int, v3: int) -> None:
        self._polygons[face][:3] = [v1, v2, v3]

    # ------------------------------------------------------------------
    # orientation
    # ------------------------------------------------------------------
    def set_orientation(self, oriented: bool) -> None:
        """Choose whether new faces are oriented consistently with their neighbours."""
        self.oriented = bool(oriented)

    def check_normals(self) -> None:
        """Reorder every face so that all connected faces share one orientation."""
        self._visited_faces = [False] * len(self._polygons)
        for face in range(len(self._polygons)):
            if not self._visited_faces[face] and self._active_faces[face]:
                self._visited_faces[face] = True
                self._conquer_orientation_from_face(face)
        self.oriented = True

    def _conquer_orientation_from_face(self, face: int) -> None:
        queue: deque[int] = deque()
        for a, b in _cycle_pairs(self._polygons[face]):
            e = self.is_edge(a, b)
            if e >= 0 and self.is_edge_manifold(e):
                queue.append(e)

        while queue:
            e1 = queue.popleft()
            f1, f2 = self.edge_face_pair(e1)
            if f2 < 0:
                continue
            visited1 = self._visited_faces[f1]
            visited2 = self._visited_faces[f2]
            if visited1 == visited2:
                continue
            if visited2:
                f1, f2 = f2, f1
            face1 = self._polygons[f1]
            face2 = self._polygons[f2]
            v1, v2 = self.edge_vertices(e1)
            i1 = face1.index(v1)
            i2 = face2.index(v1)
            v3 = face1[(i1 + 1) % len(face1)]
            v4 = face2[(i2 + 1) % len(face2)]
            if (v3 == v2) == (v4 == v2):
                face2.reverse()
            self._visited_faces[f2] = True
            for a, b in _cycle_pairs(face2):
                e2 = self.is_edge(a, b)
                if e2 != e1 and e2 >= 0 and self.is_edge_manifold(e2):
                    queue.append(e2)

    # ------------------------------------------------------------------
    # deletion
    # ------------------------------------------------------------------
    def delete_face(self, face: int) -> None:
        """Delete a face and, depending on the cleaning flags, its free edges and vertices."""
        if not self._active_faces[face]:
            return
        vertices = self._polygons[face]
        for a, b in list(_cycle_pairs(vertices)):
            e = self.is_edge(a, b)
            if e < 0:
                continue
            self._delete_face_in_ring(face, e)
            self._clean_edge(e)
        first = vertices[0]
        vertices[:] = [first] * len(vertices)
        self._cell_garbage.setdefault(len(vertices), deque()).append(face)
        self._active_faces[face] = False

    def delete_edge(self, edge: int) -> None:
        """Delete an edge that has no adjacent face."""
        e = self._edges[edge]
        if e.poly1 != -1:
            raise ValueError(f"edge {edge} is not free and cannot be removed")
        e.active = False
        self._edge_garbage.append(edge)
        v1, v2 = e.vertex1, e.vertex2
        self._delete_edge_in_ring(edge, v1)
        self._delete_edge_in_ring(edge, v2)
        self._clean_vertex(v1)
        self._clean_vertex(v2)
        e.vertex2 = v1

    def delete_vertex(self, vertex: int) -> None:
        """Mark a free vertex as deleted so its slot can be reused."""
        self._vertex_garbage.append(vertex)
        self._active_vertices[vertex] = False

    def _clean_edge(self, edge: int) -> None:
        if self.clean_edges and self._edges[edge].poly1 == -1:
            self.delete_edge(edge)

    def _clean_vertex(self, vertex: int) -> None:
        if self.clean_vertices and self.valence(vertex) == 0:
            self.delete_vertex(vertex)

    def squeeze(self) -> None:
        """Trim attribute storage to the current numbers of vertices and faces."""
        npoints = len(self._points)
        del self._rings[npoints:]
        del self._active_vertices[npoints:]
        nfaces = len(self._polygons)
        del self._visited_faces[nfaces:]
        del self._active_faces[nfaces:]

    # ------------------------------------------------------------------
    # rings
    # ------------------------------------------------------------------
    def _insert_edge_in_ring(self, edge: int, vertex: int) -> None:
        ring = self._rings[vertex]
        if edge not in ring:
            ring.append(edge)

    def _delete_edge_in_ring(self, edge: int, vertex: int) -> None:
        ring = self._rings[vertex]
        for i, e in enumerate(ring):
            if e == edge:
                ring[i] = ring[-1]
                ring.pop()
                return

    def _insert_face_in_ring(self, face: int, edge_id: int) -> None:
        edge = self._edges[edge_id]
        if edge.poly1 == -1:
            edge.poly1 = face
            return
        if edge.poly1 == face:
            return
        if edge.poly2 == -1:
            edge.poly2 = face
            return
        if edge.poly2 == face:
            return
        if edge.non_manifold_faces is None:
            edge.non_manifold_faces = []
        if face not in edge.non_manifold_faces:
            edge.non_manifold_faces.append(face)

    def _delete_face_in_ring(self, face: int, edge_id: int) -> None:
        edge = self._edges[edge_id]
        others = edge.non_manifold_faces
        if others is None:
            if edge.poly1 == face:
                edge.poly1 = edge.poly2
            edge.poly2 = -1
            return
        if face in others:
            others[:] = [f for f in others if f != face]
        else:
            last = others[-1]
            others[:] = [f for f in others if f != last]
            if edge.poly1 == face:
                edge.poly1 = last
            else:
                edge.poly2 = last
        if not others:
            edge.non_manifold_faces = None

    # ------------------------------------------------------------------
    # queries
    # ------------------------------------------------------------------
    def edge_vertices(self, edge: int) -> tuple[int, int]:
        """Return the two vertices bounding an edge."""
        e = self._edges[edge]
        return e.vertex1, e.vertex2

    def edge_face_pair(self, edge: int) -> tuple[int, int]:
        """Return the first two faces of an edge, -1 where there is none."""
        e = self._edges[edge]
        return e.poly1, e.poly2

    def edge_faces(self, edge: int) -> list[int]:
        """Return every face adjacent to an edge."""
        e = self._edges[edge]
        if e.poly1 == -1:
            return []
        faces = [e.poly1]
        if e.poly2 == -1:
            return faces
        faces.append(e.poly2)
        if e.non_manifold_faces:
            faces.extend(reversed(e.non_manifold_faces))
        return faces

    def face_vertices(self, face: int) -> tuple[int, ...]:
        """Return the vertices of a face in order."""
        return tuple(self._polygons[face])

    def point(self, vertex: int) -> tuple[float, float, float]:
        """Return the coordinates of a vertex."""
        return self._points[vertex]

    def set_point(self, vertex: int, coordinates: Sequence[float]) -> None:
        """Set the coordinates of a vertex."""
        self._points[vertex] = self._as_point(coordinates)

    def valence(self, vertex: int) -> int:
        """Return the number of edges adjacent to a vertex."""
        return len(self._rings[vertex])

    def is_edge_manifold(self, edge: int) -> bool:
        """Return True if exactly two faces are adjacent to the edge."""
        e = self._edges[edge]
        return e.poly2 >= 0 and e.non_manifold_faces is None

    def vertex_edges(self, vertex: int) -> tuple[int, ...]:
        """Return the edges in the ring of a vertex."""
        return tuple(self._rings[vertex])

    def is_edge(self, v1: int, v2: int) -> int:
        """Return the id of the edge (v1, v2), or -1 if it does not exist."""
        for e in reversed(self._rings[v1]):
            edge = self._edges[e]
            if v2 == edge.vertex1 or v2 == edge.vertex2:
                return e
        return -1

    def third_point(self, face: int, v1: int, v2: int) -> int:
        """Return the vertex of a triangle that is neither v1 nor v2."""
        a, b, c = self._polygons[face][:3]
        if a != v1 and a != v2:
            return a
        if b != v1 and b != v2:
            return b
        return c

    def is_vertex_active(self, vertex: int) -> bool:
        return self._active_vertices[vertex]

    def is_face_active(self, face: int) -> bool:
        return self._active_faces[face]

    def is_edge_active(self, edge: int) -> bool:
        return self._edges[edge].active