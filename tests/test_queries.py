import pytest

from trimeshkit.queries import SurfaceQueries


def tetrahedron():
    points = [(0, 0, 0), (1, 0, 0), (0, 1, 0), (0, 0, 1)]
    faces = [(0, 2, 1), (0, 1, 3), (1, 2, 3), (0, 3, 2)]
    return SurfaceQueries.from_polygons(points, faces)


def square():
    points = [(0, 0, 0), (1, 0, 0), (1, 1, 0), (0, 1, 0)]
    return SurfaceQueries.from_polygons(points, [(0, 1, 2), (0, 2, 3)])


def bowtie():
    points = [
        (0, 0, 0),
        (1, 0, 0), (0, 1, 0), (0, 0, 1),
        (-1, 0, 0), (0, -1, 0), (0, 0, -1),
    ]
    faces = [
        (0, 2, 1), (0, 1, 3), (1, 2, 3), (0, 3, 2),
        (0, 5, 4), (0, 4, 6), (4, 5, 6), (0, 6, 5),
    ]
    return SurfaceQueries.from_polygons(points, faces)


def test_edge_adjacent_faces_closed_mesh():
    mesh = tetrahedron()
    assert all(
        mesh.edge_number_of_adjacent_faces(e) == 2 for e in range(mesh.number_of_edges)
    )


def test_edge_adjacent_faces_boundary_and_free():
    mesh = square()
    assert mesh.edge_number_of_adjacent_faces(mesh.is_edge(0, 2)) == 2
    assert mesh.edge_number_of_adjacent_faces(mesh.is_edge(0, 1)) == 1
    v = mesh.add_vertex((5, 5, 5))
    free = mesh.add_edge(1, v)
    assert mesh.edge_number_of_adjacent_faces(free) == 0


def test_edge_adjacent_faces_non_manifold():
    points = [(0, 0, 0), (1, 0, 0), (0, 1, 0), (0, -1, 0), (0, 0, 1)]
    mesh = SurfaceQueries.from_polygons(points, [(0, 1, 2), (1, 0, 3), (0, 1, 4)])
    assert mesh.edge_number_of_adjacent_faces(mesh.is_edge(0, 1)) == 3


def test_number_of_boundaries():
    assert square().number_of_boundaries(0) == 1
    assert tetrahedron().number_of_boundaries(0) == 0


def test_conquer_crosses_interior_edge():
    mesh = square()
    assert mesh.conquer(0, 0, 2) == (1, 3)
    assert mesh.conquer(1, 0, 2) == (0, 1)


def test_conquer_across_boundary_or_missing_edge():
    mesh = square()
    assert mesh.conquer(0, 0, 1) == (-1, -1)
    assert mesh.conquer(0, 1, 3) == (-1, -1)


def test_vertex_faces_match_face_vertices():
    mesh = tetrahedron()
    for v in range(mesh.number_of_points):
        expected = {f for f in range(mesh.number_of_faces) if v in mesh.face_vertices(f)}
        faces = mesh.vertex_faces(v)
        assert set(faces) == expected
        assert len(faces) == len(set(faces))


def test_vertex_neighbours():
    mesh = tetrahedron()
    assert sorted(mesh.vertex_neighbours(0)) == [1, 2, 3]
    assert len(mesh.vertex_neighbours(1)) == mesh.valence(1)


def test_neighbours_starts_with_input():
    mesh = square()
    ring = mesh.neighbours([1])
    assert ring[0] == 1
    assert sorted(ring) == [0, 1, 2]
    assert sorted(mesh.neighbours([0])) == [0, 1, 2, 3]


def test_is_face():
    mesh = square()
    assert mesh.is_face(0, 1, 2) == 0
    assert mesh.is_face(0, 2, 3) == 1
    assert mesh.is_face(1, 2, 3) == -1
    assert mesh.is_face(1, 3, 0) == -1


def test_first_and_boundary_edge():
    mesh = square()
    lone = mesh.add_vertex((9, 9, 9))
    assert mesh.first_edge(lone) == -1
    assert mesh.boundary_edge(lone) == -1
    b = mesh.boundary_edge(0)
    assert mesh.edge_face_pair(b)[1] == -1
    assert 0 in mesh.edge_vertices(b)
    tet = tetrahedron()
    assert tet.boundary_edge(2) == tet.first_edge(2)
    assert tet.first_edge(2) == tet.vertex_edges(2)[0]


def test_face_neighbours():
    mesh = square()
    assert sorted(mesh.face_neighbours(0)) == [0, 1]
    tet = tetrahedron()
    assert sorted(tet.face_neighbours(0)) == [0, 1, 2, 3]


def test_face_neighbour_lists():
    mesh = square()
    lists = mesh.face_neighbour_lists(0)
    assert len(lists) == 3
    assert sorted(len(lst) for lst in lists) == [1, 1, 2]
    assert all(0 in lst for lst in lists)


def test_is_edge_between_faces():
    mesh = square()
    assert mesh.is_edge_between_faces(0, 1) == mesh.is_edge(0, 2)
    v = mesh.add_vertex((7, 7, 7))
    w = mesh.add_vertex((8, 7, 7))
    far = mesh.add_face(1, v, w)
    assert mesh.is_edge_between_faces(1, far) == -1


def test_vertex_manifold():
    tet = tetrahedron()
    assert all(tet.is_vertex_manifold(v) for v in range(4))
    sq = square()
    assert not sq.is_vertex_manifold(0)
    assert not sq.is_vertex_manifold(1)


def test_bowtie_vertex_is_not_manifold():
    mesh = bowtie()
    assert mesh.valence(0) == 6
    assert not mesh.is_vertex_manifold(0)
    assert mesh.is_vertex_manifold(1)


def test_check_structure_valid_meshes():
    assert tetrahedron().check_structure() == []
    mesh = square()
    mesh.delete_face(1)
    assert mesh.check_structure() == []


def test_valence_entropy():
    assert tetrahedron().valence_entropy() == pytest.approx(0.0)
    assert square().valence_entropy() == pytest.approx(1.0)


def test_valence_entropy_empty_mesh():
    with pytest.raises(ValueError):
        SurfaceQueries().valence_entropy()


def test_write_valence_table(tmp_path):
    path = tmp_path / "valence.txt"
    low, high = tetrahedron().write_valence_table(path)
    lines = path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == high - low
    assert lines[0].startswith(f"Degree {low} : ")
    assert all(line.startswith("Degree ") for line in lines)
    assert low < 3 < high


def test_describe_internals():
    mesh = square()
    text = mesh.describe_internals()
    assert "4 Vertices " in text
    assert "Face 0 vertices : 0 1 2" in text
    assert "Problem" not in text
    assert text.count("Edge ") == mesh.number_of_edges