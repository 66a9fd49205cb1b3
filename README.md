# trimeshkit

An edge-oriented polygonal surface mesh for Python. It is built for mesh
processing, not display. Every edge is an explicit object that knows its two
vertices and its adjacent faces, including any beyond the second
(non-manifold faces). Every vertex keeps the ring of edges around it, so
adjacency questions are answered directly from stored data.

The package has no dependencies outside the standard library.

## Modules

### `trimeshkit.mesh`

- `SurfaceBase` is the core mesh.
  - `SurfaceBase.from_polygons(points, polygons)` builds a mesh from
    coordinates and polygon vertex lists. It raises `ValueError` for
    out-of-range vertex ids.
  - The mesh grows through `add_vertex`, `add_edge`, `add_face` and
    `add_polygon`. When a slot has been freed by `delete_vertex`,
    `delete_edge` or `delete_face`, the next element of the same kind
    (for faces, the same size) takes that slot.
  - When orientation is on (the default; see `set_orientation`), each new
    face is reordered to agree with its manifold neighbours.
    `check_normals()` makes every connected component consistently oriented.
  - Queries: `edge_vertices`, `edge_face_pair`, `edge_faces`,
    `face_vertices`, `point`, `set_point`, `valence`, `vertex_edges`,
    `is_edge` (returns `-1` if absent), `third_point`, `is_edge_manifold`,
    and the `is_*_active` tests.
  - The properties `number_of_points`, `number_of_faces` and
    `number_of_edges` give the mesh sizes.
  - The flags `clean_edges` (on by default) and `clean_vertices` (off by
    default) control whether deleting a face also deletes edges and
    vertices left without neighbours.
- `Edge` is the dataclass stored for each edge.

### `trimeshkit.queries`

`SurfaceQueries` extends `SurfaceBase` with:

- Neighbourhood queries: `vertex_faces`, `vertex_neighbours`, `neighbours`
  (for growing n-rings), `face_neighbours`, `face_neighbour_lists`,
  `is_edge_between_faces`, `is_face`, `conquer`, `first_edge` and
  `boundary_edge`.
- Topology tests: `edge_number_of_adjacent_faces`, `number_of_boundaries`
  and `is_vertex_manifold`.
- Diagnostics:
  - `check_structure()` returns a list of problem descriptions. An empty
    list means the structure is sound.
  - `describe_internals()` returns a readable dump of faces and edges.
- Statistics:
  - `valence_entropy()` gives the entropy in bits of the faces-per-vertex
    distribution. It raises `ValueError` on an empty mesh.
  - `write_valence_table(path)` writes a histogram to a text file and
    returns the degree range written.

### `trimeshkit.volume`

`compute_volume_properties(points, triangles)` measures a closed triangle
mesh. It returns a frozen `VolumeProperties` holding `surface_area`,
`volume`, `signed_volume`, `centroid` and `normalized_shape_index`.

- It raises `ValueError` for empty input and for cells that are not
  triangles.
- When the volume is zero, the shape index is `math.inf`.

### `trimeshkit.metrics`

These are clustering metrics for discrete centroidal Voronoi clustering of
a surface. Items are either its triangles (`clustering_type` 0) or its
vertices (`clustering_type` 1).

- `IsotropicMetric` comes with `IsotropicItem` and `IsotropicCluster`.
  Energy is based on positions.
- `L21Metric` comes with `L21Item` and `L21Cluster`. It is based on
  normals.
- `build_metric(mesh, clustering_type, vertex_areas)` creates the items.
  Vertex clustering requires `vertex_areas`; without them it raises
  `ValueError`.
- Optional per-item weights set with `set_custom_weights` are raised to
  the metric's `gradation`.
- `clamp_weights(items, ratio)` clamps item weights in place between
  `average / ratio` and `average * ratio`.

## Example

```python
from trimeshkit.queries import SurfaceQueries
from trimeshkit.volume import compute_volume_properties

points = [(0, 0, 0), (1, 0, 0), (0, 1, 0), (0, 0, 1)]
faces = [(0, 2, 1), (0, 1, 3), (0, 3, 2), (1, 2, 3)]

mesh = SurfaceQueries.from_polygons(points, faces)
edge = mesh.is_edge(0, 1)
print(mesh.edge_faces(edge))          # the two faces on either side of [0 1]
print(mesh.vertex_neighbours(0))      # vertices joined to vertex 0
print(mesh.is_vertex_manifold(0))     # True
print(mesh.check_structure())         # []

props = compute_volume_properties(points, faces)
print(props.volume, props.surface_area)
```

## What the package does not do

- It does not read or write mesh files. Meshes come in as Python
  sequences of points and polygons, and come out through the query methods.
- It has no local editing operators such as edge flips, edge splits or
  vertex merges. Meshes change only by adding and deleting elements.
- It provides the clustering metrics but not a clustering or remeshing
  driver.
- It has no command-line program and no display.

## Running the tests

```
pip install -e .[test]
pytest
```