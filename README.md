# imposm

Build geometries from OpenStreetMap data: points, line strings and polygons
from way nodes, (multi)polygons from multipolygon relations, hex-encoded
EWKB output, and polygon features read from GeoJSON. Geometry work is done
with shapely.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Modules

- `imposm.osm`: the OSM elements `Node`, `Way`, `Member` and `Relation`
  (dataclasses), and the `MemberType` enum.
- `imposm.geom`: `point`, `line_string`, `polygon` and `multi_linestring` for
  way nodes and relations. Consecutive duplicate nodes are dropped. A
  `GeometryError` is raised when fewer than two nodes (line strings) or four
  nodes (polygons) are left. `as_geom_element(geom, srid)` returns a
  `Geometry` holding the geometry and its EWKB hex.
  `nodes_as_ewkb_hex_line_string` and `nodes_as_ewkb_hex_polygon` write
  lower-case EWKB hex directly from the nodes, without building a geometry.
- `imposm.ring`: `Ring` joins way segments; `merge_rings` connects rings that
  share end node references. `Ring.try_close(max_ring_gap)` closes a ring
  whose ends lie closer together than the gap.
- `imposm.multipolygon`: `prepare_relation(rel, srid, max_ring_gap)` builds
  the closed rings of a relation (raising `GeometryError` if there are none)
  and returns a `PreparedRelation`. Its `build()` method sorts out shells and
  holes, repairs invalid results with a zero buffer, sets each member's role to
  `"outer"` or `"inner"`, and returns a `Geometry`.
- `imposm.geos`: helpers around shapely for bounds, constructors
  (`polygon`, `multi_polygon`, `multi_line_string`, `bounds_polygon`),
  `make_valid`, `buffer`, `simplify_preserve_topology`, `union_polygons`,
  `line_merge`, and WKT/WKB serialisation. `as_ewkb_hex(geom, srid)` writes
  upper-case little-endian EWKB hex, including the SRID when it is non-zero.
  `Index` is a thread-safe spatial index whose `query` returns the insertion
  positions of geometries with intersecting bounding boxes. Failures raise
  `GeosError`.
- `imposm.geojson`: `parse_geojson(stream)` reads Polygon, MultiPolygon,
  Feature and FeatureCollection documents (from text, bytes or a file object)
  into `Feature` objects whose properties are converted to strings. Other
  geometry types raise `GeoJSONError`.
- `imposm.logger`: level-filtered, time-stamped logging to stderr.
  `set_min_level`, `println`, `printf`, `fatal` (logs, then raises
  `SystemExit(1)`) and `step(name)`, which logs the start of a stage and
  returns a callable that logs its end and duration.

## Example

```python
from imposm.osm import Node, Way, Member, MemberType, Relation
from imposm.multipolygon import prepare_relation

def way(way_id, coords):
    return Way(
        id=way_id,
        refs=[ref for ref, _, _ in coords],
        nodes=[Node(id=ref, long=x, lat=y) for ref, x, y in coords],
    )

outer = way(1, [(1, 0, 0), (2, 10, 0), (3, 10, 10), (4, 0, 10), (1, 0, 0)])
inner = way(2, [(5, 2, 2), (6, 8, 2), (7, 8, 8), (8, 2, 8), (5, 2, 2)])

rel = Relation(id=1, members=[
    Member(id=1, type=MemberType.WAY, role="outer", way=outer),
    Member(id=2, type=MemberType.WAY, role="inner", way=inner),
])

result = prepare_relation(rel, 3857, 0.1).build()
print(result.geom.area)   # 64.0
print(result.wkb[:18])    # EWKB hex carrying SRID 3857
```

## What this package does not do

It builds geometries from elements you supply; it does not read OSM files,
keep a node cache, or write to a database, and it has no command-line tool.
GeoJSON polygons can be parsed, but the package offers no clipping of
geometries to those polygons.