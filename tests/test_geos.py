import math

import pytest

from imposm import geos
from imposm.geos import NIL_BOUNDS, Bounds, GeosError, Index


def _index():
    idx = Index()
    for i in range(10):
        idx.add(geos.from_wkt(f"POLYGON(({i} 0, 10 0, 10 10, {i} 10, {i} 0))"))
    return idx


def test_index_query():
    idx = _index()
    assert len(idx.query(geos.point(0, 10.000001))) == 0
    assert len(idx.query(geos.point(9.5, 5))) == 10
    assert len(idx.query(geos.point(0.5, 5))) == 1
    assert len(idx.query(geos.point(4.5, 5))) == 5


def test_index_query_geoms_returns_added_geometries():
    idx = _index()
    hits = idx.query_geoms(geos.point(8.5, 5))
    assert len(hits) == 9
    assert all(g.bounds[0] <= 8.5 for g in hits)


def test_empty_index():
    assert Index().query(geos.point(0, 0)) == []


def test_bounds_of_polygon():
    g = geos.from_wkt("POLYGON((1 2, 5 2, 5 7, 1 7, 1 2))")
    assert geos.bounds(g) == Bounds(1, 2, 5, 7)


def test_bounds_of_point_is_nil():
    assert geos.bounds(geos.point(1, 1)) == NIL_BOUNDS


def test_bounds_polygon_roundtrip():
    b = Bounds(0, 0, 0.15, 0.11)
    poly = geos.bounds_polygon(b)
    assert geos.geometry_type(poly) == "Polygon"
    assert geos.bounds(poly) == b
    assert poly.is_valid


def test_polygon_with_hole():
    shell = geos.from_wkt("LINEARRING(0 0, 10 0, 10 10, 0 10, 0 0)")
    hole = geos.from_wkt("LINEARRING(2 2, 8 2, 8 8, 2 8, 2 2)")
    poly = geos.polygon(shell, [hole])
    assert poly.area == 64
    assert poly.is_valid


def test_polygon_too_few_points_raises():
    with pytest.raises(GeosError):
        geos.polygon([(0, 0), (1, 1)])


def test_multi_polygon_empty_raises():
    with pytest.raises(GeosError):
        geos.multi_polygon([])
    with pytest.raises(GeosError):
        geos.multi_line_string([])


def test_union_polygons():
    assert geos.union_polygons([]) is None
    single = geos.bounds_polygon(Bounds(0, 0, 1, 1))
    assert geos.union_polygons([single]) is single
    disjoint = geos.union_polygons(
        [geos.bounds_polygon(Bounds(0, 0, 10, 10)), geos.bounds_polygon(Bounds(20, 20, 30, 30))]
    )
    assert geos.geometry_type(disjoint) == "MultiPolygon"
    overlapping = geos.union_polygons(
        [geos.bounds_polygon(Bounds(0, 0, 10, 10)), geos.bounds_polygon(Bounds(5, 5, 30, 30))]
    )
    assert geos.geometry_type(overlapping) == "Polygon"
    assert overlapping.area == 100 + 625 - 25


def test_line_merge():
    lines = [
        geos.from_wkt("LINESTRING(0 0, 10 0)"),
        geos.from_wkt("LINESTRING(0 0, 0 10)"),
        geos.from_wkt("LINESTRING(10 0, 10 10)"),
    ]
    merged = geos.line_merge(lines)
    assert len(merged) == 1
    assert merged[0].length == 30
    apart = geos.line_merge(
        [geos.from_wkt("LINESTRING(0 0, 10 0)"), geos.from_wkt("LINESTRING(20 0, 30 0)")]
    )
    assert [geos.geometry_type(g) for g in apart] == ["LineString", "LineString"]


def test_make_valid():
    bowtie = geos.from_wkt("POLYGON((0 0, 10 10, 10 0, 0 10, 0 0))")
    assert not bowtie.is_valid
    assert geos.make_valid(bowtie).is_valid
    square = geos.bounds_polygon(Bounds(0, 0, 1, 1))
    assert geos.make_valid(square) is square


def test_buffer_point_approximates_circle():
    circle = geos.buffer(geos.point(0, 0), 1.0)
    assert abs(circle.area - math.pi) < 0.01


def test_simplify_preserve_topology():
    line = geos.from_wkt("LINESTRING(0 0, 5 0.001, 10 0)")
    simplified = geos.simplify_preserve_topology(line, 0.01)
    assert len(simplified.coords) == 2


def test_wkt_roundtrip():
    g = geos.from_wkt("LINESTRING(0 0, 5 0, 10 0, 10 5)")
    assert geos.from_wkt(geos.as_wkt(g)).equals(g)


def test_invalid_wkt_raises():
    with pytest.raises(GeosError):
        geos.from_wkt("NOT A GEOMETRY")


def test_wkb_roundtrip():
    g = geos.from_wkt("POLYGON((0 0, 10 0, 10 10, 0 10, 0 0))")
    assert geos.from_wkb(geos.as_wkb(g)).equals(g)
    with pytest.raises(GeosError):
        geos.from_wkb(b"")


def test_ewkb_hex():
    p = geos.point(1, 2)
    assert geos.as_ewkb_hex(p, 0) == b"0101000000000000000000F03F0000000000000040"
    assert geos.as_ewkb_hex(p, 4326) == b"0101000020E6100000000000000000F03F0000000000000040"