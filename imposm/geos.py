"""Geometry construction, operations and serialisation on top of shapely."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

import shapely
from shapely.errors import GEOSException
from shapely.geometry import MultiLineString, MultiPolygon, Point, Polygon
from shapely.geometry.base import BaseGeometry
from shapely.strtree import STRtree


class GeosError(Exception):
    """Raised when a geometry can not be created or processed."""


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned bounding box."""

    min_x: float
    min_y: float
    max_x: float
    max_y: float


NIL_BOUNDS = Bounds(1e20, 1e20, -1e20, -1e20)

_ERRORS = (GEOSException, ValueError, TypeError)


def bounds(geom: BaseGeometry) -> Bounds:
    """Bounds of the envelope, or NIL_BOUNDS if the envelope is not a polygon."""
    if geom is None or geom.is_empty:
        return NIL_BOUNDS
    envelope = geom.envelope
    if envelope.geom_type != "Polygon":
        return NIL_BOUNDS
    min_x, min_y, max_x, max_y = envelope.bounds
    return Bounds(min_x, min_y, max_x, max_y)


def bounds_polygon(bounds: Bounds) -> Polygon:
    """Normalized polygon covering the bounds."""
    return polygon(
        [
            (bounds.min_x, bounds.min_y),
            (bounds.max_x, bounds.min_y),
            (bounds.max_x, bounds.max_y),
            (bounds.min_x, bounds.max_y),
            (bounds.min_x, bounds.min_y),
        ]
    )


def point(x: float, y: float) -> Point:
    """Point at x/y."""
    return Point(x, y)


def _ring_coords(ring) -> list:
    if isinstance(ring, BaseGeometry):
        return list(ring.coords)
    return list(ring)


def polygon(exterior, interiors: Iterable = ()) -> Polygon:
    """Normalized polygon from an exterior ring and interior rings.

    Rings may be ring geometries or coordinate sequences.
    """
    try:
        shell = _ring_coords(exterior)
        holes = [_ring_coords(ring) for ring in interiors]
        return shapely.normalize(Polygon(shell, holes))
    except _ERRORS as exc:
        raise GeosError("unable to create polygon") from exc


def multi_polygon(polygons: Sequence[Polygon]) -> MultiPolygon:
    """MultiPolygon from polygons."""
    polygons = list(polygons)
    if not polygons:
        raise GeosError("no polygons for multipolygon")
    try:
        return MultiPolygon(polygons)
    except _ERRORS as exc:
        raise GeosError("unable to create multipolygon") from exc


def multi_line_string(lines: Sequence[BaseGeometry]) -> MultiLineString:
    """MultiLineString from linestrings."""
    lines = list(lines)
    if not lines:
        raise GeosError("no lines for multilinestring")
    try:
        return MultiLineString(lines)
    except _ERRORS as exc:
        raise GeosError("unable to create multilinestring") from exc


def geometry_type(geom: BaseGeometry) -> str:
    """GEOS type name of the geometry."""
    return geom.geom_type


def buffer(geom: BaseGeometry, size: float) -> BaseGeometry:
    """Buffer with 50 segments per quadrant."""
    try:
        return geom.buffer(size, quad_segs=50)
    except _ERRORS as exc:
        raise GeosError("unable to buffer geometry") from exc


def make_valid(geom: BaseGeometry) -> BaseGeometry:
    """Return geom if valid, otherwise its buffer(0)."""
    if geom.is_valid:
        return geom
    try:
        return buffer(geom, 0)
    except GeosError as exc:
        raise GeosError("Error while fixing geom with buffer(0)") from exc


def simplify_preserve_topology(geom: BaseGeometry, tolerance: float) -> BaseGeometry:
    """Topology preserving simplification."""
    try:
        return geom.simplify(tolerance, preserve_topology=True)
    except _ERRORS as exc:
        raise GeosError("unable to simplify geometry") from exc


def union_polygons(polygons: Sequence[Polygon]) -> Optional[BaseGeometry]:
    """Merge polygons into a single (Multi)Polygon; None if there are none."""
    polygons = list(polygons)
    if not polygons:
        return None
    if len(polygons) == 1:
        return polygons[0]
    try:
        return shapely.unary_union(multi_polygon(polygons))
    except _ERRORS as exc:
        raise GeosError("unable to union polygons") from exc


def line_merge(lines: Sequence[BaseGeometry]) -> List[BaseGeometry]:
    """Merge connected lines; return a list of LineStrings."""
    lines = list(lines)
    if len(lines) <= 1:
        return lines
    try:
        merged = shapely.line_merge(multi_line_string(lines))
    except _ERRORS as exc:
        raise GeosError("unable to merge lines") from exc
    if merged.geom_type == "LineString":
        return [merged]
    return list(merged.geoms)


def from_wkt(wkt: str) -> BaseGeometry:
    """Parse WKT."""
    try:
        return shapely.from_wkt(wkt)
    except _ERRORS as exc:
        raise GeosError(f"invalid WKT: {wkt!r}") from exc


def as_wkt(geom: BaseGeometry) -> str:
    """Geometry as WKT."""
    return shapely.to_wkt(geom)


def from_wkb(wkb: bytes) -> BaseGeometry:
    """Parse WKB."""
    if not wkb:
        raise GeosError("empty WKB")
    try:
        return shapely.from_wkb(wkb)
    except _ERRORS as exc:
        raise GeosError("invalid WKB") from exc


def as_wkb(geom: BaseGeometry) -> bytes:
    """Geometry as WKB."""
    return shapely.to_wkb(geom)


def as_ewkb_hex(geom: BaseGeometry, srid: int = 0) -> bytes:
    """Geometry as upper-case little-endian EWKB hex, with SRID if non-zero."""
    try:
        if srid:
            geom = shapely.set_srid(geom, srid)
        text = shapely.to_wkb(geom, hex=True, byte_order=1, include_srid=bool(srid))
    except _ERRORS as exc:
        raise GeosError("unable to create EWKB") from exc
    return text.upper().encode("ascii")


class Index:
    """Thread-safe spatial index answering bounding-box intersection queries."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._geoms: List[BaseGeometry] = []
        self._tree: Optional[STRtree] = None

    def __len__(self) -> int:
        return len(self._geoms)

    def add(self, geom: BaseGeometry) -> None:
        """Add a geometry; its id is its insertion position."""
        with self._lock:
            self._geoms.append(geom)
            self._tree = None

    def query(self, geom: BaseGeometry) -> List[int]:
        """Ids of geometries whose envelopes intersect the envelope of geom."""
        with self._lock:
            if not self._geoms:
                return []
            if self._tree is None:
                self._tree = STRtree(self._geoms)
            hits = self._tree.query(geom)
        return sorted(int(i) for i in hits)

    def query_geoms(self, geom: BaseGeometry) -> List[BaseGeometry]:
        """Geometries whose envelopes intersect the envelope of geom."""
        return [self._geoms[i] for i in self.query(geom)]