"""Geometries from OSM nodes, ways and relations."""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass
from typing import List, Sequence

import shapely
from shapely.geometry import LineString
from shapely.geometry.base import BaseGeometry

from . import geos
from .osm import Node, Relation

ONE_NODE_WAY_MESSAGE = "need at least two separate nodes for way"
NO_RING_MESSAGE = "linestrings do not form ring"

_WKB_SRID_FLAG = 0x20000000
_WKB_LINESTRING_TYPE = 2
_WKB_POLYGON_TYPE = 3


class GeometryError(Exception):
    """Raised when the elements do not describe a valid geometry."""

    def __init__(self, message: str, level: int = 0) -> None:
        super().__init__(message)
        self.message = message
        self.level = level


@dataclass
class Geometry:
    """A geometry together with its EWKB hex encoding."""

    geom: BaseGeometry
    wkb: bytes


def _nodes_equal(a: Node, b: Node) -> bool:
    return math.fabs(a.long - b.long) < 1e-9 and math.fabs(a.lat - b.lat) < 1e-9


def unduplicate_nodes(nodes: Sequence[Node]) -> List[Node]:
    """Drop nodes that repeat the position of their predecessor."""
    nodes = list(nodes)
    if len(nodes) < 2:
        return nodes
    return [nodes[0]] + [
        current for previous, current in zip(nodes, nodes[1:]) if not _nodes_equal(previous, current)
    ]


def point(node: Node) -> BaseGeometry:
    """Point of the node."""
    return geos.point(node.long, node.lat)


def line_string(nodes: Sequence[Node]) -> LineString:
    """LineString of the nodes, without consecutive duplicates."""
    nodes = unduplicate_nodes(nodes)
    if len(nodes) < 2:
        raise GeometryError(ONE_NODE_WAY_MESSAGE)
    try:
        return LineString([(n.long, n.lat) for n in nodes])
    except (ValueError, shapely.errors.GEOSException) as exc:
        raise geos.GeosError("unable to create LineString") from exc


def polygon(nodes: Sequence[Node]) -> BaseGeometry:
    """Normalized Polygon of a closed node list."""
    nodes = unduplicate_nodes(nodes)
    if len(nodes) < 4:
        raise GeometryError(NO_RING_MESSAGE)
    coords = [(n.long, n.lat) for n in nodes]
    if coords[0] != coords[-1]:
        raise geos.GeosError("unable to create LinearRing")
    return geos.polygon(coords)


def multi_linestring(rel: Relation, srid: int) -> BaseGeometry:
    """MultiLineString of all way members of the relation."""
    lines = [line_string(member.way.nodes) for member in rel.members if member.way is not None]
    try:
        result = geos.multi_line_string(lines)
    except geos.GeosError as exc:
        raise geos.GeosError("Error while building multi-linestring.") from exc
    if srid:
        result = shapely.set_srid(result, srid)
    return result


def as_geom_element(geom: BaseGeometry, srid: int = 0) -> Geometry:
    """Geometry with its EWKB hex encoding."""
    try:
        wkb = geos.as_ewkb_hex(geom, srid)
    except geos.GeosError as exc:
        raise geos.GeosError("could not create wkb") from exc
    return Geometry(geom=geom, wkb=wkb)


def _ewkb_hex(geom_type: int, srid: int, body: bytes) -> bytes:
    header = struct.pack("<B", 1)
    if srid:
        header += struct.pack("<II", geom_type | _WKB_SRID_FLAG, srid & 0xFFFFFFFF)
    else:
        header += struct.pack("<I", geom_type)
    return (header + body).hex().encode("ascii")


def _coords(nodes: Sequence[Node]) -> bytes:
    return b"".join(struct.pack("<dd", n.long, n.lat) for n in nodes)


def nodes_as_ewkb_hex_line_string(nodes: Sequence[Node], srid: int) -> bytes:
    """Lower-case EWKB hex of a LineString, written without GEOS."""
    nodes = unduplicate_nodes(nodes)
    if len(nodes) < 2:
        raise GeometryError(ONE_NODE_WAY_MESSAGE)
    body = struct.pack("<I", len(nodes)) + _coords(nodes)
    return _ewkb_hex(_WKB_LINESTRING_TYPE, srid, body)


def nodes_as_ewkb_hex_polygon(nodes: Sequence[Node], srid: int) -> bytes:
    """Lower-case EWKB hex of a single-ring Polygon, written without GEOS."""
    nodes = list(nodes)
    body = struct.pack("<II", 1, len(nodes)) + _coords(nodes)
    return _ewkb_hex(_WKB_POLYGON_TYPE, srid, body)