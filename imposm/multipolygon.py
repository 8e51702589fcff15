"""(Multi)polygons of multipolygon relations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Set

from shapely.prepared import prep

from . import geos
from .geom import NO_RING_MESSAGE, Geometry, GeometryError, polygon
from .osm import Relation
from .ring import Ring, merge_rings


def build_rings(rel: Relation, max_ring_gap: float) -> List[Ring]:
    """Closed rings of all way members, sorted by area from large to small."""
    complete: List[Ring] = []
    incomplete: List[Ring] = []
    for member in rel.members:
        if member.way is None:
            continue
        ring = Ring.from_way(member.way)
        if ring.is_closed():
            ring.geom = polygon(ring.nodes)
            complete.append(ring)
        else:
            incomplete.append(ring)

    for ring in merge_rings(incomplete):
        if not ring.is_closed() and not ring.try_close(max_ring_gap):
            continue
        ring.geom = polygon(ring.nodes)
        complete.append(ring)

    if not complete:
        raise GeometryError(NO_RING_MESSAGE)

    for ring in complete:
        ring.area = ring.geom.area
    complete.sort(key=lambda r: r.area, reverse=True)
    return complete


def ring_is_hole(rings: List[Ring], idx: int) -> bool:
    """True if rings[idx] is nested an odd number of times."""
    depth = 0
    idx = rings[idx].contained_by
    while idx != -1:
        depth += 1
        idx = rings[idx].contained_by
    return depth % 2 == 1


def _build_rel_geometry(rel: Relation, rings: List[Ring]):
    shells = {rings[0]: None}
    for i, ring in enumerate(rings):
        test = prep(ring.geom)
        for j, other in enumerate(rings[i + 1 :], start=i + 1):
            if not test.contains(other.geom):
                continue
            if other.contained_by != -1:
                rings[other.contained_by].holes.pop(other, None)
                shells.pop(other, None)
            other.contained_by = i
            if ring_is_hole(rings, j):
                ring.holes[other] = None
                ring.outer = False
            else:
                shells[other] = None
                ring.outer = True
        if ring.contained_by == -1:
            shells[ring] = None
            ring.outer = True

    polygons = [
        geos.polygon(shell.geom.exterior, [hole.geom.exterior for hole in shell.holes])
        for shell in shells
    ]
    result = polygons[0] if len(polygons) == 1 else geos.multi_polygon(polygons)
    result = geos.make_valid(result)

    outer_ids: Set[int] = {way.id for ring in rings if ring.outer for way in ring.ways}
    for member in rel.members:
        member.role = "outer" if member.id in outer_ids else "inner"
    return result


@dataclass
class PreparedRelation:
    """Closed rings of a relation, ready to be assembled into a (multi)polygon."""

    rings: List[Ring]
    rel: Relation
    srid: int

    def build(self) -> Geometry:
        """Assemble the (multi)polygon and its EWKB; sets member roles on the relation."""
        geom = _build_rel_geometry(self.rel, self.rings)
        try:
            wkb = geos.as_ewkb_hex(geom, self.srid)
        except geos.GeosError as exc:
            raise geos.GeosError("unable to create WKB for relation") from exc
        return Geometry(geom=geom, wkb=wkb)


def prepare_relation(rel: Relation, srid: int, max_ring_gap: float) -> PreparedRelation:
    """Build the rings of rel; raise GeometryError if none is closed."""
    return PreparedRelation(build_rings(rel, max_ring_gap), rel, srid)