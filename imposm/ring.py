"""Rings built from (parts of) relation member ways."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from shapely.geometry.base import BaseGeometry

from .osm import Node, Way


@dataclass(eq=False)
class Ring:
    """A chain of way segments that may form a closed ring."""

    ways: List[Way] = field(default_factory=list)
    refs: List[int] = field(default_factory=list)
    nodes: List[Node] = field(default_factory=list)
    geom: Optional[BaseGeometry] = None
    holes: Dict["Ring", None] = field(default_factory=dict)
    contained_by: int = -1
    area: float = 0.0
    outer: bool = False
    inserted: Dict[int, bool] = field(default_factory=dict)

    @classmethod
    def from_way(cls, way: Way) -> "Ring":
        """Ring holding copies of the refs and nodes of way."""
        return cls(ways=[way], refs=list(way.refs), nodes=list(way.nodes))

    def is_closed(self) -> bool:
        """True if the ring has at least four refs and ends where it starts."""
        return len(self.refs) >= 4 and self.refs[0] == self.refs[-1]

    def try_close(self, max_ring_gap: float) -> bool:
        """Close the ring if its end nodes are closer than max_ring_gap."""
        if len(self.refs) < 4:
            return False
        start, end = self.nodes[0], self.nodes[-1]
        if math.hypot(start.lat - end.lat, start.long - end.long) < max_ring_gap:
            self.refs[-1] = self.refs[0]
            self.nodes[-1] = self.nodes[0]
            return True
        return False


def merge_rings(rings: List[Ring]) -> List[Ring]:
    """Join rings that share end refs; return the resulting rings."""
    endpoints: Dict[int, Ring] = {}

    for ring in rings:
        if len(ring.refs) < 2:
            continue
        left, right = ring.refs[0], ring.refs[-1]

        orig = endpoints.pop(left, None)
        if orig is not None:
            if left == orig.refs[-1]:
                orig.refs.extend(ring.refs[1:])
                orig.nodes.extend(ring.nodes[1:])
            else:
                orig.refs.reverse()
                orig.refs.extend(ring.refs[1:])
                orig.nodes.reverse()
                orig.nodes.extend(ring.nodes[1:])
            orig.ways.extend(ring.ways)

            right_ring = endpoints.get(right)
            if right_ring is not None and right_ring is not orig:
                del endpoints[right]
                if right == right_ring.refs[0]:
                    orig.refs.extend(right_ring.refs[1:])
                    orig.nodes.extend(right_ring.nodes[1:])
                else:
                    orig.refs = orig.refs[:-1] + right_ring.refs[::-1]
                    orig.nodes = orig.nodes[:-1] + right_ring.nodes[::-1]
                orig.ways.extend(right_ring.ways)
                endpoints[orig.refs[-1]] = orig
            else:
                endpoints[right] = orig
            continue

        orig = endpoints.pop(right, None)
        if orig is not None:
            if right == orig.refs[0]:
                orig.refs = ring.refs[:-1] + orig.refs
                orig.nodes = ring.nodes[:-1] + orig.nodes
            else:
                ring.refs.reverse()
                ring.nodes.reverse()
                orig.refs = orig.refs[:-1] + ring.refs
                orig.nodes = orig.nodes[:-1] + ring.nodes
            orig.ways.extend(ring.ways)
            endpoints[left] = orig
        else:
            endpoints[left] = ring
            endpoints[right] = ring

    return list(dict.fromkeys(endpoints.values()))