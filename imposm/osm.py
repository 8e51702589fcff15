"""OSM element types used when building geometries."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, List, Optional


class MemberType(IntEnum):
    """Type of a relation member."""

    NODE = 0
    WAY = 1
    RELATION = 2


@dataclass
class Node:
    """A node with its coordinates."""

    id: int = 0
    long: float = 0.0
    lat: float = 0.0
    tags: Dict[str, str] = field(default_factory=dict)


@dataclass
class Way:
    """A way with its node references and, once resolved, its nodes."""

    id: int = 0
    tags: Dict[str, str] = field(default_factory=dict)
    refs: List[int] = field(default_factory=list)
    nodes: List[Node] = field(default_factory=list)


@dataclass
class Member:
    """A relation member, optionally with its resolved way or node."""

    id: int = 0
    type: MemberType = MemberType.NODE
    role: str = ""
    way: Optional[Way] = None
    node: Optional[Node] = None


@dataclass
class Relation:
    """A relation with its members."""

    id: int = 0
    tags: Dict[str, str] = field(default_factory=dict)
    members: List[Member] = field(default_factory=list)