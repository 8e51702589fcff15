"""Polygon features from GeoJSON documents."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Union

from . import logger


class GeoJSONError(ValueError):
    """Raised for GeoJSON that is malformed or holds unsupported geometries."""


@dataclass
class Point:
    """A position in longitude/latitude order."""

    long: float
    lat: float


LineString = List[Point]
Polygon = List[LineString]


@dataclass
class Feature:
    """A polygon with the string properties of its GeoJSON feature."""

    polygon: Polygon
    properties: Dict[str, str] = field(default_factory=dict)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _point_from_coords(coords: Any) -> Point:
    if not isinstance(coords, list) or len(coords) not in (2, 3):
        raise GeoJSONError("point list length not 2 or 3")
    long, lat = coords[0], coords[1]
    if not _is_number(long):
        raise GeoJSONError("invalid lon")
    if not _is_number(lat):
        raise GeoJSONError("invalid lat")
    p = Point(float(long), float(lat))
    if p.long > 180.0 or p.long < -180.0 or p.lat > 90.0 or p.lat < -90.0:
        logger.println("[warn] coordinates outside of world boundary. non-4326?: ", p)
    return p


def _line_string_from_coords(coords: List[Any]) -> LineString:
    points = []
    for part in coords:
        if not isinstance(part, list):
            raise GeoJSONError("point not a list")
        points.append(_point_from_coords(part))
    return points


def _polygon_from_coords(coords: List[Any]) -> Polygon:
    rings = []
    for part in coords:
        if not isinstance(part, list):
            raise GeoJSONError("polygon LineString not a list")
        rings.append(_line_string_from_coords(part))
    return rings


def _multi_polygon_features_from_coords(coords: List[Any]) -> List[Feature]:
    features = []
    for part in coords:
        if not isinstance(part, list):
            raise GeoJSONError("multipolygon polygon not a list")
        features.append(Feature(_polygon_from_coords(part)))
    return features


def _format_value(value: Any) -> str:
    if value is None:
        return "<nil>"
    if isinstance(value, bool):
        return "true" if value else "false"
    if _is_number(value):
        number = float(value)
        if number.is_integer() and abs(number) < 1e21:
            return str(int(number))
        return repr(number)
    return str(value)


def _string_properties(properties: Dict[str, Any]) -> Dict[str, str]:
    return {key: _format_value(value) for key, value in properties.items()}


def _coordinates(obj: Dict[str, Any]) -> List[Any]:
    coords = obj.get("coordinates")
    if coords is None:
        return []
    if not isinstance(coords, list):
        raise GeoJSONError("coordinates not a list")
    return coords


def _features(obj: Any) -> List[Feature]:
    if not isinstance(obj, dict):
        raise GeoJSONError("GeoJSON object expected")
    kind = obj.get("type", "")
    if not isinstance(kind, str):
        raise GeoJSONError("type not a string")

    if kind in ("Point", "LineString"):
        raise GeoJSONError("only polygon or MultiPolygon are supported")
    if kind == "Polygon":
        return [Feature(_polygon_from_coords(_coordinates(obj)))]
    if kind == "MultiPolygon":
        return _multi_polygon_features_from_coords(_coordinates(obj))
    if kind == "Feature":
        geometry = obj.get("geometry")
        if geometry is None:
            raise GeoJSONError("feature without geometry")
        features = _features(geometry)
        properties = obj.get("properties") or {}
        if not isinstance(properties, dict):
            raise GeoJSONError("properties not an object")
        strings = _string_properties(properties)
        for feature in features:
            feature.properties = dict(strings)
        return features
    if kind == "FeatureCollection":
        members = obj.get("features") or []
        if not isinstance(members, list):
            raise GeoJSONError("features not a list")
        result: List[Feature] = []
        for member in members:
            result.extend(_features(member))
        return result
    raise GeoJSONError("unknown type: " + kind)


def parse_geojson(stream: Union[str, bytes, Any]) -> List[Feature]:
    """Parse the first GeoJSON value of a text, bytes or file object into polygon features."""
    data = stream.read() if hasattr(stream, "read") else stream
    if isinstance(data, (bytes, bytearray)):
        data = bytes(data).decode("utf-8")
    try:
        obj, _ = json.JSONDecoder().raw_decode(data.lstrip())
    except json.JSONDecodeError as exc:
        raise GeoJSONError(str(exc)) from exc
    return _features(obj)