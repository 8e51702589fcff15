"""Geometry building for OpenStreetMap elements, EWKB output, GeoJSON polygon parsing and logging."""

__version__ = "0.1.0"