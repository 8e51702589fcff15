[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "imposm"
version = "0.1.0"
description = "Geometry building for OpenStreetMap data: ways, multipolygon relations, EWKB output and GeoJSON polygon parsing."
requires-python = ">=3.10"
dependencies = [
    "shapely",
]
keywords = ["openstreetmap", "osm", "gis", "multipolygon", "wkb", "ewkb", "geojson"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: GIS",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["imposm"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
ignore_missing_imports = true
