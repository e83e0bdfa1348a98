"""Shared test fixtures."""

from __future__ import annotations

import pytest
from shapely.geometry import LineString, Polygon, box

from insetmap.engine.configuration import get_configuration_store
from insetmap.spatial.backend import GeoDataset


# Sample spatial data, roughly the footprint of North Carolina (lon/lat).
# Union of the counties is exactly x -84..-75, y 33..37 (x_range 9, y_range 4).

COUNTIES = (
    box(-84.0, 34.5, -81.0, 36.5),
    box(-81.0, 35.0, -78.0, 37.0),
    box(-78.0, 33.0, -75.0, 36.0),
    Polygon([(-80.0, 33.5), (-78.5, 33.0), (-78.5, 34.5), (-80.0, 34.5)]),
)

# A coastline-like line that pokes into the eastern box only.
COAST = LineString([(-77.0, 34.0), (-76.0, 35.0), (-75.5, 35.8)])

NC_EXTENT = {"xmin": -84.0, "ymin": 33.0, "xmax": -75.0, "ymax": 37.0}

# Same footprint as GeoJSON geometries, for API tests.
COUNTIES_GEOJSON = [
    {
        "type": "Polygon",
        "coordinates": [[list(c) for c in poly.exterior.coords]],
    }
    for poly in COUNTIES
]


@pytest.fixture(autouse=True)
def _reset_configuration_store():
    store = get_configuration_store()
    store.reset()
    yield
    store.reset()


@pytest.fixture
def counties() -> GeoDataset:
    return GeoDataset(geometries=COUNTIES, crs="EPSG:4326", name="counties")


@pytest.fixture
def coast() -> GeoDataset:
    return GeoDataset(geometries=(COAST,), crs="EPSG:4326", name="coast")


@pytest.fixture
def wide_box() -> GeoDataset:
    """A single 4x1 rectangle: main_ratio 4."""
    return GeoDataset(geometries=(box(0.0, 0.0, 4.0, 1.0),), crs="EPSG:3857", name="wide")
