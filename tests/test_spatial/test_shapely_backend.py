"""Tests for the Shapely spatial backend."""

from __future__ import annotations

import numpy as np
import pytest
from shapely.geometry import LineString, Point, box

from insetmap.engine.bbox import BoundingBox
from insetmap.engine.errors import ProjectionError
from insetmap.spatial.backend import GeoDataset, ShapelyBackend, SpatialBackend
from tests.conftest import COUNTIES_GEOJSON, NC_EXTENT


backend = ShapelyBackend()


def test_satisfies_protocol():
    assert isinstance(backend, SpatialBackend)


def test_bounding_box(counties):
    assert backend.bounding_box(counties) == BoundingBox(**NC_EXTENT)


def test_bounding_box_empty_dataset():
    assert backend.bounding_box(GeoDataset()) is None
    assert backend.bounding_box(GeoDataset(geometries=(Point(),))) is None


def test_bounding_box_single_point():
    bbox = backend.bounding_box(GeoDataset(geometries=(Point(1, 2),)))
    assert bbox == BoundingBox(xmin=1, ymin=2, xmax=1, ymax=2)


def test_crop_keeps_intersecting_parts(counties):
    cropped = backend.crop(counties, BoundingBox(xmin=-77, ymin=33, xmax=-75, ymax=37))
    assert len(cropped.geometries) == 1
    assert cropped.crs == counties.crs
    assert backend.bounding_box(cropped) == BoundingBox(xmin=-77, ymin=33, xmax=-75, ymax=36)


def test_crop_outside_is_empty(counties):
    cropped = backend.crop(counties, BoundingBox(xmin=-70, ymin=33, xmax=-60, ymax=37))
    assert cropped.is_empty
    assert backend.bounding_box(cropped) is None


def test_crop_line():
    data = GeoDataset(geometries=(LineString([(0, 0), (10, 10)]),))
    cropped = backend.crop(data, BoundingBox(xmin=0, ymin=0, xmax=5, ymax=5))
    assert backend.bounding_box(cropped) == BoundingBox(xmin=0, ymin=0, xmax=5, ymax=5)


def test_crs_of(counties):
    assert backend.crs_of(counties) == "EPSG:4326"


# ---------------------------------------------------------------------------
# Reprojection
# ---------------------------------------------------------------------------

class TestReproject:
    def test_same_crs_is_identity(self, counties):
        assert backend.reproject(counties, "EPSG:4326") is counties

    def test_none_target_is_identity(self, counties):
        assert backend.reproject(counties, None) is counties

    def test_missing_projector(self, counties):
        with pytest.raises(ProjectionError, match="no projector configured"):
            backend.reproject(counties, "EPSG:3857")

    def test_projector_applied(self):
        calls = []

        def projector(source, target):
            calls.append((source, target))
            return lambda x, y: (np.asarray(x) + 100, np.asarray(y))

        data = GeoDataset(geometries=(box(0, 0, 1, 1),), crs="A")
        moved = ShapelyBackend(projector=projector).reproject(data, "B")
        assert calls == [("A", "B")]
        assert moved.crs == "B"
        assert moved.geometries[0].bounds == (100.0, 0.0, 101.0, 1.0)


# ---------------------------------------------------------------------------
# GeoJSON
# ---------------------------------------------------------------------------

class TestGeoJSON:
    def test_from_geometries(self):
        data = GeoDataset.from_geojson(COUNTIES_GEOJSON, crs="EPSG:4326")
        assert len(data.geometries) == 4
        assert backend.bounding_box(data) == BoundingBox(**NC_EXTENT)

    def test_from_features(self):
        features = [{"type": "Feature", "properties": {}, "geometry": g} for g in COUNTIES_GEOJSON]
        data = GeoDataset.from_geojson(features)
        assert len(data.geometries) == 4

    def test_to_geojson_skips_empty(self):
        data = GeoDataset(geometries=(box(0, 0, 1, 1), Point()))
        out = data.to_geojson()
        assert len(out) == 1
        assert out[0]["type"] == "Polygon"


# ---------------------------------------------------------------------------
# Bounding-box reprojection
# ---------------------------------------------------------------------------

def _shear_projector(source, target):
    """x' = x + y: straight edges stay straight, the box becomes a parallelogram."""
    return lambda x, y: (np.asarray(x) + np.asarray(y), np.asarray(y))


def _square_x_projector(source, target):
    return lambda x, y: (np.asarray(x) ** 2, np.asarray(y))


class TestReprojectBBox:
    def test_same_crs_is_identity(self):
        bbox = BoundingBox(xmin=0, ymin=0, xmax=4, ymax=2)
        assert backend.reproject_bbox(bbox, "A", "A") is bbox
        assert backend.reproject_bbox(bbox, "A", None) is bbox

    def test_missing_projector(self):
        with pytest.raises(ProjectionError):
            backend.reproject_bbox(BoundingBox(xmin=0, ymin=0, xmax=1, ymax=1), "A", "B")

    def test_extent_of_projected_outline(self):
        moved = ShapelyBackend(projector=_shear_projector).reproject_bbox(
            BoundingBox(xmin=0, ymin=0, xmax=4, ymax=2), "A", "B"
        )
        assert moved == BoundingBox(xmin=0, ymin=0, xmax=6, ymax=2)

    def test_curved_edges_are_covered(self):
        """x**2 over -2..1 peaks at a corner and dips near 0 mid-edge."""
        moved = ShapelyBackend(projector=_square_x_projector).reproject_bbox(
            BoundingBox(xmin=-2, ymin=0, xmax=1, ymax=1), "A", "B"
        )
        assert moved.xmin == pytest.approx(0.0, abs=0.01)
        assert moved.xmax == pytest.approx(4.0)

    def test_degenerate_box(self):
        moved = ShapelyBackend(projector=_shear_projector).reproject_bbox(
            BoundingBox(xmin=1, ymin=0, xmax=1, ymax=0), "A", "B"
        )
        assert moved == BoundingBox(xmin=1, ymin=0, xmax=1, ymax=0)
