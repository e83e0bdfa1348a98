"""Spatial collaborator: bounding boxes, cropping and reprojection of datasets.

The layout engine only needs a handful of operations, captured by
``SpatialBackend``. ``ShapelyBackend`` implements them for ``GeoDataset``, a
list of Shapely geometries sharing one coordinate reference system. Projection
math is not ours: reprojection delegates to a caller-supplied ``projector``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Protocol, Sequence, runtime_checkable

import numpy as np
import shapely
from shapely.geometry import box, mapping, shape
from shapely.geometry.base import BaseGeometry

from insetmap.engine.bbox import BoundingBox
from insetmap.engine.errors import ProjectionError

logger = logging.getLogger(__name__)

# projector(source_crs, target_crs) -> func(x, y) -> (x', y')
# func receives and returns numpy coordinate arrays.
Projector = Callable[[Any, Any], Callable[..., Any]]

# Edge subdivisions when projecting a bbox outline.
_BBOX_SEGMENTS = 16


@runtime_checkable
class SpatialBackend(Protocol):
    def bounding_box(self, dataset: Any) -> BoundingBox | None:
        """Bounds of ``dataset``, or ``None`` when it holds no geometry."""
        ...

    def crop(self, dataset: Any, bbox: BoundingBox) -> Any:
        ...

    def reproject(self, dataset: Any, target_crs: Any) -> Any:
        ...

    def reproject_bbox(self, bbox: BoundingBox, source_crs: Any, target_crs: Any) -> BoundingBox:
        """Extent of ``bbox`` once expressed in ``target_crs``."""
        ...

    def crs_of(self, dataset: Any) -> Any:
        ...


@dataclass(frozen=True)
class GeoDataset:
    """Geometries in a single coordinate reference system (opaque identifier)."""

    geometries: tuple[BaseGeometry, ...] = field(default_factory=tuple)
    crs: Any = None
    name: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "geometries", tuple(self.geometries))

    @classmethod
    def from_geojson(cls, features: Sequence[dict], crs: Any = None, name: str = "") -> GeoDataset:
        """Build from GeoJSON geometry dicts or Feature dicts."""
        geoms = []
        for feat in features:
            geom = feat["geometry"] if feat.get("type") == "Feature" else feat
            geoms.append(shape(geom))
        return cls(geometries=tuple(geoms), crs=crs, name=name)

    @property
    def is_empty(self) -> bool:
        return all(g.is_empty for g in self.geometries)

    def to_geojson(self) -> list[dict]:
        return [mapping(g) for g in self.geometries if not g.is_empty]


class ShapelyBackend:
    """SpatialBackend over ``GeoDataset`` values."""

    def __init__(self, projector: Projector | None = None) -> None:
        self.projector = projector

    def crs_of(self, dataset: GeoDataset) -> Any:
        return dataset.crs

    def bounding_box(self, dataset: GeoDataset) -> BoundingBox | None:
        bounds = [g.bounds for g in dataset.geometries if not g.is_empty]
        if not bounds:
            return None
        arr = np.asarray(bounds, dtype=np.float64)
        return BoundingBox(
            xmin=float(np.min(arr[:, 0])),
            ymin=float(np.min(arr[:, 1])),
            xmax=float(np.max(arr[:, 2])),
            ymax=float(np.max(arr[:, 3])),
        )

    def crop(self, dataset: GeoDataset, bbox: BoundingBox) -> GeoDataset:
        """Clip every geometry to ``bbox``; the box must have positive area."""
        xmin, ymin, xmax, ymax = bbox.as_tuple()
        clipped = []
        for geom in dataset.geometries:
            if geom.is_empty:
                continue
            part = shapely.clip_by_rect(geom, xmin, ymin, xmax, ymax)
            if not part.is_empty:
                clipped.append(part)
        logger.debug(
            "Cropped %s to (%.4g, %.4g, %.4g, %.4g): %d/%d geometries kept",
            dataset.name or "dataset", xmin, ymin, xmax, ymax,
            len(clipped), len(dataset.geometries),
        )
        return GeoDataset(geometries=tuple(clipped), crs=dataset.crs, name=dataset.name)

    def reproject(self, dataset: GeoDataset, target_crs: Any) -> GeoDataset:
        if target_crs is None or target_crs == dataset.crs:
            return dataset
        func = self._transformer(dataset.crs, target_crs)
        projected = tuple(shapely.transform(g, func, interleaved=False) for g in dataset.geometries)
        return GeoDataset(geometries=projected, crs=target_crs, name=dataset.name)

    def reproject_bbox(self, bbox: BoundingBox, source_crs: Any, target_crs: Any) -> BoundingBox:
        if target_crs is None or target_crs == source_crs:
            return bbox
        func = self._transformer(source_crs, target_crs)
        outline = box(*bbox.as_tuple())
        # Densify so curved images of straight edges stay inside the result.
        step = max(bbox.x_range, bbox.y_range) / _BBOX_SEGMENTS
        if step > 0:
            outline = shapely.segmentize(outline, step)
        projected = shapely.transform(outline, func, interleaved=False)
        return BoundingBox.from_bounds(projected.bounds)

    def _transformer(self, source_crs: Any, target_crs: Any) -> Callable[..., Any]:
        if self.projector is None:
            raise ProjectionError(
                f"Cannot reproject from {source_crs!r} to {target_crs!r}: no projector configured"
            )
        return self.projector(source_crs, target_crs)
