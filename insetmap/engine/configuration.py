"""LayoutConfiguration: one main spec plus N insets, resolved against the data.

Built once by ``build_configuration``; immutable afterwards. The most recent
successful build is kept in a single-slot ``ConfigurationStore`` so that
``compose()`` can be called without passing a configuration explicitly.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Literal, Sequence

from insetmap.config import settings
from insetmap.engine.bbox import BoundingBox, features, fill_missing, union
from insetmap.engine.errors import (
    DegenerateExtentError,
    EmptyInputError,
    EmptySpecListError,
    InvalidRatioError,
    MultipleMainSpecError,
    NoConfigurationError,
    NoMainSpecError,
)
from insetmap.engine.spec import SubplotSpec

logger = logging.getLogger(__name__)

EmptyPolicy = Literal["raise", "placeholder"]


@dataclass(frozen=True)
class ResolvedSpec:
    """A spec bundled with the extents derived for it at build time."""

    spec: SubplotSpec
    # Requested box completed from the overall extent, in the source CRS.
    resolved_bbox: BoundingBox
    # Extent of the cropped data, in the target CRS.
    data_extent: BoundingBox
    # Axis limits for the renderer, in the target CRS.
    plot_bbox: BoundingBox
    # True when the crop was empty and data_extent is the requested box itself.
    is_empty: bool = False

    @property
    def is_main(self) -> bool:
        return self.spec.is_main


@dataclass(frozen=True)
class LayoutConfiguration:
    datasets: tuple[Any, ...]
    specs: tuple[ResolvedSpec, ...]
    main_index: int
    overall_extent: BoundingBox
    main_ratio: float
    full_ratio: float = 1.0
    source_crs: Any = None
    target_crs: Any = None
    border_style: dict[str, Any] = field(default_factory=dict)

    @property
    def main(self) -> ResolvedSpec:
        return self.specs[self.main_index]

    @property
    def insets(self) -> list[ResolvedSpec]:
        return [s for i, s in enumerate(self.specs) if i != self.main_index]


class ConfigurationStore:
    """Single slot holding the last built configuration (last writer wins)."""

    def __init__(self) -> None:
        self._configuration: LayoutConfiguration | None = None

    def get(self) -> LayoutConfiguration:
        if self._configuration is None:
            raise NoConfigurationError(
                "No inset configuration found. Please run build_configuration() first."
            )
        return self._configuration

    def set(self, configuration: LayoutConfiguration) -> None:
        if not isinstance(configuration, LayoutConfiguration):
            raise TypeError("Inset configuration must be a LayoutConfiguration")
        self._configuration = configuration

    def reset(self) -> None:
        self._configuration = None

    @property
    def has_configuration(self) -> bool:
        return self._configuration is not None


# Module-level singleton
_store = ConfigurationStore()


def get_configuration_store() -> ConfigurationStore:
    return _store


def last_configuration() -> LayoutConfiguration:
    """The most recently built configuration; raises ``NoConfigurationError``."""
    return _store.get()


def build_configuration(
    datasets: Sequence[Any],
    specs: Sequence[SubplotSpec],
    target_crs: Any = None,
    border_style: dict[str, Any] | None = None,
    full_ratio: float = 1.0,
    backend: Any = None,
    empty_policy: EmptyPolicy = "raise",
    store: ConfigurationStore | None = None,
) -> LayoutConfiguration:
    """Validate the specs and resolve every bbox and data extent.

    Args:
        datasets: Spatial datasets understood by ``backend``.
        specs: Exactly one main spec plus any number of insets.
        target_crs: Coordinate system to plot in; ``None`` keeps the source CRS.
        border_style: Overrides merged into the default inset border.
        full_ratio: Width/height of the eventual saved image.
        backend: SpatialBackend; defaults to ``ShapelyBackend()``.
        empty_policy: ``"raise"`` propagates ``DegenerateExtentError`` for an
            inset whose crop is empty; ``"placeholder"`` keeps it with its
            requested bbox so it renders as an empty framed subplot.
        store: Where to record the result; defaults to the module store.

    The configuration is stored only if every step succeeds.
    """
    specs = list(specs)
    if not specs:
        raise EmptySpecListError("specs must be a non-empty list of subplot specs")

    main_indices = [i for i, s in enumerate(specs) if s.is_main]
    if not main_indices:
        raise NoMainSpecError("Exactly one plot specification must have main = True")
    if len(main_indices) > 1:
        raise MultipleMainSpecError("Only one plot specification can have main = True")

    if not full_ratio > 0:
        raise InvalidRatioError(f"full_ratio must be positive, got {full_ratio}")

    datasets = tuple(datasets)
    if not datasets:
        raise EmptyInputError("datasets must contain at least one spatial dataset")

    if empty_policy not in ("raise", "placeholder"):
        raise ValueError(f"Unknown empty_policy {empty_policy!r}")

    if backend is None:
        from insetmap.spatial.backend import ShapelyBackend

        backend = ShapelyBackend()

    overall_extent = _union_of(backend, datasets, "overall data")
    source_crs = backend.crs_of(datasets[0])
    if target_crs is None:
        target_crs = source_crs

    resolved: list[ResolvedSpec] = []
    for i, spec in enumerate(specs):
        resolved_bbox = fill_missing(spec.requested_bbox, overall_extent)
        is_empty = False
        try:
            # A filled box can collapse to zero width or height; it cannot be cropped.
            features(resolved_bbox)
            cropped = [
                backend.reproject(backend.crop(d, resolved_bbox), target_crs) for d in datasets
            ]
            data_extent = _union_of(backend, cropped, spec.label)
            features(data_extent)
        except DegenerateExtentError:
            if spec.is_main or empty_policy == "raise":
                raise
            logger.warning(
                "Spec %d (%s) has no data inside %s; using an empty placeholder",
                i, spec.label, resolved_bbox,
            )
            data_extent = backend.reproject_bbox(resolved_bbox, source_crs, target_crs)
            is_empty = True

        if spec.is_main or is_empty:
            # Main limits match main_ratio exactly.
            plot_bbox = data_extent
        else:
            plot_bbox = backend.reproject_bbox(resolved_bbox, source_crs, target_crs)

        logger.debug(
            "Spec %d (%s): bbox=%s data_extent=%s plot_bbox=%s",
            i, spec.label, resolved_bbox, data_extent, plot_bbox,
        )
        resolved.append(
            ResolvedSpec(
                spec=spec,
                resolved_bbox=resolved_bbox,
                data_extent=data_extent,
                plot_bbox=plot_bbox,
                is_empty=is_empty,
            )
        )

    main_index = main_indices[0]
    main_ratio = features(resolved[main_index].data_extent).aspect_ratio

    configuration = LayoutConfiguration(
        datasets=datasets,
        specs=tuple(resolved),
        main_index=main_index,
        overall_extent=overall_extent,
        main_ratio=main_ratio,
        full_ratio=float(full_ratio),
        source_crs=source_crs,
        target_crs=target_crs,
        border_style={**settings.border_style, **(border_style or {})},
    )

    (store if store is not None else _store).set(configuration)
    logger.info(
        "Built inset configuration: %d specs (main #%d), main_ratio=%.4f, full_ratio=%.4f",
        len(resolved), main_index, main_ratio, configuration.full_ratio,
    )
    return configuration


def _union_of(backend: Any, datasets: Sequence[Any], what: str) -> BoundingBox:
    boxes = [b for b in (backend.bounding_box(d) for d in datasets) if b is not None]
    if not boxes:
        raise DegenerateExtentError(f"No spatial data within the {what} extent")
    return union(boxes)
