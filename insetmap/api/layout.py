"""POST /api/layout and /api/render: inset layout over GeoJSON input.

Each request builds its configuration into a private store so concurrent
requests never overwrite the process-wide "last configuration" slot.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from insetmap.config import Settings
from insetmap.dependencies import get_settings
from insetmap.engine.bbox import BoundingBox
from insetmap.engine.compose import compose
from insetmap.engine.configuration import (
    ConfigurationStore,
    LayoutConfiguration,
    build_configuration,
)
from insetmap.engine.errors import collect_advisories
from insetmap.engine.resolver import resolve_layout
from insetmap.engine.spec import SubplotSpec, inset_spec
from insetmap.models.requests import LayoutRequest, RenderRequest
from insetmap.models.responses import BBoxModel, InsetLayoutModel, LayoutResponse
from insetmap.render.matplotlib_renderer import (
    MatplotlibRenderer,
    figure_to_png,
    geometry_drawer,
)
from insetmap.spatial.backend import GeoDataset

logger = logging.getLogger(__name__)

router = APIRouter()


def _build(request: LayoutRequest) -> tuple[LayoutConfiguration, list[str]]:
    """Validate specs and build a configuration, collecting advisories."""
    with collect_advisories() as advisories:
        specs: list[SubplotSpec] = [
            inset_spec(**s.model_dump()) for s in request.specs
        ]
        dataset = GeoDataset.from_geojson(request.geometries, crs=request.crs)
        configuration = build_configuration(
            datasets=[dataset],
            specs=specs,
            border_style=request.border_style,
            full_ratio=request.full_ratio,
            empty_policy=request.empty_policy,
            store=ConfigurationStore(),
        )
    return configuration, list(advisories)


def _bbox_model(bbox: BoundingBox) -> BBoxModel:
    xmin, ymin, xmax, ymax = bbox.as_tuple()
    return BBoxModel(xmin=xmin, ymin=ymin, xmax=xmax, ymax=ymax)


@router.post("/layout", response_model=LayoutResponse)
async def layout(
    request: LayoutRequest,
    cfg: Settings = Depends(get_settings),
) -> LayoutResponse:
    configuration, advisories = _build(request)
    layouts = resolve_layout(configuration, margin=cfg.inset_margin)

    insets = []
    for i, (resolved, placed) in enumerate(zip(configuration.insets, layouts)):
        insets.append(
            InsetLayoutModel(
                name=resolved.spec.name or f"inset_{i + 1}",
                x=placed.x,
                y=placed.y,
                width=placed.width,
                height=placed.height,
                distorted=placed.distorted,
                is_empty=resolved.is_empty,
                data_extent=_bbox_model(resolved.data_extent),
            )
        )

    logger.info("Layout request: %d inset(s), %d advisory(ies)", len(insets), len(advisories))
    return LayoutResponse(
        main_ratio=configuration.main_ratio,
        full_ratio=configuration.full_ratio,
        overall_extent=_bbox_model(configuration.overall_extent),
        insets=insets,
        advisories=advisories,
    )


@router.post("/render", response_class=Response)
def render(
    request: RenderRequest,
    cfg: Settings = Depends(get_settings),
) -> Response:
    configuration, _ = _build(request)
    height = request.height_in
    renderer = MatplotlibRenderer(figsize=(height * configuration.full_ratio, height), dpi=cfg.render_dpi)
    figure = compose(
        geometry_drawer(configuration.datasets, facecolor=request.facecolor),
        configuration,
        renderer=renderer,
    )
    return Response(content=figure_to_png(figure, dpi=cfg.render_dpi), media_type="image/png")
