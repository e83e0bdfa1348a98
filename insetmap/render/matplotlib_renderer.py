"""Matplotlib rendering collaborator.

A render object is any callable ``draw(ax)`` that plots onto a matplotlib
``Axes``. ``render`` only records it with its limits; drawing happens in
``place``, which builds one ``Figure`` with the main axes filling the canvas
and one extra axes per inset at its resolved rectangle.

Uses ``matplotlib.figure.Figure`` directly, never pyplot, so no global
figure state is touched.
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Callable, Sequence

from matplotlib.axes import Axes
from matplotlib.figure import Figure
from matplotlib.patches import Polygon as PolygonPatch

from insetmap.config import settings
from insetmap.engine.bbox import BoundingBox
from insetmap.engine.configuration import LayoutConfiguration, last_configuration
from insetmap.engine.resolver import ResolvedLayout
from insetmap.engine.sizing import compute_save_size

logger = logging.getLogger(__name__)

DrawFn = Callable[[Axes], Any]

# Inset axes stack above the main axes in placement order.
_INSET_ZORDER_BASE = 10


@dataclass(frozen=True)
class SubplotArtifact:
    draw: DrawFn
    bbox: BoundingBox
    crs: Any = None
    border: dict[str, Any] | None = None


class MatplotlibRenderer:
    """Renderer producing a single matplotlib ``Figure``."""

    def __init__(
        self,
        figsize: tuple[float, float] | None = None,
        dpi: float | None = None,
    ) -> None:
        self.figsize = figsize
        self.dpi = dpi or settings.render_dpi

    def render(self, render_object: DrawFn, bbox: BoundingBox, crs: Any) -> SubplotArtifact:
        if not callable(render_object):
            raise TypeError(
                f"Matplotlib render objects must be callables taking an Axes, got {type(render_object).__name__}"
            )
        return SubplotArtifact(draw=render_object, bbox=bbox, crs=crs)

    def apply_border(self, artifact: SubplotArtifact, style: dict[str, Any]) -> SubplotArtifact:
        return replace(artifact, border=dict(style))

    def place(
        self,
        base: SubplotArtifact,
        insets: Sequence[tuple[SubplotArtifact, ResolvedLayout]],
    ) -> Figure:
        fig = Figure(figsize=self.figsize, dpi=self.dpi)

        main_ax = fig.add_axes([0.0, 0.0, 1.0, 1.0])
        # "box" letterboxes the main plot inside the canvas, which is what
        # the resolver's compression factors assume.
        _draw_artifact(main_ax, base, aspect="equal", adjustable="box")

        for i, (artifact, layout) in enumerate(insets):
            ax = fig.add_axes(layout.as_rect())
            ax.set_zorder(_INSET_ZORDER_BASE + i)
            # Keep the laid-out box; a distorted box is the caller's explicit choice.
            aspect = "auto" if layout.distorted else "equal"
            _draw_artifact(ax, artifact, aspect=aspect, adjustable="datalim")

        logger.debug("Placed %d inset axes on figure", len(insets))
        return fig


def _draw_artifact(ax: Axes, artifact: SubplotArtifact, aspect: str, adjustable: str) -> None:
    artifact.draw(ax)

    xmin, ymin, xmax, ymax = artifact.bbox.as_tuple()
    ax.set_xlim(xmin, xmax)
    ax.set_ylim(ymin, ymax)
    ax.set_aspect(aspect, adjustable=adjustable, anchor="C")
    ax.set_xticks([])
    ax.set_yticks([])

    border = artifact.border
    if border is None:
        for s in ax.spines.values():
            s.set_visible(False)
        return

    ax.set_facecolor(border.get("fill", "white"))
    for s in ax.spines.values():
        s.set_visible(True)
        s.set_edgecolor(border.get("color", "black"))
        s.set_linewidth(border.get("linewidth", 1.0))


def geometry_drawer(
    datasets: Sequence[Any],
    facecolor: str = "#4ECDC4",
    edgecolor: str = "#333333",
    linewidth: float = 0.5,
) -> DrawFn:
    """Render object drawing every Shapely geometry in ``datasets``.

    Geometries are drawn as given: pass datasets already in the plot CRS.
    """

    def draw(ax: Axes) -> None:
        for dataset in datasets:
            for geom in dataset.geometries:
                _draw_geometry(ax, geom, facecolor, edgecolor, linewidth)

    return draw


def _draw_geometry(ax: Axes, geom, facecolor: str, edgecolor: str, linewidth: float) -> None:
    if geom is None or geom.is_empty:
        return
    if geom.geom_type == "Polygon":
        ax.add_patch(
            PolygonPatch(
                list(geom.exterior.coords),
                closed=True,
                facecolor=facecolor,
                edgecolor=edgecolor,
                linewidth=linewidth,
            )
        )
    elif geom.geom_type in ("LineString", "LinearRing"):
        xs, ys = geom.xy
        ax.plot(xs, ys, color=edgecolor, linewidth=linewidth)
    elif geom.geom_type == "Point":
        ax.plot([geom.x], [geom.y], marker="o", color=edgecolor, markersize=2)
    elif hasattr(geom, "geoms"):
        for part in geom.geoms:
            _draw_geometry(ax, part, facecolor, edgecolor, linewidth)


def save_composition(
    figure: Figure,
    path: str | Path,
    width: float | None = None,
    height: float | None = None,
    ratio_scale: float = 1.0,
    configuration: LayoutConfiguration | None = None,
    dpi: float | None = None,
) -> tuple[float, float]:
    """Size ``figure`` from the main plot's aspect ratio and save it.

    ``width``/``height`` are in inches; give one and the other is derived.
    Returns the ``(width, height)`` used.
    """
    if configuration is None:
        configuration = last_configuration()
    size = compute_save_size(configuration.main_ratio, width, height, ratio_scale)
    figure.set_size_inches(*size)
    figure.savefig(str(path), dpi=dpi or settings.render_dpi)
    logger.info("Saved composition to %s (%.2f x %.2f in)", path, *size)
    return size


def figure_to_png(figure: Figure, dpi: float | None = None) -> bytes:
    buf = io.BytesIO()
    figure.savefig(buf, format="png", dpi=dpi or settings.render_dpi)
    return buf.getvalue()
