"""LayoutResolver: final normalized canvas rectangle for every inset.

Pure, single pass over a resolved ``LayoutConfiguration``. Insets are sized
so their rendered width/height ratio equals their data aspect ratio divided
by the canvas ratio; the only exception is an inset whose caller fixed both
width and height.

Sizes are expressed relative to the main plot, which the renderer letterboxes
inside the canvas to keep its own aspect ratio:

    full_ratio > main_ratio  → main plot narrower than the canvas
    full_ratio < main_ratio  → main plot shorter than the canvas

Positions are not clamped: an inset may extend past the canvas edge.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from insetmap.engine.bbox import features
from insetmap.engine.configuration import LayoutConfiguration, ResolvedSpec
from insetmap.engine.constants import ASPECT_TOLERANCE, INSET_MARGIN
from insetmap.engine.errors import DegenerateExtentError
from insetmap.engine.spec import (
    AnchorPosition,
    ExplicitPosition,
    HorizontalAnchor,
    SizeMode,
    VerticalAnchor,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedLayout:
    """Inset rectangle in canvas fractions, anchored bottom-left."""

    x: float
    y: float
    width: float
    height: float
    # True only when an explicit width+height box disagrees with the data ratio.
    distorted: bool = False

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height

    def as_rect(self) -> list[float]:
        """``[x, y, width, height]``: the order ``Figure.add_axes`` expects."""
        return [self.x, self.y, self.width, self.height]


def compression_factors(full_ratio: float, main_ratio: float) -> tuple[float, float]:
    """Fraction of canvas width and height the letterboxed main plot occupies."""
    if full_ratio > main_ratio:
        return main_ratio / full_ratio, 1.0
    if full_ratio < main_ratio:
        return 1.0, full_ratio / main_ratio
    return 1.0, 1.0


def anchor_offset(anchor: HorizontalAnchor | VerticalAnchor, size: float, margin: float) -> float:
    """Offset along one axis for an anchored inset of the given size."""
    if anchor in (HorizontalAnchor.LEFT, VerticalAnchor.BOTTOM):
        return margin
    if anchor in (HorizontalAnchor.RIGHT, VerticalAnchor.TOP):
        return 1.0 - size - margin
    return 0.5 - size / 2


def resolve_layout(
    configuration: LayoutConfiguration,
    margin: float = INSET_MARGIN,
) -> list[ResolvedLayout]:
    """One ``ResolvedLayout`` per inset, in spec order (main excluded).

    Raises ``DegenerateExtentError`` if any extent has zero width or height;
    there are no partial results.
    """
    main = features(configuration.main.data_extent)
    full_ratio = configuration.full_ratio
    width_factor, height_factor = compression_factors(full_ratio, main.aspect_ratio)

    layouts: list[ResolvedLayout] = []
    for resolved in configuration.insets:
        layout = _resolve_inset(resolved, main, full_ratio, width_factor, height_factor, margin)
        logger.debug(
            "Inset %s → x=%.4f y=%.4f w=%.4f h=%.4f",
            resolved.spec.label, layout.x, layout.y, layout.width, layout.height,
        )
        layouts.append(layout)
    return layouts


def _resolve_inset(
    resolved: ResolvedSpec,
    main,
    full_ratio: float,
    width_factor: float,
    height_factor: float,
    margin: float,
) -> ResolvedLayout:
    spec = resolved.spec
    inset = features(resolved.data_extent)
    rel_x = inset.x_range / main.x_range
    rel_y = inset.y_range / main.y_range

    # Ratio the inset must show on the canvas to be undistorted.
    effective_ratio = (rel_x / rel_y) * main.aspect_ratio / full_ratio

    sizing = spec.sizing
    distorted = False
    if sizing.mode is SizeMode.SCALE_FACTOR:
        width = rel_x * width_factor * sizing.scale_factor
        height = rel_y * height_factor * sizing.scale_factor
    elif sizing.mode is SizeMode.EXPLICIT_WIDTH:
        width = sizing.width
        height = width / effective_ratio
    elif sizing.mode is SizeMode.EXPLICIT_HEIGHT:
        height = sizing.height
        width = height * effective_ratio
    elif sizing.mode is SizeMode.EXPLICIT_BOTH:
        width = sizing.width
        height = sizing.height
        distorted = not math.isclose(width / height, effective_ratio, rel_tol=ASPECT_TOLERANCE)
        if distorted:
            logger.warning(
                "Inset %s: width=%.4f and height=%.4f distort its aspect ratio "
                "(%.4f on canvas instead of %.4f)",
                spec.label, width, height, width / height, effective_ratio,
            )
    else:
        raise ValueError(f"Unknown size mode: {sizing.mode}")

    if not (math.isfinite(width) and math.isfinite(height)) or width <= 0 or height <= 0:
        raise DegenerateExtentError(
            f"Inset {spec.label} resolved to an invalid size ({width}, {height})"
        )

    position = spec.position
    if isinstance(position, ExplicitPosition):
        x, y = position.left, position.bottom
    elif isinstance(position, AnchorPosition):
        x = anchor_offset(position.horizontal, width, margin)
        y = anchor_offset(position.vertical, height, margin)
    else:
        raise ValueError(f"Inset {spec.label} has no position")

    return ResolvedLayout(x=x, y=y, width=width, height=height, distorted=distorted)
