"""Save-time sizing: derive the missing output dimension from ``main_ratio``."""

from __future__ import annotations

import logging

from insetmap.engine.errors import InvalidRatioError, MissingDimensionError, advise

logger = logging.getLogger(__name__)


def compute_save_size(
    main_ratio: float,
    width: float | None = None,
    height: float | None = None,
    ratio_scale: float = 1.0,
) -> tuple[float, float]:
    """Return ``(width, height)`` in the caller's physical units.

    ``ratio_scale`` widens (>1) or narrows (<1) the output relative to the
    main plot, e.g. to leave room for a legend. When both dimensions are
    given they are returned unchanged with an advisory.
    """
    if not main_ratio > 0:
        raise InvalidRatioError(f"main_ratio must be positive, got {main_ratio}")
    if not ratio_scale > 0:
        raise InvalidRatioError(f"ratio_scale must be positive, got {ratio_scale}")

    ratio = main_ratio * ratio_scale
    if width is not None and height is not None:
        advise(
            "Both width and height given: the saved image ratio may not match the "
            "inset configuration.",
            logger,
        )
        return float(width), float(height)
    if width is not None:
        return float(width), width / ratio
    if height is not None:
        return height * ratio, float(height)
    raise MissingDimensionError("Either width or height must be given")
