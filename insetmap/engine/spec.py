"""SubplotSpec: the declarative description of one subplot (main or inset).

Usage:
    main = main_spec()
    detail = inset_spec(xmin=-84, xmax=-75, ymin=33, ymax=37, loc="left bottom", width=0.3)

Position and sizing are tagged variants picked once at construction, so the
resolver switches on a closed set instead of probing which fields are set.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Union

from insetmap.engine.bbox import BoundingBox, check_ordering
from insetmap.engine.constants import DEFAULT_LOC, DEFAULT_SCALE_FACTOR
from insetmap.engine.errors import (
    InvalidPositionError,
    InvalidScaleFactorError,
    PositionOutOfRangeError,
    SizeOutOfRangeError,
    advise,
)

logger = logging.getLogger(__name__)


class HorizontalAnchor(str, enum.Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class VerticalAnchor(str, enum.Enum):
    BOTTOM = "bottom"
    CENTER = "center"
    TOP = "top"


@dataclass(frozen=True)
class AnchorPosition:
    horizontal: HorizontalAnchor
    vertical: VerticalAnchor

    @classmethod
    def parse(cls, loc: str) -> AnchorPosition:
        """Parse ``"<horizontal> <vertical>"``, e.g. ``"left top"``."""
        tokens = loc.lower().split()
        if len(tokens) != 2:
            raise InvalidPositionError(
                f"loc must be '<left|center|right> <bottom|center|top>', got {loc!r}"
            )
        try:
            horizontal = HorizontalAnchor(tokens[0])
        except ValueError:
            raise InvalidPositionError(
                f"Invalid horizontal position {tokens[0]!r} in loc {loc!r}"
            ) from None
        try:
            vertical = VerticalAnchor(tokens[1])
        except ValueError:
            raise InvalidPositionError(
                f"Invalid vertical position {tokens[1]!r} in loc {loc!r}"
            ) from None
        return cls(horizontal=horizontal, vertical=vertical)

    def __str__(self) -> str:
        return f"{self.horizontal.value} {self.vertical.value}"


@dataclass(frozen=True)
class ExplicitPosition:
    left: float
    bottom: float


Position = Union[AnchorPosition, ExplicitPosition]


class SizeMode(enum.Enum):
    EXPLICIT_WIDTH = "explicit_width"
    EXPLICIT_HEIGHT = "explicit_height"
    EXPLICIT_BOTH = "explicit_both"
    SCALE_FACTOR = "scale_factor"


@dataclass(frozen=True)
class Sizing:
    mode: SizeMode
    width: float | None = None
    height: float | None = None
    scale_factor: float | None = None


@dataclass(frozen=True)
class SubplotSpec:
    requested_bbox: BoundingBox = field(default_factory=BoundingBox)
    is_main: bool = False
    position: Position | None = None
    sizing: Sizing | None = None
    # Opaque payload for the renderer; compared by identity, not value.
    render_object: Any = field(default=None, compare=False)
    name: str | None = None

    @property
    def label(self) -> str:
        if self.name:
            return self.name
        return "main" if self.is_main else "inset"


def inset_spec(
    xmin: float | None = None,
    xmax: float | None = None,
    ymin: float | None = None,
    ymax: float | None = None,
    loc: str | None = DEFAULT_LOC,
    loc_left: float | None = None,
    loc_bottom: float | None = None,
    width: float | None = None,
    height: float | None = None,
    scale_factor: float | None = None,
    main: bool = False,
    render_object: Any = None,
    name: str | None = None,
) -> SubplotSpec:
    """Create and validate a subplot specification.

    Args:
        xmin, xmax, ymin, ymax: Target bbox in data coordinates. Any may be
            ``None`` and is filled from the overall data extent later.
        loc: Anchor string such as ``"left bottom"`` or ``"center top"``.
            Ignored when ``loc_left``/``loc_bottom`` are given.
        loc_left, loc_bottom: Explicit bottom-left corner in [0, 1].
        width, height: Size as a fraction of the canvas, each in (0, 1].
        scale_factor: Size relative to the main plot's own data-to-canvas
            scale. Wins over ``width``/``height``.
        main: Marks the main plot. Its bbox is always the full extent and it
            skips position/size validation.
        render_object: Optional renderer payload overriding the default.
        name: Optional label for logs and API output.

    Raises:
        InvertedBoundsError, InvalidPositionError, PositionOutOfRangeError,
        SizeOutOfRangeError, InvalidScaleFactorError.
    """
    if main:
        if any(v is not None for v in (xmin, xmax, ymin, ymax)):
            advise(
                "The main plot always covers the full data extent; its bbox fields are ignored.",
                logger,
            )
        return SubplotSpec(
            requested_bbox=BoundingBox(),
            is_main=True,
            render_object=render_object,
            name=name,
        )

    bbox = BoundingBox(xmin=xmin, ymin=ymin, xmax=xmax, ymax=ymax)
    check_ordering(bbox)

    position = _parse_position(loc, loc_left, loc_bottom)
    sizing = _parse_sizing(width, height, scale_factor)
    return SubplotSpec(
        requested_bbox=bbox,
        is_main=False,
        position=position,
        sizing=sizing,
        render_object=render_object,
        name=name,
    )


def main_spec(render_object: Any = None, name: str | None = "main") -> SubplotSpec:
    """Shorthand for ``inset_spec(main=True, ...)``."""
    return inset_spec(main=True, render_object=render_object, name=name)


def _parse_position(
    loc: str | None,
    loc_left: float | None,
    loc_bottom: float | None,
) -> Position:
    if loc_left is not None or loc_bottom is not None:
        if loc_left is None or loc_bottom is None:
            raise InvalidPositionError("loc_left and loc_bottom must be given together")
        if not (0.0 <= loc_left <= 1.0 and 0.0 <= loc_bottom <= 1.0):
            raise PositionOutOfRangeError("loc_left and loc_bottom must be between 0 and 1")
        return ExplicitPosition(left=float(loc_left), bottom=float(loc_bottom))

    if not loc:
        raise InvalidPositionError("Either loc or both loc_left and loc_bottom must be given")
    return AnchorPosition.parse(loc)


def _parse_sizing(
    width: float | None,
    height: float | None,
    scale_factor: float | None,
) -> Sizing:
    if width is not None and not 0.0 < width <= 1.0:
        raise SizeOutOfRangeError(f"width must be between 0 and 1, got {width}")
    if height is not None and not 0.0 < height <= 1.0:
        raise SizeOutOfRangeError(f"height must be between 0 and 1, got {height}")
    if scale_factor is not None and not scale_factor > 0.0:
        raise InvalidScaleFactorError(f"scale_factor must be positive, got {scale_factor}")

    if scale_factor is not None:
        if width is not None or height is not None:
            advise(
                "scale_factor is set: width and height are derived from the main plot "
                "and the explicit values are ignored.",
                logger,
            )
        return Sizing(mode=SizeMode.SCALE_FACTOR, scale_factor=float(scale_factor))

    if width is not None and height is not None:
        advise(
            "Providing both width and height is not recommended: the inset may be "
            "distorted if they disagree with its data aspect ratio.",
            logger,
        )
        return Sizing(mode=SizeMode.EXPLICIT_BOTH, width=float(width), height=float(height))
    if width is not None:
        return Sizing(mode=SizeMode.EXPLICIT_WIDTH, width=float(width))
    if height is not None:
        return Sizing(mode=SizeMode.EXPLICIT_HEIGHT, height=float(height))

    advise(
        f"Neither width, height nor scale_factor given. Using scale_factor = "
        f"{DEFAULT_SCALE_FACTOR} relative to the main plot.",
        logger,
    )
    return Sizing(mode=SizeMode.SCALE_FACTOR, scale_factor=DEFAULT_SCALE_FACTOR)
