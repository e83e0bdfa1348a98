"""Bounding-box helpers. Leaf module, no engine imports besides errors."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Iterable, NamedTuple

import numpy as np

from insetmap.engine.errors import (
    DegenerateExtentError,
    EmptyInputError,
    InvertedBoundsError,
    MissingReferenceError,
)

_FIELDS = ("xmin", "ymin", "xmax", "ymax")


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned box in data coordinates. ``None`` marks a pending field."""

    xmin: float | None = None
    ymin: float | None = None
    xmax: float | None = None
    ymax: float | None = None

    def __post_init__(self) -> None:
        # Zero-width boxes are representable (a crop down to a point);
        # features() rejects them as degenerate.
        check_ordering(self, strict=False)

    @classmethod
    def from_bounds(cls, bounds: Iterable[float]) -> BoundingBox:
        """Build from a ``(xmin, ymin, xmax, ymax)`` sequence (shapely order)."""
        xmin, ymin, xmax, ymax = (float(v) for v in bounds)
        return cls(xmin=xmin, ymin=ymin, xmax=xmax, ymax=ymax)

    @property
    def is_complete(self) -> bool:
        return all(getattr(self, name) is not None for name in _FIELDS)

    @property
    def is_pending(self) -> bool:
        return all(getattr(self, name) is None for name in _FIELDS)

    @property
    def pending_fields(self) -> list[str]:
        return [name for name in _FIELDS if getattr(self, name) is None]

    @property
    def x_range(self) -> float:
        return self._require("xmax") - self._require("xmin")

    @property
    def y_range(self) -> float:
        return self._require("ymax") - self._require("ymin")

    def as_tuple(self) -> tuple[float, float, float, float]:
        """Return ``(xmin, ymin, xmax, ymax)``; the box must be complete."""
        return tuple(self._require(name) for name in _FIELDS)  # type: ignore[return-value]

    def _require(self, name: str) -> float:
        value = getattr(self, name)
        if value is None:
            raise MissingReferenceError(f"Bounding box field {name!r} is pending")
        return value


class BoxFeatures(NamedTuple):
    x_range: float
    y_range: float
    aspect_ratio: float


def union(boxes: Iterable[BoundingBox]) -> BoundingBox:
    """Smallest box covering every input box."""
    boxes = list(boxes)
    if not boxes:
        raise EmptyInputError("Cannot compute the union of zero bounding boxes")

    mat = np.array([b.as_tuple() for b in boxes], dtype=np.float64)
    return BoundingBox(
        xmin=float(np.min(mat[:, 0])),
        ymin=float(np.min(mat[:, 1])),
        xmax=float(np.max(mat[:, 2])),
        ymax=float(np.max(mat[:, 3])),
    )


def fill_missing(box: BoundingBox, reference: BoundingBox | None) -> BoundingBox:
    """Replace each pending field of ``box`` with the field from ``reference``.

    Known fields are never touched. Raises ``MissingReferenceError`` when a
    field is pending and there is nothing (or nothing known) to fill it from.
    """
    values: dict[str, float | None] = {}
    for f in fields(box):
        value = getattr(box, f.name)
        if value is None:
            if reference is None or getattr(reference, f.name) is None:
                raise MissingReferenceError(
                    f"Bounding box field {f.name!r} is pending and no reference extent provides it"
                )
            value = getattr(reference, f.name)
        values[f.name] = value
    return BoundingBox(**values)


def features(box: BoundingBox) -> BoxFeatures:
    """x/y ranges and aspect ratio (x_range / y_range) of a complete box."""
    x_range = box.x_range
    y_range = box.y_range
    if y_range <= 0 or x_range <= 0:
        raise DegenerateExtentError(
            f"Degenerate extent: x_range={x_range}, y_range={y_range}"
        )
    return BoxFeatures(x_range=x_range, y_range=y_range, aspect_ratio=x_range / y_range)


def check_ordering(box: BoundingBox, strict: bool = True) -> None:
    """Raise ``InvertedBoundsError`` if a known min is not below its max.

    With ``strict=False`` equal endpoints are accepted.
    """
    for lo, hi in (("xmin", "xmax"), ("ymin", "ymax")):
        a, b = getattr(box, lo), getattr(box, hi)
        if a is None or b is None:
            continue
        if a > b or (strict and a == b):
            raise InvertedBoundsError(f"{lo} must be less than {hi} (got {a} and {b})")
