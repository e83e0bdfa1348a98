"""Rendering collaborator contract consumed by ``compose()``."""

from __future__ import annotations

from typing import Any, Protocol, Sequence, runtime_checkable

from insetmap.engine.bbox import BoundingBox
from insetmap.engine.resolver import ResolvedLayout


@runtime_checkable
class Renderer(Protocol):
    def render(self, render_object: Any, bbox: BoundingBox, crs: Any) -> Any:
        """Turn a payload into a subplot artifact limited to ``bbox``, given in ``crs``."""
        ...

    def apply_border(self, artifact: Any, style: dict[str, Any]) -> Any:
        ...

    def place(self, base: Any, insets: Sequence[tuple[Any, ResolvedLayout]]) -> Any:
        """Overlay each inset artifact on ``base`` at its layout rectangle."""
        ...
