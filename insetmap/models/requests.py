"""API request models."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field


class SpecModel(BaseModel):
    name: str | None = Field(default=None, description="Label echoed back in the response")
    main: bool = Field(default=False, description="Marks the main plot (exactly one)")
    xmin: float | None = None
    xmax: float | None = None
    ymin: float | None = None
    ymax: float | None = None
    loc: str | None = Field(default="right bottom", description="Anchor, e.g. 'left top'")
    loc_left: float | None = Field(default=None, description="Explicit left edge in [0, 1]")
    loc_bottom: float | None = Field(default=None, description="Explicit bottom edge in [0, 1]")
    width: float | None = Field(default=None, description="Canvas fraction in (0, 1]")
    height: float | None = Field(default=None, description="Canvas fraction in (0, 1]")
    scale_factor: float | None = Field(default=None, description="Size relative to the main plot")


class LayoutRequest(BaseModel):
    geometries: list[dict[str, Any]] = Field(..., description="GeoJSON geometries or Features")
    specs: list[SpecModel] = Field(..., description="One main spec plus insets")
    full_ratio: float = Field(default=1.0, description="Canvas width/height")
    crs: str | None = Field(default=None, description="CRS label of the geometries (opaque)")
    border_style: dict[str, Any] = Field(default_factory=dict)
    empty_policy: Literal["raise", "placeholder"] = "raise"


class RenderRequest(LayoutRequest):
    height_in: float = Field(default=6.0, description="Output height in inches")
    facecolor: str = "#4ECDC4"
