"""API response models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    inset_margin: float = 0.02
    render_dpi: int = 150


class BBoxModel(BaseModel):
    xmin: float
    ymin: float
    xmax: float
    ymax: float


class InsetLayoutModel(BaseModel):
    name: str
    x: float
    y: float
    width: float
    height: float
    distorted: bool = False
    is_empty: bool = False
    data_extent: BBoxModel


class LayoutResponse(BaseModel):
    main_ratio: float
    full_ratio: float
    overall_extent: BBoxModel
    insets: list[InsetLayoutModel] = Field(default_factory=list)
    advisories: list[str] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    error: str
    detail: str
