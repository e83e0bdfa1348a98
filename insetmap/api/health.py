"""Health check endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from insetmap.config import Settings
from insetmap.dependencies import get_settings
from insetmap.models.responses import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(cfg: Settings = Depends(get_settings)) -> HealthResponse:
    return HealthResponse(
        status="ok",
        version="0.1.0",
        inset_margin=cfg.inset_margin,
        render_dpi=cfg.render_dpi,
    )
