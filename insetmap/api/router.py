"""API router: health plus the layout and render endpoints under /api."""

from __future__ import annotations

from fastapi import APIRouter

from insetmap.api import health, layout

api_router = APIRouter(prefix="/api")

api_router.include_router(health.router)
api_router.include_router(layout.router)
