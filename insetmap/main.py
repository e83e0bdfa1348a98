"""FastAPI app factory."""

from __future__ import annotations

import logging

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from insetmap.config import settings
from insetmap.engine.errors import InsetMapError
from insetmap.models.responses import ErrorResponse

load_dotenv()

logging.basicConfig(
    level=getattr(logging, settings.insetmap_log_level.upper(), logging.INFO),
    format="%(asctime)s %(name)s %(levelname)s %(message)s",
)

logger = logging.getLogger(__name__)


async def _inset_error_handler(request: Request, exc: InsetMapError) -> JSONResponse:
    logger.info("Rejected %s: %s: %s", request.url.path, type(exc).__name__, exc)
    body = ErrorResponse(error=type(exc).__name__, detail=str(exc))
    return JSONResponse(status_code=422, content=body.model_dump())


def create_app() -> FastAPI:
    app = FastAPI(
        title="insetmap",
        description="Inset map layout engine: aspect-correct placement of inset subplots",
        version="0.1.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(InsetMapError, _inset_error_handler)

    from insetmap.api.router import api_router

    app.include_router(api_router)

    return app


app = create_app()
