"""FastAPI application factory."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from plaincost_shared.config import settings
from plaincost_shared.db import reset_deployed_connection

from plaincost_api import __version__
from plaincost_api.middleware.logging import LoggingMiddleware
from plaincost_api.responses import error_response
from plaincost_api.routers.health import router as health_router
from plaincost_api.routers.v1 import v1_router

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    yield
    reset_deployed_connection()


async def store_unavailable(request: Request, exc: FileNotFoundError) -> JSONResponse:
    """The deployed store has not been seeded yet."""
    logger.error("deployed_store_missing", path=request.url.path, error=str(exc))
    return JSONResponse(
        error_response("store_unavailable", "Price data is not available yet"),
        status_code=503,
    )


def create_app() -> FastAPI:
    app = FastAPI(
        title="PlainCost API",
        description="Regional price parity lookups, rankings and search",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Read-only API
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    app.add_middleware(LoggingMiddleware)
    app.add_exception_handler(FileNotFoundError, store_unavailable)

    app.include_router(health_router)
    app.include_router(v1_router)

    logger.info("app_created", cors_origins=settings.cors_origins_list)
    return app


app = create_app()
