"""FastAPI application server."""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from src.api.routes import router
from src.catalog.albums import AlbumCatalog
from src.runtime.ballast import MemoryBallast

logger = logging.getLogger(__name__)


# ── Request logging middleware ───────────────────────────────────────────────


class RequestLogMiddleware(BaseHTTPMiddleware):
    """Log method, path, status and latency of every request."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        t0 = time.perf_counter()
        response = await call_next(request)
        logger.info(
            "%s %s -> %d (%.1fms)",
            request.method,
            request.url.path,
            response.status_code,
            (time.perf_counter() - t0) * 1000,
        )
        return response


# ── Lifespan ─────────────────────────────────────────────────────────────────


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    logger.info("Album service ready: %d albums in catalog", len(app.state.catalog))

    yield

    # Shutdown
    app.state.ballast.release()


# ── App factory ──────────────────────────────────────────────────────────────


def create_app(
    catalog: AlbumCatalog | None = None,
    ballast: MemoryBallast | None = None,
) -> FastAPI:
    """Create the application server. State is owned by the app instance."""
    app = FastAPI(
        title="Album Service",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state.catalog = catalog if catalog is not None else AlbumCatalog()
    app.state.ballast = ballast if ballast is not None else MemoryBallast()

    app.add_middleware(RequestLogMiddleware)
    app.include_router(router)

    return app
