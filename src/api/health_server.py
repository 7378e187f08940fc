"""Health endpoint server, a separate FastAPI app for the sidecar health port."""

from __future__ import annotations

from fastapi import FastAPI

from src.api.health_routes import health_router
from src.health.evaluator import HealthEvaluator


def create_health_app(evaluator: HealthEvaluator) -> FastAPI:
    """Create the health app. It shares nothing with the main app but the process."""
    app = FastAPI(
        title="Album Service Health",
        version="0.1.0",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.evaluator = evaluator
    app.include_router(health_router)
    return app
