"""Health routes — liveness and readiness for orchestrators.

Endpoints:
  GET  /live   — 200 when every liveness probe passes, else 503
  GET  /ready  — 200 when every readiness probe passes, else 503

The body maps each failed probe to its error message. Pass ``?full=1`` to
list passing probes too (as ``"OK"``).
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from src.health.probes import ProbeKind

logger = logging.getLogger(__name__)

health_router = APIRouter()


def _respond(request: Request, kind: ProbeKind, full: bool) -> JSONResponse:
    evaluator = request.app.state.evaluator
    result = evaluator.evaluate(kind)
    return JSONResponse(
        status_code=200 if result.ok else 503,
        content=result.to_body(full=full),
    )


# Sync handlers run on the threadpool.
@health_router.get("/live")
def live(request: Request, full: bool = False) -> JSONResponse:
    return _respond(request, ProbeKind.LIVENESS, full)


@health_router.get("/ready")
def ready(request: Request, full: bool = False) -> JSONResponse:
    return _respond(request, ProbeKind.READINESS, full)
