"""Application routes for the album catalog and runtime memory."""

from __future__ import annotations

import json
import logging
from typing import Any

from fastapi import APIRouter, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from src.runtime.memstats import bytes_to_mib, read_mem_stats

logger = logging.getLogger(__name__)

router = APIRouter()


class IndentedJSONResponse(JSONResponse):
    """Pretty-printed JSON for endpoints meant to be read by humans."""

    def render(self, content: Any) -> bytes:
        return json.dumps(content, ensure_ascii=False, indent=4).encode("utf-8")


@router.get("/albums", response_class=IndentedJSONResponse)
def get_albums(request: Request) -> IndentedJSONResponse:
    """List every album in the catalog."""
    catalog = request.app.state.catalog
    return IndentedJSONResponse(jsonable_encoder(catalog.all()))


@router.get("/memory", response_class=IndentedJSONResponse)
def get_memory() -> IndentedJSONResponse:
    """Current process memory statistics, sizes in MiB."""
    return IndentedJSONResponse(read_mem_stats().to_dict())


@router.get("/blow")
def blow_memory(request: Request) -> dict[str, Any]:
    """Grow the memory ballast so the allocation probe eventually trips."""
    ballast = request.app.state.ballast
    ballast.grow()
    logger.info("Memory after /blow: %d MiB", bytes_to_mib(read_mem_stats().alloc))
    return {}
