"""
Prometheus metrics endpoint.

Example:
    GET /metrics

    Response:
        # HELP stayhub_booking_transitions_total Total booking lifecycle actions attempted
        # TYPE stayhub_booking_transitions_total counter
        stayhub_booking_transitions_total{action="approve",result="ok"} 3.0
        ...
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

router = APIRouter()


@router.get("/metrics", response_class=Response)
async def metrics() -> Any:
    """Expose all registered collectors in the Prometheus text format."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
