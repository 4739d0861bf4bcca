"""Prometheus scrape endpoint."""

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

router = APIRouter()


@router.get("/metrics")
async def metrics() -> Response:
    """Expose lifecycle counters in Prometheus text format.

    Counters: draft_transitions_total{event},
    remote_mirror_failures_total{operation} and
    notifications_total{kind, outcome}.
    """
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
