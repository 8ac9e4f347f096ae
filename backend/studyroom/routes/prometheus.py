"""
Prometheus metrics endpoint.

Public, unauthenticated scrape target exposing the counters recorded by the
booking engine, the lock scope and the weekly reset.
"""

from fastapi import APIRouter, Response

from studyroom.monitoring.prometheus_metrics import prometheus_metrics

router = APIRouter()


@router.get("/metrics", include_in_schema=False)
def metrics() -> Response:
    return Response(
        content=prometheus_metrics.get_metrics(),
        media_type=prometheus_metrics.get_content_type(),
    )
