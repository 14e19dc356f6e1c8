"""Prometheus scrape endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Request, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest


def scrape(request: Request) -> Response:
    # Sync handler: FastAPI runs it on the threadpool, beside the poll task.
    registry = request.app.state.registry
    return Response(content=generate_latest(registry.collector_registry), media_type=CONTENT_TYPE_LATEST)


def build_router(telemetry_path: str) -> APIRouter:
    router = APIRouter(tags=["metrics"])
    router.add_api_route(telemetry_path, scrape, methods=["GET"], include_in_schema=False)
    return router
