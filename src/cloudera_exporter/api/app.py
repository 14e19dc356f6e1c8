"""FastAPI application factory for the exporter."""

from __future__ import annotations

from fastapi import FastAPI

from cloudera_exporter import __version__
from cloudera_exporter.api.routes import metrics, status
from cloudera_exporter.config.models import ExporterConfig
from cloudera_exporter.metrics.registry import MetricRegistry
from cloudera_exporter.scheduler import PollScheduler


def create_app(
    config: ExporterConfig,
    registry: MetricRegistry,
    scheduler: PollScheduler | None = None,
) -> FastAPI:
    app = FastAPI(
        title="Cloudera Exporter",
        version=__version__,
        description="Cloudera Manager service health for Prometheus",
    )

    app.state.config = config
    app.state.registry = registry
    app.state.scheduler = scheduler

    app.include_router(metrics.build_router(config.web.telemetry_path))
    app.include_router(status.router)

    return app
