"""Process wiring: registry, poll scheduler and HTTP server."""

from __future__ import annotations

import asyncio
import functools
import logging

import uvicorn

from cloudera_exporter.api.app import create_app
from cloudera_exporter.config.loader import parse_listen_address
from cloudera_exporter.config.models import ExporterConfig
from cloudera_exporter.errors import UnknownServiceError
from cloudera_exporter.health.client import fetch_services, services_url
from cloudera_exporter.metrics.registry import MetricRegistry, create_registry
from cloudera_exporter.scheduler import PollScheduler

logger = logging.getLogger(__name__)


def build_scheduler(config: ExporterConfig, registry: MetricRegistry) -> PollScheduler:
    return PollScheduler(
        functools.partial(fetch_services, config.cloudera),
        registry,
        interval=config.poll.interval,
        include_checks=config.metrics.export_health_checks,
    )


async def run_exporter(config: ExporterConfig) -> int:
    """Serve metrics and poll the Cloudera API until shutdown.

    Returns the process exit code: 0 after a graceful shutdown, 1 when the
    scheduler stopped because a static registry met an unknown service.
    """
    host, port = parse_listen_address(config.web.listen_address)
    registry = create_registry(config.metrics)
    scheduler = build_scheduler(config, registry)
    app = create_app(config, registry, scheduler)
    server = uvicorn.Server(
        uvicorn.Config(app, host=host, port=port, log_config=None, access_log=False)
    )

    logger.info(
        "Polling %s in %s mode, serving %s on %s:%d",
        services_url(config.cloudera.uri, config.cloudera.cluster_name),
        registry.mode.value,
        config.web.telemetry_path,
        host,
        port,
    )

    def _on_poll_done(task: asyncio.Task[None]) -> None:
        if not task.cancelled() and task.exception() is not None:
            server.should_exit = True

    poll_task = asyncio.create_task(scheduler.run(), name="poll-scheduler")
    poll_task.add_done_callback(_on_poll_done)
    try:
        await server.serve()
    finally:
        scheduler.stop()

    try:
        await poll_task
    except UnknownServiceError as exc:
        logger.critical("%s; add it to metrics.services or switch to dynamic mode", exc)
        return 1
    return 0
